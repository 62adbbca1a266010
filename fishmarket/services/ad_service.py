"""
Ad lifecycle service.

Listing, creation, owner edits, soft deletion, boosting and moderation of
ads. Counter bumps and the boost credit debit are issued as single
conditional UPDATE statements so concurrent requests cannot lose updates
or overdraw a balance.
"""
from datetime import timedelta
from typing import List, Optional

from flask import current_app
from sqlalchemy import and_, case, or_, update
from sqlalchemy.orm.attributes import set_committed_value

from fishmarket.database import db
from fishmarket.models.ad import Ad, AdStatus
from fishmarket.models.category import Category
from fishmarket.models.user import User
from fishmarket.schemas.ads import (
    AdFilters,
    BoostAdRequest,
    CreateAdRequest,
    ModerateAdRequest,
    UpdateAdRequest,
)
from fishmarket.services.errors import (
    InsufficientCredits,
    NotFound,
    Unauthorized,
)
from fishmarket.services.metrics import get_metrics_service
from fishmarket.services.structured_logging import get_logger
from fishmarket.utils.clock import utcnow

logger = get_logger(__name__)


class AdService:

    def _fail(self, operation: str, error: Exception, **context):
        logger.log_operation_failure(operation, error, **context)
        raise error

    def _get_live_ad(self, operation: str, ad_id: int) -> Ad:
        """Load an ad that can still be mutated; deleted ads count as missing."""
        ad = db.session.get(Ad, ad_id)
        if not ad or ad.is_deleted:
            self._fail(operation, NotFound("Ad not found", ad_id=ad_id), ad_id=ad_id)
        return ad

    def _page_limit(self, requested: Optional[int]) -> int:
        default = current_app.config.get("ADS_PAGE_DEFAULT", 20)
        cap = current_app.config.get("ADS_PAGE_MAX", 100)
        return min(requested or default, cap)

    def list_ads(self, filters: AdFilters) -> List[Ad]:
        """Public listing: active ads only, effectively boosted ones first."""
        now = utcnow()
        query = Ad.query.filter(Ad.status == AdStatus.ACTIVE)

        if filters.category_id is not None:
            query = query.filter(Ad.category_id == filters.category_id)
        if filters.user_id is not None:
            query = query.filter(Ad.user_id == filters.user_id)
        if filters.search:
            query = query.filter(or_(
                Ad.title.icontains(filters.search, autoescape=True),
                Ad.description.icontains(filters.search, autoescape=True),
            ))
        if filters.location:
            query = query.filter(Ad.location.icontains(filters.location, autoescape=True))
        if filters.min_price is not None:
            query = query.filter(Ad.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.filter(Ad.price <= filters.max_price)

        boost_rank = case(
            (and_(Ad.is_boosted.is_(True), Ad.boost_expires_at > now), 0),
            else_=1,
        )
        query = query.order_by(boost_rank, Ad.created_at.desc(), Ad.id.desc())

        if filters.offset:
            query = query.offset(filters.offset)
        return query.limit(self._page_limit(filters.limit)).all()

    def get_ad(self, ad_id: int) -> Optional[Ad]:
        """
        Fetch an ad and count the view; returns None when it does not exist.

        The returned ``view_count`` is the value written by this call's own
        UPDATE, not a later re-read.
        """
        row = db.session.execute(
            update(Ad)
            .where(Ad.id == ad_id)
            .values(view_count=Ad.view_count + 1, updated_at=Ad.updated_at)
            .returning(Ad.view_count)
        ).first()
        if row is None:
            db.session.rollback()
            return None
        db.session.commit()

        ad = db.session.get(Ad, ad_id, populate_existing=True)
        set_committed_value(ad, 'view_count', row.view_count)
        return ad

    def list_user_ads(self, user_id: int) -> List[Ad]:
        return (
            Ad.query.filter_by(user_id=user_id)
            .order_by(Ad.created_at.desc(), Ad.id.desc())
            .all()
        )

    def create_ad(self, data: CreateAdRequest, owner_id: int) -> Ad:
        if not db.session.get(User, owner_id):
            self._fail('create_ad', NotFound("User not found"), user_id=owner_id)
        if not db.session.get(Category, data.category_id):
            self._fail('create_ad', NotFound("Category not found"), category_id=data.category_id)

        ad = Ad(
            user_id=owner_id,
            status=AdStatus.DRAFT,
            is_boosted=False,
            boost_expires_at=None,
            view_count=0,
            contact_count=0,
            **data.model_dump(),
        )
        db.session.add(ad)
        db.session.commit()

        logger.info("Ad created", ad_id=ad.id, user_id=owner_id, category_id=ad.category_id)
        return ad

    def update_ad(self, ad_id: int, data: UpdateAdRequest, requester_id: int) -> Ad:
        ad = self._get_live_ad('update_ad', ad_id)
        if ad.user_id != requester_id:
            self._fail('update_ad', Unauthorized("Only the owner can edit this ad"),
                       ad_id=ad_id, user_id=requester_id)

        for field, value in data.changes().items():
            setattr(ad, field, value)
        ad.updated_at = utcnow()
        db.session.commit()
        return ad

    def delete_ad(self, ad_id: int, requester_id: int) -> bool:
        """Soft delete. Deleting an already deleted ad is a successful no-op."""
        ad = db.session.get(Ad, ad_id)
        if not ad:
            self._fail('delete_ad', NotFound("Ad not found"), ad_id=ad_id)

        requester = db.session.get(User, requester_id)
        is_admin = bool(requester and requester.is_admin)
        if ad.user_id != requester_id and not is_admin:
            self._fail('delete_ad', Unauthorized("Only the owner or an admin can delete this ad"),
                       ad_id=ad_id, user_id=requester_id)

        if ad.is_deleted:
            return True

        ad.status = AdStatus.DELETED
        ad.updated_at = utcnow()
        db.session.commit()

        logger.info("Ad deleted", ad_id=ad_id, user_id=requester_id, by_admin=ad.user_id != requester_id)
        return True

    def boost_ad(self, ad_id: int, data: BoostAdRequest, requester_id: int) -> Ad:
        """
        Promote an ad for ``duration_days``.

        Costs a flat ``BOOST_COST_CREDITS`` per call whatever the duration.
        The debit only succeeds while the balance covers the cost, and it
        commits together with the ad change or not at all. Boosting an ad
        that is already boosted restarts its expiry from now.
        """
        ad = self._get_live_ad('boost_ad', ad_id)
        if ad.user_id != requester_id:
            self._fail('boost_ad', Unauthorized("Only the owner can boost this ad"),
                       ad_id=ad_id, user_id=requester_id)

        cost = current_app.config.get("BOOST_COST_CREDITS", 1)
        now = utcnow()

        try:
            debit = db.session.execute(
                update(User)
                .where(User.id == requester_id, User.boost_credits >= cost)
                .values(boost_credits=User.boost_credits - cost)
            )
            if debit.rowcount == 0:
                raise InsufficientCredits("Insufficient boost credits", user_id=requester_id)

            ad.is_boosted = True
            ad.boost_expires_at = now + timedelta(days=data.duration_days)
            ad.updated_at = now
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.log_operation_failure('boost_ad', e, ad_id=ad_id, user_id=requester_id, cost=cost)
            raise

        metrics = get_metrics_service()
        if metrics:
            metrics.record_boost()
        logger.info("Ad boosted", ad_id=ad_id, user_id=requester_id,
                    duration_days=data.duration_days, cost=cost)
        return ad

    def moderate_ad(self, ad_id: int, data: ModerateAdRequest) -> Ad:
        ad = self._get_live_ad('moderate_ad', ad_id)

        ad.status = data.status
        if data.rejection_reason is not None:
            ad.rejection_reason = data.rejection_reason
        ad.updated_at = utcnow()
        db.session.commit()

        logger.info("Ad moderated", ad_id=ad_id, status=data.status)
        return ad

    def increment_contact_count(self, ad_id: int) -> bool:
        result = db.session.execute(
            update(Ad)
            .where(Ad.id == ad_id, Ad.status != AdStatus.DELETED)
            .values(contact_count=Ad.contact_count + 1, updated_at=Ad.updated_at)
        )
        if result.rowcount == 0:
            db.session.rollback()
            self._fail('increment_contact_count', NotFound("Ad not found"), ad_id=ad_id)
        db.session.commit()
        return True
