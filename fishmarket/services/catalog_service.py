"""
Catalog Service

Category and membership-package management. Both are shared reference data
with soft deactivation: a deactivated record disappears from the active
listings but stays in place for everything that already references it.
"""
from typing import List, Optional, Type

from fishmarket.database import db
from fishmarket.models.category import Category
from fishmarket.models.membership import MembershipPackage
from fishmarket.models.user import User
from fishmarket.schemas.catalog import (
    CreateCategoryRequest,
    CreateMembershipPackageRequest,
    UpdateCategoryRequest,
    UpdateMembershipPackageRequest,
)
from fishmarket.schemas.base import FieldMask, RequestModel
from fishmarket.services.errors import NotFound, NotFoundOrInactive
from fishmarket.services.structured_logging import get_logger

logger = get_logger(__name__)


class _CatalogService:
    model: Type[db.Model]
    label: str

    def list_active(self) -> List[db.Model]:
        return self.model.query.filter_by(is_active=True).order_by(self.model.id.asc()).all()

    def get(self, entity_id: int) -> Optional[db.Model]:
        """Direct lookup; inactive records are returned as well."""
        return db.session.get(self.model, entity_id)

    def create(self, data: RequestModel) -> db.Model:
        entity = self.model(**data.model_dump(), is_active=True)
        db.session.add(entity)
        db.session.commit()
        logger.info(f"{self.label} created", entity_id=entity.id)
        return entity

    def update(self, entity_id: int, data: FieldMask) -> db.Model:
        entity = db.session.get(self.model, entity_id)
        if not entity:
            error = NotFound(f"{self.label} not found")
            logger.log_operation_failure(f"update_{self.model.__tablename__}", error, entity_id=entity_id)
            raise error

        # is_active is not part of the update schemas; activation goes through deactivate()
        for field, value in data.changes().items():
            setattr(entity, field, value)
        db.session.commit()
        return entity

    def deactivate(self, entity_id: int) -> bool:
        entity = db.session.get(self.model, entity_id)
        if not entity:
            return False
        if entity.is_active:
            entity.is_active = False
            db.session.commit()
            logger.info(f"{self.label} deactivated", entity_id=entity_id)
        return True


class CategoryService(_CatalogService):
    model = Category
    label = "Category"

    def create(self, data: CreateCategoryRequest) -> Category:
        return super().create(data)

    def update(self, entity_id: int, data: UpdateCategoryRequest) -> Category:
        return super().update(entity_id, data)


class MembershipService(_CatalogService):
    model = MembershipPackage
    label = "Membership package"

    def create(self, data: CreateMembershipPackageRequest) -> MembershipPackage:
        return super().create(data)

    def update(self, entity_id: int, data: UpdateMembershipPackageRequest) -> MembershipPackage:
        return super().update(entity_id, data)

    def get_active(self, package_id: int) -> MembershipPackage:
        package = db.session.get(MembershipPackage, package_id)
        if not package or not package.is_active:
            raise NotFoundOrInactive("Membership package not found or inactive", membership_id=package_id)
        return package

    def assign_to_user(self, user_id: int, package_id: int) -> bool:
        """Point a user at a package without granting its credits."""
        try:
            package = self.get_active(package_id)
        except NotFoundOrInactive as e:
            logger.log_operation_failure('assign_membership', e, user_id=user_id, membership_id=package_id)
            raise

        user = db.session.get(User, user_id)
        if not user:
            error = NotFound("User not found")
            logger.log_operation_failure('assign_membership', error, user_id=user_id, membership_id=package_id)
            raise error

        user.membership_id = package.id
        db.session.commit()
        logger.info("Membership assigned", user_id=user_id, membership_id=package.id)
        return True
