"""
Tests for the ad lifecycle: listing order, views, boosts, moderation, deletion.
"""
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy import update

from fishmarket.database import db
from fishmarket.models.ad import Ad, AdStatus
from fishmarket.models.user import User
from fishmarket.schemas.ads import (
    AdFilters,
    BoostAdRequest,
    CreateAdRequest,
    ModerateAdRequest,
    UpdateAdRequest,
)
from fishmarket.services.ad_service import AdService
from fishmarket.services.errors import InsufficientCredits, NotFound, Unauthorized
from fishmarket.utils.clock import utcnow


def ad_payload(category_id, **overrides):
    payload = {
        'category_id': category_id,
        'title': 'Koi Kohaku 30cm',
        'description': 'Import quality, healthy',
        'price': '1250000',
        'location': 'Blitar',
        'contact_info': 'wa 0812-3456-7890',
        'images': ['https://cdn.example.com/koi-1.jpg'],
    }
    payload.update(overrides)
    return payload


class TestListing:
    """Public listing"""

    def test_boosted_first_then_newest(self, app, make_user, make_ad):
        owner = make_user()
        a = make_ad(owner, title="A", created_at=utcnow() - timedelta(hours=2))
        b = make_ad(owner, title="B", boosted_for=timedelta(days=1), created_at=utcnow() - timedelta(hours=1))

        ads = AdService().list_ads(AdFilters())
        assert [ad.id for ad in ads] == [b.id, a.id]

    def test_expired_boost_sorts_as_regular(self, app, make_user, make_ad):
        owner = make_user()
        stale = make_ad(owner, title="stale", boosted_for=timedelta(days=-1),
                        created_at=utcnow() - timedelta(hours=3))
        fresh = make_ad(owner, title="fresh", created_at=utcnow() - timedelta(hours=1))
        boosted = make_ad(owner, title="boosted", boosted_for=timedelta(days=2),
                          created_at=utcnow() - timedelta(hours=5))

        ads = AdService().list_ads(AdFilters())
        assert [ad.id for ad in ads] == [boosted.id, fresh.id, stale.id]

    def test_only_active_ads_are_listed(self, app, make_user, make_ad):
        owner = make_user()
        active = make_ad(owner)
        for status in (AdStatus.DRAFT, AdStatus.REJECTED, AdStatus.DELETED, AdStatus.EXPIRED):
            make_ad(owner, status=status)

        assert [ad.id for ad in AdService().list_ads(AdFilters())] == [active.id]

    def test_same_created_at_breaks_ties_by_id(self, app, make_user, make_ad):
        owner = make_user()
        stamp = utcnow()
        first = make_ad(owner, created_at=stamp)
        second = make_ad(owner, created_at=stamp)

        assert [ad.id for ad in AdService().list_ads(AdFilters())] == [second.id, first.id]

    def test_filters_are_conjunctive(self, app, make_user, make_ad, make_category):
        owner = make_user()
        other_category = make_category(name="Ikan Konsumsi")
        make_ad(owner, title="Koi Showa", location="Blitar", price=Decimal("500000"))
        target = make_ad(owner, title="Lele Sangkuriang", description="Bibit KOI-free pond",
                         location="Bogor", price=Decimal("15000"), category_id=other_category.id)
        make_ad(owner, title="Lele Dumbo", location="Bogor", price=Decimal("90000"),
                category_id=other_category.id)

        filters = AdFilters.model_validate({
            'category_id': str(other_category.id),
            'search': 'koi',
            'location': 'bog',
            'min_price': '15000',
            'max_price': '15000',
        })
        assert [ad.id for ad in AdService().list_ads(filters)] == [target.id]

    def test_search_matches_description(self, app, make_user, make_ad):
        owner = make_user()
        ad = make_ad(owner, title="Arwana", description="Golden red, jinak")
        make_ad(owner, title="Cupang", description="Halfmoon")

        assert [a.id for a in AdService().list_ads(AdFilters(search="JINAK"))] == [ad.id]

    def test_search_treats_percent_literally(self, app, make_user, make_ad):
        owner = make_user()
        make_ad(owner, title="Arwana 500 ekor", description="Grosir")
        discounted = make_ad(owner, title="Cupang diskon 50%", description="Grosir")

        assert [a.id for a in AdService().list_ads(AdFilters(search="50%"))] == [discounted.id]

    def test_location_treats_underscore_literally(self, app, make_user, make_ad):
        owner = make_user()
        make_ad(owner, location="Jakarta Barat")
        coded = make_ad(owner, location="Gudang J_karta 2")

        assert [a.id for a in AdService().list_ads(AdFilters(location="j_KARTA"))] == [coded.id]

    def test_limit_is_capped(self, app, make_user, make_ad):
        app.config["ADS_PAGE_MAX"] = 2
        owner = make_user()
        for _ in range(3):
            make_ad(owner)

        assert len(AdService().list_ads(AdFilters(limit=50))) == 2

    def test_min_above_max_is_rejected(self):
        with pytest.raises(ValueError):
            AdFilters(min_price=Decimal("10"), max_price=Decimal("5"))


class TestViews:

    def test_each_fetch_counts_one_view(self, app, make_user, make_ad):
        ad = make_ad(make_user())
        service = AdService()

        for expected in range(1, 6):
            assert service.get_ad(ad.id).view_count == expected

    def test_view_does_not_touch_updated_at(self, app, make_user, make_ad):
        ad = make_ad(make_user())
        before = ad.updated_at
        assert AdService().get_ad(ad.id).updated_at == before

    def test_missing_ad_returns_none(self, app):
        assert AdService().get_ad(999) is None

    def test_view_count_comes_from_the_bump_itself(self, app, make_user, make_ad, reload,
                                                   write_outside_session):
        ad = make_ad(make_user())
        assert ad.view_count == 0
        write_outside_session(update(Ad).where(Ad.id == ad.id).values(view_count=41))

        session = db.session()
        real_commit = session.commit

        def commit_then_another_view():
            real_commit()
            write_outside_session(update(Ad).where(Ad.id == ad.id).values(view_count=Ad.view_count + 1))

        with patch.object(type(session), 'commit', side_effect=commit_then_another_view):
            fetched = AdService().get_ad(ad.id)

        assert fetched.view_count == 42
        assert reload(Ad, ad.id).view_count == 43


class TestCreateAndUpdate:

    def test_create_initial_state(self, app, make_user, make_category):
        owner = make_user()
        category = make_category()

        ad = AdService().create_ad(CreateAdRequest(**ad_payload(category.id)), owner.id)

        assert ad.status == AdStatus.DRAFT
        assert ad.view_count == 0
        assert ad.contact_count == 0
        assert ad.is_boosted is False
        assert ad.boost_expires_at is None
        assert ad.price == Decimal("1250000.00")

    def test_create_unknown_category(self, app, make_user):
        with pytest.raises(NotFound):
            AdService().create_ad(CreateAdRequest(**ad_payload(999)), make_user().id)

    def test_create_unknown_owner(self, app, make_category):
        with pytest.raises(NotFound):
            AdService().create_ad(CreateAdRequest(**ad_payload(make_category().id)), 999)

    def test_image_cap(self, app):
        with pytest.raises(ValueError):
            CreateAdRequest(**ad_payload(1, images=[f"https://cdn.example.com/{i}.jpg" for i in range(11)]))

    def test_image_cap_follows_config(self, app, make_user, make_category):
        app.config["MAX_AD_IMAGES"] = 12
        images = [f"https://cdn.example.com/{i}.jpg" for i in range(12)]
        ad = AdService().create_ad(CreateAdRequest(**ad_payload(make_category().id, images=images)),
                                   make_user().id)
        assert len(ad.images) == 12

        app.config["MAX_AD_IMAGES"] = 2
        with pytest.raises(ValueError):
            UpdateAdRequest(images=images[:3])

    def test_image_cap_on_create_route(self, client, app, make_user, make_category, auth_headers):
        app.config["MAX_AD_IMAGES"] = 1
        response = client.post('/api/v1/ads', json=ad_payload(
            make_category().id, images=['https://cdn.example.com/a.jpg', 'https://cdn.example.com/b.jpg'],
        ), headers=auth_headers(make_user()))

        assert response.status_code == 400
        assert response.get_json()['error'] == 'validation_error'

    def test_update_only_sent_fields_and_keeps_status(self, app, make_user, make_ad):
        owner = make_user()
        ad = make_ad(owner, status=AdStatus.ACTIVE)
        before = ad.updated_at

        AdService().update_ad(ad.id, UpdateAdRequest(price=Decimal("800000")), owner.id)

        assert ad.price == Decimal("800000.00")
        assert ad.title == "Arwana Super Red"
        assert ad.status == AdStatus.ACTIVE
        assert ad.updated_at >= before

    def test_update_by_stranger(self, app, make_user, make_ad):
        ad = make_ad(make_user())
        with pytest.raises(Unauthorized):
            AdService().update_ad(ad.id, UpdateAdRequest(title="Mine now"), make_user().id)

    def test_update_cannot_change_status(self):
        with pytest.raises(ValueError):
            UpdateAdRequest.model_validate({'status': 'active'})

    def test_update_deleted_ad(self, app, make_user, make_ad):
        owner = make_user()
        ad = make_ad(owner, status=AdStatus.DELETED)
        with pytest.raises(NotFound):
            AdService().update_ad(ad.id, UpdateAdRequest(title="Back"), owner.id)


class TestDelete:

    def test_soft_delete(self, app, make_user, make_ad):
        owner = make_user()
        ad = make_ad(owner)

        assert AdService().delete_ad(ad.id, owner.id) is True
        assert db.session.get(Ad, ad.id).status == AdStatus.DELETED

    def test_second_delete_is_noop(self, app, make_user, make_ad):
        owner = make_user()
        ad = make_ad(owner)
        service = AdService()

        service.delete_ad(ad.id, owner.id)
        assert service.delete_ad(ad.id, owner.id) is True
        assert ad.status == AdStatus.DELETED

    def test_admin_can_delete(self, app, make_user, make_ad):
        ad = make_ad(make_user())
        assert AdService().delete_ad(ad.id, make_user(is_admin=True).id) is True

    def test_stranger_cannot_delete(self, app, make_user, make_ad):
        ad = make_ad(make_user())
        with pytest.raises(Unauthorized):
            AdService().delete_ad(ad.id, make_user().id)
        assert ad.status == AdStatus.ACTIVE

    def test_delete_missing(self, app, make_user):
        with pytest.raises(NotFound):
            AdService().delete_ad(999, make_user().id)

    def test_deleted_ad_still_readable_by_id(self, app, make_user, make_ad):
        owner = make_user()
        ad = make_ad(owner, status=AdStatus.DELETED)
        assert AdService().get_ad(ad.id).status == AdStatus.DELETED


class TestBoost:

    def test_one_credit_boosts_once(self, app, make_user, make_ad):
        owner = make_user(boost_credits=1)
        ad = make_ad(owner)
        service = AdService()

        boosted = service.boost_ad(ad.id, BoostAdRequest(duration_days=7), owner.id)
        assert boosted.is_boosted is True
        assert boosted.boost_expires_at > utcnow() + timedelta(days=6)
        assert db.session.get(User, owner.id).boost_credits == 0

        with pytest.raises(InsufficientCredits):
            service.boost_ad(ad.id, BoostAdRequest(duration_days=7), owner.id)

    def test_cost_is_flat_per_boost(self, app, make_user, make_ad):
        owner = make_user(boost_credits=3)
        ad = make_ad(owner)

        AdService().boost_ad(ad.id, BoostAdRequest(duration_days=30), owner.id)
        assert db.session.get(User, owner.id).boost_credits == 2

    def test_configured_cost(self, app, make_user, make_ad):
        app.config["BOOST_COST_CREDITS"] = 2
        owner = make_user(boost_credits=3)
        ad = make_ad(owner)
        service = AdService()

        service.boost_ad(ad.id, BoostAdRequest(duration_days=1), owner.id)
        with pytest.raises(InsufficientCredits):
            service.boost_ad(ad.id, BoostAdRequest(duration_days=1), owner.id)
        assert db.session.get(User, owner.id).boost_credits == 1

    def test_failed_boost_leaves_ad_untouched(self, app, make_user, make_ad):
        owner = make_user(boost_credits=0)
        ad = make_ad(owner)

        with pytest.raises(InsufficientCredits):
            AdService().boost_ad(ad.id, BoostAdRequest(duration_days=3), owner.id)

        stored = db.session.get(Ad, ad.id)
        assert stored.is_boosted is False
        assert stored.boost_expires_at is None

    def test_debit_checks_balance_in_database(self, app, make_user, make_ad, reload,
                                              write_outside_session):
        owner = make_user(boost_credits=1)
        ad = make_ad(owner)
        assert owner.boost_credits == 1

        # another request spends the credit after this session read it
        write_outside_session(update(User).where(User.id == owner.id).values(boost_credits=0))
        assert owner.boost_credits == 1

        with pytest.raises(InsufficientCredits):
            AdService().boost_ad(ad.id, BoostAdRequest(duration_days=3), owner.id)

        stored = reload(Ad, ad.id)
        assert stored.is_boosted is False
        assert stored.boost_expires_at is None
        assert reload(User, owner.id).boost_credits == 0

    def test_reboost_resets_expiry(self, app, make_user, make_ad):
        owner = make_user(boost_credits=2)
        ad = make_ad(owner, boosted_for=timedelta(days=10))

        boosted = AdService().boost_ad(ad.id, BoostAdRequest(duration_days=1), owner.id)
        assert boosted.boost_expires_at < utcnow() + timedelta(days=2)

    def test_only_owner_boosts(self, app, make_user, make_ad):
        ad = make_ad(make_user())
        stranger = make_user(boost_credits=5)
        with pytest.raises(Unauthorized):
            AdService().boost_ad(ad.id, BoostAdRequest(duration_days=1), stranger.id)
        assert db.session.get(User, stranger.id).boost_credits == 5

    def test_boost_deleted_ad(self, app, make_user, make_ad):
        owner = make_user(boost_credits=5)
        ad = make_ad(owner, status=AdStatus.DELETED)
        with pytest.raises(NotFound):
            AdService().boost_ad(ad.id, BoostAdRequest(duration_days=1), owner.id)


class TestModeration:

    def test_approve_draft(self, app, make_user, make_ad):
        ad = make_ad(make_user(), status=AdStatus.DRAFT)
        AdService().moderate_ad(ad.id, ModerateAdRequest(status='active'))
        assert ad.status == AdStatus.ACTIVE

    def test_reject_with_reason(self, app, make_user, make_ad):
        ad = make_ad(make_user(), status=AdStatus.ACTIVE)
        AdService().moderate_ad(ad.id, ModerateAdRequest(status='rejected', rejection_reason='Protected species'))
        assert ad.status == AdStatus.REJECTED
        assert ad.rejection_reason == 'Protected species'

    def test_only_active_or_rejected(self):
        with pytest.raises(ValueError):
            ModerateAdRequest(status='deleted')

    def test_moderate_deleted_ad(self, app, make_user, make_ad):
        ad = make_ad(make_user(), status=AdStatus.DELETED)
        with pytest.raises(NotFound):
            AdService().moderate_ad(ad.id, ModerateAdRequest(status='active'))


class TestContactCount:

    def test_increments(self, app, make_user, make_ad):
        ad = make_ad(make_user())
        service = AdService()
        assert service.increment_contact_count(ad.id) is True
        assert service.increment_contact_count(ad.id) is True

        db.session.expire_all()
        assert db.session.get(Ad, ad.id).contact_count == 2

    def test_missing_ad(self, app):
        with pytest.raises(NotFound):
            AdService().increment_contact_count(999)


class TestAdRoutes:

    def test_create_takes_owner_from_session(self, client, make_user, make_category, auth_headers):
        owner = make_user()
        other = make_user()
        category = make_category()

        response = client.post('/api/v1/ads', json=ad_payload(category.id), headers=auth_headers(owner))
        assert response.status_code == 201
        assert response.get_json()['ad']['user_id'] == owner.id

        response = client.post('/api/v1/ads', json=ad_payload(category.id, user_id=other.id),
                               headers=auth_headers(owner))
        assert response.status_code == 400

    def test_create_requires_session(self, client, make_category):
        response = client.post('/api/v1/ads', json=ad_payload(make_category().id))
        assert response.status_code == 401

    def test_detail_counts_views(self, client, make_user, make_ad):
        ad = make_ad(make_user())
        client.get(f'/api/v1/ads/{ad.id}')
        response = client.get(f'/api/v1/ads/{ad.id}')
        assert response.get_json()['ad']['view_count'] == 2

    def test_detail_missing(self, client):
        response = client.get('/api/v1/ads/999')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'not_found'

    def test_list_with_query_filters(self, client, make_user, make_ad):
        owner = make_user()
        make_ad(owner, location="Bogor")
        make_ad(owner, location="Blitar")

        response = client.get('/api/v1/ads?location=bli&limit=10')
        ads = response.get_json()['ads']
        assert [a['location'] for a in ads] == ['Blitar']

    def test_list_rejects_bad_price(self, client):
        response = client.get('/api/v1/ads?min_price=abc')
        assert response.status_code == 400

    def test_boost_insufficient_credits_returns_402(self, client, make_user, make_ad, auth_headers):
        owner = make_user(boost_credits=0)
        ad = make_ad(owner)
        response = client.post(f'/api/v1/ads/{ad.id}/boost', json={'duration_days': 3},
                               headers=auth_headers(owner))
        assert response.status_code == 402
        assert response.get_json()['error'] == 'insufficient_credits'

    def test_boost_route(self, client, make_user, make_ad, auth_headers, reload):
        owner = make_user(boost_credits=1)
        ad = make_ad(owner)
        response = client.post(f'/api/v1/ads/{ad.id}/boost', json={'duration_days': 3},
                               headers=auth_headers(owner))
        assert response.status_code == 200
        assert response.get_json()['ad']['boost_active'] is True
        assert reload(User, owner.id).boost_credits == 0

    def test_moderation_requires_admin(self, client, make_user, make_ad, auth_headers):
        owner = make_user()
        admin = make_user(is_admin=True)
        ad = make_ad(owner, status=AdStatus.DRAFT)

        response = client.post(f'/api/v1/ads/{ad.id}/moderate', json={'status': 'active'},
                               headers=auth_headers(owner))
        assert response.status_code == 403

        response = client.post(f'/api/v1/ads/{ad.id}/moderate', json={'status': 'active'},
                               headers=auth_headers(admin))
        assert response.status_code == 200
        assert response.get_json()['ad']['status'] == 'active'

    def test_delete_then_gone_from_listing(self, client, make_user, make_ad, auth_headers):
        owner = make_user()
        ad = make_ad(owner)

        assert client.delete(f'/api/v1/ads/{ad.id}', headers=auth_headers(owner)).status_code == 200
        assert client.delete(f'/api/v1/ads/{ad.id}', headers=auth_headers(owner)).status_code == 200
        assert client.get('/api/v1/ads').get_json()['ads'] == []

    def test_contact_is_public(self, client, make_user, make_ad, reload):
        ad = make_ad(make_user())
        assert client.post(f'/api/v1/ads/{ad.id}/contact').status_code == 200
        assert reload(Ad, ad.id).contact_count == 1

    def test_user_ads_include_every_status(self, client, make_user, make_ad, auth_headers):
        owner = make_user()
        make_ad(owner, status=AdStatus.DRAFT)
        make_ad(owner, status=AdStatus.DELETED)

        response = client.get(f'/api/v1/users/{owner.id}/ads', headers=auth_headers(owner))
        assert response.get_json()['count'] == 2

        response = client.get(f'/api/v1/users/{owner.id}/ads', headers=auth_headers(make_user()))
        assert response.status_code == 403
