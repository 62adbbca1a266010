# -*- coding: utf-8 -*-
"""
Ad routes
Public listing and detail, owner-scoped edits and boosts, admin moderation
"""
from flask import Blueprint, jsonify

from fishmarket.infra.auth import admin_required, current_user, login_required
from fishmarket.routes import json_body, query_args
from fishmarket.schemas.ads import (
    AdFilters,
    BoostAdRequest,
    CreateAdRequest,
    ModerateAdRequest,
    UpdateAdRequest,
)
from fishmarket.services.ad_service import AdService
from fishmarket.services.errors import NotFound

ads_bp = Blueprint('ads', __name__, url_prefix='/api/v1/ads')


@ads_bp.route('', methods=['GET'])
def list_ads():
    """
    List active ads, effectively boosted first

    Query Parameters:
    - category_id, user_id: exact match
    - search: substring of title or description
    - location: substring of location
    - min_price, max_price: inclusive bounds
    - limit (default 20), offset
    """
    filters = AdFilters.model_validate(query_args())
    ads = AdService().list_ads(filters)
    return jsonify({'ads': [a.to_dict() for a in ads], 'count': len(ads)}), 200


@ads_bp.route('/<int:ad_id>', methods=['GET'])
def get_ad(ad_id):
    """Ad detail; each fetch counts as a view."""
    ad = AdService().get_ad(ad_id)
    if not ad:
        raise NotFound("Ad not found")
    return jsonify({'ad': ad.to_dict()}), 200


@ads_bp.route('', methods=['POST'])
@login_required
def create_ad():
    data = CreateAdRequest.model_validate(json_body())
    ad = AdService().create_ad(data, current_user.id)
    return jsonify({'ad': ad.to_dict()}), 201


@ads_bp.route('/<int:ad_id>', methods=['PATCH'])
@login_required
def update_ad(ad_id):
    data = UpdateAdRequest.model_validate(json_body())
    ad = AdService().update_ad(ad_id, data, current_user.id)
    return jsonify({'ad': ad.to_dict()}), 200


@ads_bp.route('/<int:ad_id>', methods=['DELETE'])
@login_required
def delete_ad(ad_id):
    AdService().delete_ad(ad_id, current_user.id)
    return jsonify({'success': True}), 200


@ads_bp.route('/<int:ad_id>/boost', methods=['POST'])
@login_required
def boost_ad(ad_id):
    data = BoostAdRequest.model_validate(json_body())
    ad = AdService().boost_ad(ad_id, data, current_user.id)
    return jsonify({'ad': ad.to_dict()}), 200


@ads_bp.route('/<int:ad_id>/moderate', methods=['POST'])
@admin_required
def moderate_ad(ad_id):
    data = ModerateAdRequest.model_validate(json_body())
    ad = AdService().moderate_ad(ad_id, data)
    return jsonify({'ad': ad.to_dict()}), 200


@ads_bp.route('/<int:ad_id>/contact', methods=['POST'])
def contact_ad(ad_id):
    AdService().increment_contact_count(ad_id)
    return jsonify({'success': True}), 200
