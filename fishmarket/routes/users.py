# -*- coding: utf-8 -*-
"""
User administration routes, plus the per-user ad and payment listings.
"""
from flask import Blueprint, jsonify

from fishmarket.infra.auth import admin_required, login_required, require_self_or_admin
from fishmarket.routes import json_body, query_args
from fishmarket.schemas.users import UpdateUserRequest, UserFilters
from fishmarket.services.ad_service import AdService
from fishmarket.services.errors import NotFound
from fishmarket.services.payment_service import PaymentService
from fishmarket.services.user_service import UserService

users_bp = Blueprint('users', __name__, url_prefix='/api/v1/users')


@users_bp.route('', methods=['GET'])
@admin_required
def list_users():
    """
    List users

    Query Parameters:
    - search: substring of full name or email
    - is_admin, is_active: exact flags
    - limit, offset: pagination
    """
    filters = UserFilters.model_validate(query_args())
    users = UserService().list_users(filters)
    return jsonify({'users': [u.to_dict() for u in users], 'count': len(users)}), 200


@users_bp.route('/<int:user_id>', methods=['GET'])
@login_required
def get_user(user_id):
    require_self_or_admin(user_id)
    user = UserService().get_user(user_id)
    if not user:
        raise NotFound("User not found")
    return jsonify({'user': user.to_dict()}), 200


@users_bp.route('/<int:user_id>', methods=['PATCH'])
@login_required
def update_user(user_id):
    require_self_or_admin(user_id)
    data = UpdateUserRequest.model_validate(json_body())
    user = UserService().update_user(user_id, data)
    return jsonify({'user': user.to_dict()}), 200


@users_bp.route('/<int:user_id>/deactivate', methods=['POST'])
@admin_required
def deactivate_user(user_id):
    if not UserService().deactivate_user(user_id):
        raise NotFound("User not found")
    return jsonify({'success': True}), 200


@users_bp.route('/<int:user_id>/activate', methods=['POST'])
@admin_required
def activate_user(user_id):
    if not UserService().activate_user(user_id):
        raise NotFound("User not found")
    return jsonify({'success': True}), 200


@users_bp.route('/<int:user_id>/ads', methods=['GET'])
@login_required
def user_ads(user_id):
    """All of a user's ads, any status, newest first."""
    require_self_or_admin(user_id)
    ads = AdService().list_user_ads(user_id)
    return jsonify({'ads': [a.to_dict() for a in ads], 'count': len(ads)}), 200


@users_bp.route('/<int:user_id>/payments', methods=['GET'])
@login_required
def user_payments(user_id):
    require_self_or_admin(user_id)
    payments = PaymentService().list_user_payments(user_id)
    return jsonify({'payments': [p.to_dict() for p in payments], 'count': len(payments)}), 200
