# -*- coding: utf-8 -*-
"""
Membership package routes.
"""
from flask import Blueprint, jsonify

from fishmarket.infra.auth import admin_required
from fishmarket.routes import json_body
from fishmarket.schemas.catalog import (
    AssignMembershipRequest,
    CreateMembershipPackageRequest,
    UpdateMembershipPackageRequest,
)
from fishmarket.services.catalog_service import MembershipService
from fishmarket.services.errors import NotFound

membership_bp = Blueprint('membership', __name__, url_prefix='/api/v1/membership-packages')


@membership_bp.route('', methods=['GET'])
def list_packages():
    packages = MembershipService().list_active()
    return jsonify({'packages': [p.to_dict() for p in packages]}), 200


@membership_bp.route('/<int:package_id>', methods=['GET'])
def get_package(package_id):
    package = MembershipService().get(package_id)
    if not package:
        raise NotFound("Membership package not found")
    return jsonify({'package': package.to_dict()}), 200


@membership_bp.route('', methods=['POST'])
@admin_required
def create_package():
    data = CreateMembershipPackageRequest.model_validate(json_body())
    package = MembershipService().create(data)
    return jsonify({'package': package.to_dict()}), 201


@membership_bp.route('/<int:package_id>', methods=['PATCH'])
@admin_required
def update_package(package_id):
    data = UpdateMembershipPackageRequest.model_validate(json_body())
    package = MembershipService().update(package_id, data)
    return jsonify({'package': package.to_dict()}), 200


@membership_bp.route('/<int:package_id>/deactivate', methods=['POST'])
@admin_required
def deactivate_package(package_id):
    if not MembershipService().deactivate(package_id):
        raise NotFound("Membership package not found")
    return jsonify({'success': True}), 200


@membership_bp.route('/<int:package_id>/assign', methods=['POST'])
@admin_required
def assign_package(package_id):
    """Set a user's membership without granting the package credits."""
    data = AssignMembershipRequest.model_validate(json_body())
    MembershipService().assign_to_user(data.user_id, package_id)
    return jsonify({'success': True}), 200
