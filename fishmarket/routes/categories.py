# -*- coding: utf-8 -*-
"""
Category routes. Reads are public; writes need an administrator.
"""
from flask import Blueprint, jsonify

from fishmarket.infra.auth import admin_required
from fishmarket.routes import json_body
from fishmarket.schemas.catalog import CreateCategoryRequest, UpdateCategoryRequest
from fishmarket.services.catalog_service import CategoryService
from fishmarket.services.errors import NotFound

categories_bp = Blueprint('categories', __name__, url_prefix='/api/v1/categories')


@categories_bp.route('', methods=['GET'])
def list_categories():
    categories = CategoryService().list_active()
    return jsonify({'categories': [c.to_dict() for c in categories]}), 200


@categories_bp.route('/<int:category_id>', methods=['GET'])
def get_category(category_id):
    """Direct lookup; deactivated categories are returned too."""
    category = CategoryService().get(category_id)
    if not category:
        raise NotFound("Category not found")
    return jsonify({'category': category.to_dict()}), 200


@categories_bp.route('', methods=['POST'])
@admin_required
def create_category():
    data = CreateCategoryRequest.model_validate(json_body())
    category = CategoryService().create(data)
    return jsonify({'category': category.to_dict()}), 201


@categories_bp.route('/<int:category_id>', methods=['PATCH'])
@admin_required
def update_category(category_id):
    data = UpdateCategoryRequest.model_validate(json_body())
    category = CategoryService().update(category_id, data)
    return jsonify({'category': category.to_dict()}), 200


@categories_bp.route('/<int:category_id>', methods=['DELETE'])
@admin_required
def delete_category(category_id):
    """Soft delete: the category is deactivated, never removed."""
    if not CategoryService().deactivate(category_id):
        raise NotFound("Category not found")
    return jsonify({'success': True}), 200
