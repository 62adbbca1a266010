# -*- coding: utf-8 -*-
"""
Authentication routes: registration, login and the current session.
"""
from flask import Blueprint, jsonify

from fishmarket.infra.auth import current_user, login_required
from fishmarket.routes import json_body
from fishmarket.schemas.auth import LoginRequest, RegisterRequest
from fishmarket.services.auth_service import AuthService

auth_bp = Blueprint('auth', __name__, url_prefix='/api/v1/auth')


@auth_bp.route('/register', methods=['POST'])
def register():
    data = RegisterRequest.model_validate(json_body())
    user, token = AuthService().register(data)
    return jsonify({'user': user.to_dict(), 'token': token}), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = LoginRequest.model_validate(json_body())
    user, token = AuthService().login(data)
    return jsonify({'user': user.to_dict(), 'token': token}), 200


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    """The user behind the bearer token."""
    return jsonify({'user': current_user.to_dict()}), 200
