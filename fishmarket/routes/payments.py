# -*- coding: utf-8 -*-
"""
Payment routes and the payment-gateway notification endpoint.
"""
from flask import Blueprint, jsonify

from fishmarket.infra.auth import admin_required, current_user, login_required
from fishmarket.routes import json_body
from fishmarket.schemas.payments import CreatePaymentRequest, GatewayNotification
from fishmarket.services.errors import NotFoundOrUnauthorized
from fishmarket.services.payment_service import PaymentService

payments_bp = Blueprint('payments', __name__, url_prefix='/api/v1/payments')


@payments_bp.route('', methods=['POST'])
@login_required
def create_payment():
    data = CreatePaymentRequest.model_validate(json_body())
    payment = PaymentService().create_payment(data, current_user.id)
    return jsonify({'payment': payment.to_dict()}), 201


@payments_bp.route('/callback', methods=['POST'])
def gateway_callback():
    """
    Gateway notification webhook.

    Authenticated by the notification signature rather than a session.
    Always answers 200 once the payment is found and the signature checks
    out, including replays for payments that already settled.
    """
    body = json_body()
    notification = GatewayNotification.model_validate(body)
    PaymentService().handle_gateway_notification(notification, raw_body=body)
    return jsonify({'received': True}), 200


@payments_bp.route('', methods=['GET'])
@admin_required
def list_payments():
    payments = PaymentService().list_all_payments()
    return jsonify({'payments': [p.to_dict() for p in payments], 'count': len(payments)}), 200


@payments_bp.route('/<int:payment_id>', methods=['GET'])
@login_required
def get_payment(payment_id):
    payment = PaymentService().get_payment(payment_id)
    if not payment or (payment.user_id != current_user.id and not current_user.is_admin):
        raise NotFoundOrUnauthorized("Payment not found")
    return jsonify({'payment': payment.to_dict()}), 200


@payments_bp.route('/<int:payment_id>/process', methods=['POST'])
@admin_required
def process_payment(payment_id):
    """Grant a paid payment's entitlement by hand; safe to repeat."""
    PaymentService().apply_entitlement(payment_id)
    return jsonify({'success': True}), 200
