"""
Payment & entitlement service.

Payments start ``pending`` and are settled by gateway notifications. A
payment reaching ``paid`` grants its entitlement (membership + credits, or
boost credits) in the same database transaction as the status change.
Each payment grants at most once: the grant is claimed through a
conditional update on ``entitlement_applied_at``.
"""
import uuid
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import update

from fishmarket.database import db
from fishmarket.models.ad import Ad
from fishmarket.models.membership import MembershipPackage
from fishmarket.models.payment import Payment, PaymentStatus, PaymentType
from fishmarket.models.user import User
from fishmarket.schemas.payments import CreatePaymentRequest, GatewayNotification
from fishmarket.services.errors import (
    GatewayNotConfigured,
    InvalidPaymentState,
    InvalidSignature,
    NotFound,
    NotFoundOrInactive,
    NotFoundOrUnauthorized,
)
from fishmarket.services.gateway import map_gateway_status, verify_notification_signature
from fishmarket.services.metrics import get_metrics_service
from fishmarket.services.structured_logging import get_logger
from fishmarket.utils.clock import utcnow
from fishmarket.utils.money import whole_units

logger = get_logger('fishmarket.payments')


def new_order_reference() -> str:
    return f"FM-{uuid.uuid4().hex[:20].upper()}"


class PaymentService:

    def _fail(self, operation: str, error: Exception, **context):
        logger.log_operation_failure(operation, error, **context)
        raise error

    def create_payment(self, data: CreatePaymentRequest, user_id: int) -> Payment:
        if not db.session.get(User, user_id):
            self._fail('create_payment', NotFound("User not found"), user_id=user_id)

        if data.type == PaymentType.MEMBERSHIP:
            package = db.session.get(MembershipPackage, data.membership_id)
            if not package or not package.is_active:
                self._fail('create_payment',
                           NotFoundOrInactive("Membership package not found or inactive"),
                           user_id=user_id, membership_id=data.membership_id)
        else:
            ad = db.session.get(Ad, data.ad_id)
            if not ad or ad.is_deleted or ad.user_id != user_id:
                self._fail('create_payment',
                           NotFoundOrUnauthorized("Ad not found or not owned by user"),
                           user_id=user_id, ad_id=data.ad_id)

        payment = Payment(
            user_id=user_id,
            membership_id=data.membership_id,
            ad_id=data.ad_id,
            type=data.type,
            amount=data.amount,
            status=PaymentStatus.PENDING,
            transaction_id=new_order_reference(),
        )
        db.session.add(payment)
        db.session.commit()

        logger.log_payment_event('created', payment.id, user_id=user_id, type=payment.type,
                                 transaction_id=payment.transaction_id)
        return payment

    def handle_gateway_notification(
            self,
            notification: GatewayNotification,
            raw_body: Optional[Dict[str, Any]] = None) -> bool:
        """Verify a raw gateway notification, then settle the payment it names."""
        if current_app.config.get("REQUIRE_GATEWAY_SIGNATURE", True):
            server_key = current_app.config.get("MIDTRANS_SERVER_KEY")
            if not server_key:
                logger.log_security_event('gateway_not_configured', 'error', order_id=notification.order_id)
                raise GatewayNotConfigured("Payment gateway not configured")

            valid = verify_notification_signature(
                notification.order_id,
                notification.status_code,
                notification.gross_amount,
                notification.signature_key,
                server_key,
            )
            if not valid:
                logger.log_security_event('invalid_gateway_signature', 'warning', order_id=notification.order_id)
                raise InvalidSignature("Invalid gateway signature")

        return self.handle_gateway_callback(
            notification.order_id,
            notification.transaction_status,
            raw_body if raw_body is not None else notification.model_dump(mode='json'),
        )

    def handle_gateway_callback(
            self,
            transaction_id: str,
            gateway_status: str,
            raw_response: Optional[Dict[str, Any]]) -> bool:
        """
        Apply a gateway status to the matching payment.

        Only a pending payment moves; a notification for a payment that has
        already settled is acknowledged without touching it. When the new
        status is ``paid`` the entitlement is granted before the commit, so
        either both persist or neither does.
        """
        payment = Payment.query.filter_by(transaction_id=transaction_id).first()
        if not payment:
            self._fail('handle_gateway_callback', NotFound("Payment not found"),
                       transaction_id=transaction_id)
        payment_id = payment.id

        new_status = map_gateway_status(gateway_status)
        try:
            moved = db.session.execute(
                update(Payment)
                .where(Payment.id == payment_id, Payment.status == PaymentStatus.PENDING)
                .values(status=new_status, gateway_response=raw_response, updated_at=utcnow())
            )
            if moved.rowcount == 0:
                db.session.rollback()
                logger.log_payment_event('callback_ignored', payment_id,
                                         transaction_id=transaction_id, gateway_status=gateway_status)
                return True

            if new_status == PaymentStatus.PAID:
                self._apply_entitlement(payment)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.log_operation_failure('handle_gateway_callback', e,
                                         payment_id=payment_id, transaction_id=transaction_id)
            raise

        metrics = get_metrics_service()
        if metrics:
            metrics.record_payment_callback(new_status)
        logger.log_payment_event('callback_processed', payment_id, transaction_id=transaction_id,
                                 gateway_status=gateway_status, status=new_status)
        return True

    def apply_entitlement(self, payment_id: int) -> bool:
        """Grant a paid payment's entitlement; replays succeed without granting twice."""
        payment = db.session.get(Payment, payment_id)
        if not payment:
            self._fail('apply_entitlement', NotFound("Payment not found"), payment_id=payment_id)
        if payment.status != PaymentStatus.PAID:
            self._fail('apply_entitlement',
                       InvalidPaymentState("Payment is not paid", status=payment.status),
                       payment_id=payment_id, status=payment.status)

        try:
            self._apply_entitlement(payment)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.log_operation_failure('apply_entitlement', e, payment_id=payment_id)
            raise
        return True

    def _apply_entitlement(self, payment: Payment) -> bool:
        """Grant within the caller's transaction. Returns False if already granted."""
        claimed = db.session.execute(
            update(Payment)
            .where(
                Payment.id == payment.id,
                Payment.status == PaymentStatus.PAID,
                Payment.entitlement_applied_at.is_(None),
            )
            .values(entitlement_applied_at=utcnow())
        )
        if claimed.rowcount == 0:
            logger.log_payment_event('entitlement_already_applied', payment.id)
            return False

        if payment.type == PaymentType.MEMBERSHIP:
            package = None
            if payment.membership_id is not None:
                package = db.session.get(MembershipPackage, payment.membership_id)
            if not package:
                raise NotFound("Membership package not found", membership_id=payment.membership_id)
            values = {
                'membership_id': package.id,
                'boost_credits': User.boost_credits + (package.boost_credits or 0),
            }
            granted = package.boost_credits or 0
        else:
            granted = whole_units(payment.amount)
            values = {'boost_credits': User.boost_credits + granted}

        result = db.session.execute(update(User).where(User.id == payment.user_id).values(**values))
        if result.rowcount == 0:
            raise NotFound("User not found", user_id=payment.user_id)

        metrics = get_metrics_service()
        if metrics:
            metrics.record_entitlement(payment.type)
        logger.log_payment_event('entitlement_applied', payment.id, user_id=payment.user_id,
                                 type=payment.type, credits=granted)
        return True

    def list_user_payments(self, user_id: int) -> List[Payment]:
        return (
            Payment.query.filter_by(user_id=user_id)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
            .all()
        )

    def list_all_payments(self) -> List[Payment]:
        return Payment.query.order_by(Payment.created_at.desc(), Payment.id.desc()).all()

    def get_payment(self, payment_id: int) -> Optional[Payment]:
        return db.session.get(Payment, payment_id)
