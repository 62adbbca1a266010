"""
Payment gateway notification helpers.

Notifications follow the Midtrans HTTP notification format: the merchant
order reference arrives as ``order_id`` and the body is signed with
``SHA512(order_id + status_code + gross_amount + server_key)``.
"""
import hashlib
import hmac
from typing import Optional

from fishmarket.models.payment import PaymentStatus

STATUS_MAP = {
    'settlement': PaymentStatus.PAID,
    'capture': PaymentStatus.PAID,
    'deny': PaymentStatus.FAILED,
    'expire': PaymentStatus.FAILED,
    'failure': PaymentStatus.FAILED,
    'cancel': PaymentStatus.CANCELLED,
}


def map_gateway_status(gateway_status: Optional[str]) -> str:
    """Translate a gateway transaction status; unknown values stay pending."""
    return STATUS_MAP.get((gateway_status or '').strip().lower(), PaymentStatus.PENDING)


def compute_signature(order_id: str, status_code: str, gross_amount: str, server_key: str) -> str:
    payload = f"{order_id}{status_code}{gross_amount}{server_key}"
    return hashlib.sha512(payload.encode('utf-8')).hexdigest()


def verify_notification_signature(
        order_id: str,
        status_code: Optional[str],
        gross_amount: Optional[str],
        signature_key: Optional[str],
        server_key: str) -> bool:
    if not signature_key or status_code is None or gross_amount is None:
        return False
    expected = compute_signature(order_id, status_code, gross_amount, server_key)
    return hmac.compare_digest(expected, signature_key.strip().lower())
