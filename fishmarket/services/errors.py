"""
Service-level error taxonomy.

Services raise these synchronously; the HTTP layer renders them through
``fishmarket.middleware.errors`` using ``code`` and ``status_code``.
"""
from typing import Any, Dict, Optional


class ServiceError(Exception):
    code = 'service_error'
    status_code = 400

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.message = message or self.__doc__ or self.code
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {'error': self.code, 'message': self.message}


class NotFound(ServiceError):
    """Referenced entity not found"""
    code = 'not_found'
    status_code = 404


class NotFoundOrInactive(NotFound):
    """Referenced entity not found or inactive"""
    code = 'not_found_or_inactive'


class NotFoundOrUnauthorized(NotFound):
    """Referenced entity not found or not owned by the caller"""
    code = 'not_found_or_unauthorized'


class Conflict(ServiceError):
    """Resource already exists"""
    code = 'conflict'
    status_code = 409


class InvalidPaymentState(Conflict):
    """Payment is not in a state that allows this operation"""
    code = 'invalid_payment_state'


class Unauthorized(ServiceError):
    """Unauthorized: caller lacks rights over this resource"""
    code = 'unauthorized'
    status_code = 403


class InvalidCredentials(ServiceError):
    """Invalid credentials"""
    code = 'invalid_credentials'
    status_code = 401


class InvalidToken(ServiceError):
    """Invalid token"""
    code = 'invalid_token'
    status_code = 401


class InvalidSignature(ServiceError):
    """Invalid gateway signature"""
    code = 'invalid_signature'
    status_code = 401


class GatewayNotConfigured(ServiceError):
    """Payment gateway not configured"""
    code = 'gateway_not_configured'
    status_code = 500


class AccountInactive(ServiceError):
    """User account is inactive"""
    code = 'account_inactive'
    status_code = 403


class InsufficientCredits(ServiceError):
    """Insufficient boost credits"""
    code = 'insufficient_credits'
    status_code = 402


class ValidationError(ServiceError):
    """Invalid input"""
    code = 'validation_error'
    status_code = 400
