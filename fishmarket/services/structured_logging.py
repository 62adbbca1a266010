"""
Structured JSON logging service for the marketplace API.

Provides structured logging with:
- JSON format output when enabled
- Request context integration (request_id, authenticated user)
- Consistent log structure across the application
- Auth, payment and error event helpers

Logs include: timestamp, level, message, request_id, method, path, status,
user_id, duration_ms, and any keyword context passed by the caller.
"""

import os
import json
import logging
import time
from datetime import datetime, timezone
from flask import Flask, has_request_context
from fishmarket.services.request_context import get_request_context, get_request_id


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def __init__(self, json_enabled: bool = True):
        super().__init__()
        self.json_enabled = json_enabled

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON or plain text."""
        if not self.json_enabled:
            return super().format(record)

        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if has_request_context():
            log_entry.update(get_request_context())

        if hasattr(record, 'extra_fields'):
            log_entry.update(record.extra_fields)

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class StructuredLogger:
    """Structured logger with request context integration."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log_with_context(self, level: int, message: str, **kwargs):
        """Log message with additional context."""
        extra_fields = kwargs.copy()

        if 'request_id' not in extra_fields and has_request_context():
            extra_fields['request_id'] = get_request_id()

        self.logger.log(level, message, extra={'extra_fields': extra_fields})

    def info(self, message: str, **kwargs):
        self._log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log_with_context(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log_with_context(logging.ERROR, message, **kwargs)

    # Convenience methods for common log types
    def log_request_start(self, method: str, path: str, **kwargs):
        """Log request start."""
        self.info(
            f"Request started: {method} {path}",
            event_type='request_start',
            method=method,
            path=path,
            **kwargs
        )

    def log_request_end(self, method: str, path: str, status_code: int, duration_ms: float, **kwargs):
        """Log request completion."""
        self.info(
            f"Request completed: {method} {path} - {status_code} ({duration_ms}ms)",
            event_type='request_end',
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
            **kwargs
        )

    def log_auth_event(self, event: str, success: bool, **kwargs):
        """Log authentication event."""
        level = logging.INFO if success else logging.WARNING
        self._log_with_context(
            level,
            f"Authentication {event}: {'success' if success else 'failure'}",
            event_type='auth_event',
            auth_event=event,
            success=success,
            **kwargs
        )

    def log_payment_event(self, event: str, payment_id: int, **kwargs):
        """Log a payment lifecycle event."""
        self.info(
            f"Payment {event}",
            event_type='payment',
            payment_event=event,
            payment_id=payment_id,
            **kwargs
        )

    def log_security_event(self, event: str, severity: str = 'info', **kwargs):
        """Log security event."""
        level_map = {
            'debug': logging.DEBUG,
            'info': logging.INFO,
            'warning': logging.WARNING,
            'error': logging.ERROR,
            'critical': logging.CRITICAL
        }
        level = level_map.get(severity.lower(), logging.INFO)

        self._log_with_context(
            level,
            f"Security event: {event}",
            event_type='security',
            security_event=event,
            severity=severity,
            **kwargs
        )

    def log_operation_failure(self, operation: str, error: Exception, **kwargs):
        """Log a rejected service operation before the error propagates."""
        self.warning(
            f"{operation} failed: {error}",
            event_type='operation_failure',
            operation=operation,
            error_code=getattr(error, 'code', type(error).__name__),
            **kwargs
        )


def get_logger(name: str) -> StructuredLogger:
    """Get structured logger instance."""
    return StructuredLogger(name)


def configure_logging(app: Flask):
    """Configure structured logging for Flask application."""
    json_enabled = os.environ.get('FISHMARKET_LOG_JSON', 'true').lower() == 'true'
    log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(StructuredFormatter(json_enabled=json_enabled))
    root_logger.addHandler(console_handler)

    app.logger.setLevel(getattr(logging, log_level, logging.INFO))

    config_logger = get_logger('fishmarket.config')
    config_logger.info(
        "Logging configured",
        json_enabled=json_enabled,
        log_level=log_level
    )


class LoggingMiddleware:
    """Middleware for automatic request/response logging."""

    SKIP_PATHS = ('/healthz', '/readyz', '/metrics')

    def __init__(self, app: Flask):
        self.app = app
        self.logger = get_logger('fishmarket.requests')

        app.before_request(self._before_request)
        app.after_request(self._after_request)

    def _before_request(self):
        """Log request start."""
        from flask import request

        if request.path in self.SKIP_PATHS:
            return

        self.logger.log_request_start(
            method=request.method,
            path=request.path,
            remote_addr=request.remote_addr,
            user_agent=request.headers.get('User-Agent', ''),
            content_length=request.content_length
        )

    def _after_request(self, response):
        """Log request completion."""
        from flask import request, g

        if request.path in self.SKIP_PATHS:
            return response

        duration_ms = 0
        if hasattr(g, 'request_start_time'):
            duration_ms = round((time.time() - g.request_start_time) * 1000, 2)

        auth_context = {}
        if getattr(g, 'user_id', None):
            auth_context['user_id'] = g.user_id

        self.logger.log_request_end(
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
            content_length=response.content_length,
            **auth_context
        )

        return response


def init_logging(app: Flask):
    """Initialize structured logging for Flask application."""
    configure_logging(app)

    LoggingMiddleware(app)

    startup_logger = get_logger('fishmarket.startup')
    startup_logger.info(
        "Application starting",
        debug=app.debug,
        testing=app.testing
    )
