# -*- coding: utf-8 -*-
"""
Request context middleware for the marketplace API.

Provides request_id generation and propagation throughout the request lifecycle:
- Generates unique request_id for each request
- Adds request_id to response headers
- Makes request_id available in Flask g context
- Supports request_id extraction from incoming headers

Request IDs are UUIDs that help trace requests across logs and systems.
"""

import uuid
import time
from typing import Optional
from flask import Flask, request, g, Response


class RequestContextMiddleware:
    """Middleware for managing request context and request_id propagation."""

    def __init__(self, app: Flask):
        self.app = app

        app.before_request(self._before_request)
        app.after_request(self._after_request)

    def _before_request(self):
        """Initialize request context before processing."""
        g.request_id = self._get_or_generate_request_id()
        g.request_start_time = time.time()

        g.request_method = request.method
        g.request_path = request.path
        g.request_remote_addr = request.remote_addr
        g.request_user_agent = request.headers.get('User-Agent', '')

        # populated by the auth decorators
        g.user_id = None
        g.is_admin = False

    def _after_request(self, response: Response) -> Response:
        """Add request context to response headers."""
        if hasattr(g, 'request_id'):
            response.headers['X-Request-ID'] = g.request_id

        if hasattr(g, 'request_start_time'):
            duration_ms = round((time.time() - g.request_start_time) * 1000, 2)
            response.headers['X-Response-Time'] = f"{duration_ms}ms"

        return response

    def _get_or_generate_request_id(self) -> str:
        """Get request_id from headers or generate new one."""
        request_id = request.headers.get('X-Request-ID')

        if request_id:
            try:
                uuid.UUID(request_id)
                return request_id
            except ValueError:
                pass

        return str(uuid.uuid4())


def get_request_id() -> Optional[str]:
    """Get current request_id from Flask g context."""
    return getattr(g, 'request_id', None)


def get_request_context() -> dict:
    """Get complete request context for logging."""
    context = {
        'request_id': getattr(g, 'request_id', None),
        'method': getattr(g, 'request_method', None),
        'path': getattr(g, 'request_path', None),
        'remote_addr': getattr(g, 'request_remote_addr', None),
        'user_agent': getattr(g, 'request_user_agent', None),
    }

    if hasattr(g, 'request_start_time'):
        context['duration_ms'] = round(
            (time.time() - g.request_start_time) * 1000, 2)

    if getattr(g, 'user_id', None):
        context['user_id'] = g.user_id
        context['is_admin'] = bool(getattr(g, 'is_admin', False))

    return context


def set_auth_context(user_id: Optional[int] = None, is_admin: bool = False):
    """Set authentication context for current request."""
    if user_id:
        g.user_id = user_id
        g.is_admin = is_admin


def init_request_context(app: Flask):
    """Initialize request context middleware for Flask application."""
    return RequestContextMiddleware(app)
