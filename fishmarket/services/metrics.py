# -*- coding: utf-8 -*-
"""
Service for managing Prometheus metrics.

Provides a centralized service for creating, registering, and collecting metrics.
Also includes middleware for automatically recording HTTP request metrics.
"""

import os
import time
from typing import Optional
from flask import Flask, request, g, current_app, has_app_context
from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram
from prometheus_client.exposition import generate_latest


def init_metrics(app: Flask) -> None:
    """Initialize metrics service and endpoints."""
    # each test app gets its own registry so collectors never collide
    registry = CollectorRegistry() if app.config.get("TESTING") else None
    service = MetricsService(registry=registry)
    app.extensions['metrics'] = service

    if service.enabled:
        @app.before_request
        def before_request():
            g.start_time = time.time()

        @app.after_request
        def after_request(response):
            duration = time.time() - getattr(g, 'start_time', time.time())
            service.record_http_request(
                route=request.path,
                method=request.method,
                status_code=response.status_code,
                duration_seconds=duration
            )
            return response

        @app.route("/metrics")
        def metrics():
            return generate_latest(service.registry), 200, {
                'Content-Type': 'text/plain; version=0.0.4; charset=utf-8'}


def get_metrics_service() -> Optional['MetricsService']:
    """Get the metrics service instance from the current app context."""
    if has_app_context():
        return current_app.extensions.get('metrics')
    return None


class MetricsService:
    """Service for managing Prometheus metrics."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.enabled = os.environ.get(
            "FISHMARKET_METRICS_ENABLED",
            "true").lower() == "true"
        self.registry = registry if registry is not None else REGISTRY

        if self.enabled:
            self.http_requests_total = Counter(
                "fishmarket_http_requests_total",
                "Total number of HTTP requests.",
                ["route", "method", "status"],
                registry=self.registry
            )
            self.http_request_duration_seconds = Histogram(
                "fishmarket_http_request_duration_seconds",
                "Duration of HTTP requests in seconds.",
                ["route", "method"],
                registry=self.registry
            )
            self.http_errors_total = Counter(
                "fishmarket_http_errors_total",
                "Total number of HTTP errors.",
                ["route", "kind"],
                registry=self.registry
            )
            self.ad_boosts_total = Counter(
                "fishmarket_ad_boosts_total",
                "Total number of successful ad boosts.",
                registry=self.registry
            )
            self.payment_callbacks_total = Counter(
                "fishmarket_payment_callbacks_total",
                "Total number of processed gateway callbacks by mapped status.",
                ["status"],
                registry=self.registry
            )
            self.entitlements_applied_total = Counter(
                "fishmarket_entitlements_applied_total",
                "Total number of entitlements granted by payment type.",
                ["type"],
                registry=self.registry
            )
            self.auth_events_total = Counter(
                "fishmarket_auth_events_total",
                "Total number of authentication events.",
                ["event", "outcome"],
                registry=self.registry
            )

    def record_http_request(
            self,
            route: str,
            method: str,
            status_code: int,
            duration_seconds: float):
        """Record an HTTP request."""
        if not self.enabled:
            return
        normalized_route = self._normalize_route(route)
        self.http_requests_total.labels(
            route=normalized_route,
            method=method,
            status=str(status_code)).inc()
        self.http_request_duration_seconds.labels(
            route=normalized_route, method=method).observe(duration_seconds)
        if status_code >= 400:
            kind = "server_error" if status_code >= 500 else "client_error"
            self.http_errors_total.labels(route=normalized_route, kind=kind).inc()

    def record_boost(self):
        if self.enabled:
            self.ad_boosts_total.inc()

    def record_payment_callback(self, status: str):
        if self.enabled:
            self.payment_callbacks_total.labels(status=status).inc()

    def record_entitlement(self, payment_type: str):
        if self.enabled:
            self.entitlements_applied_total.labels(type=payment_type).inc()

    def record_auth_event(self, event: str, success: bool):
        if self.enabled:
            self.auth_events_total.labels(
                event=event, outcome="success" if success else "failure").inc()

    def _normalize_route(self, route: str) -> str:
        # collapse numeric ids so /api/v1/ads/12 and /api/v1/ads/13 share a series
        parts = route.split('/')
        return '/'.join(':id' if part.isdigit() else part for part in parts)
