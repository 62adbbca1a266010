"""
Test suite for Prometheus metrics functionality.
"""

import os
from decimal import Decimal
from unittest.mock import patch

from flask import Flask
from prometheus_client import CollectorRegistry
from prometheus_client.exposition import generate_latest

from fishmarket.models.payment import PaymentType
from fishmarket.schemas.ads import BoostAdRequest
from fishmarket.services.ad_service import AdService
from fishmarket.services.metrics import MetricsService, get_metrics_service, init_metrics
from fishmarket.services.payment_service import PaymentService


class TestMetricsService:
    """Test MetricsService functionality."""

    def test_metrics_service_initialization(self, app):
        service = get_metrics_service()
        assert service.enabled is True
        assert service.registry is not None

        assert hasattr(service, "http_requests_total")
        assert hasattr(service, "ad_boosts_total")
        assert hasattr(service, "payment_callbacks_total")
        assert hasattr(service, "entitlements_applied_total")
        assert hasattr(service, "auth_events_total")

    def test_metrics_disabled(self):
        with patch.dict(os.environ, {"FISHMARKET_METRICS_ENABLED": "false"}):
            app = Flask(__name__)
            app.config["TESTING"] = True
            with app.app_context():
                init_metrics(app)
                assert get_metrics_service().enabled is False
                assert app.test_client().get("/metrics").status_code == 404

    def test_numeric_ids_are_collapsed(self):
        service = MetricsService(registry=CollectorRegistry())
        assert service._normalize_route("/api/v1/ads/42/boost") == "/api/v1/ads/:id/boost"


class TestMetricsIntegration:
    """Test metrics integration with the application."""

    def test_metrics_endpoint(self, client):
        client.get("/api/v1/ads")
        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.content_type == "text/plain; version=0.0.4; charset=utf-8"
        data = response.get_data(as_text=True)
        assert "fishmarket_http_requests_total" in data
        assert 'route="/api/v1/ads"' in data

    def test_domain_counters(self, app, make_user, make_ad, make_package, make_payment):
        owner = make_user(boost_credits=1)
        ad = make_ad(owner)
        AdService().boost_ad(ad.id, BoostAdRequest(duration_days=1), owner.id)

        payment = make_payment(owner, PaymentType.MEMBERSHIP, membership_id=make_package().id,
                               amount=str(Decimal("10.00")))
        PaymentService().handle_gateway_callback(payment.transaction_id, "settlement", {})

        exposition = generate_latest(get_metrics_service().registry).decode()
        assert "fishmarket_ad_boosts_total 1.0" in exposition
        assert 'fishmarket_payment_callbacks_total{status="paid"} 1.0' in exposition
        assert 'fishmarket_entitlements_applied_total{type="membership"} 1.0' in exposition
