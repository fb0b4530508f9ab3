"""
Pytest configuration for marketing-analytics-mcp tests.
"""
import pytest
from unittest.mock import MagicMock

from google.analytics.data_v1beta.types import (
    DimensionHeader,
    DimensionValue,
    MetricHeader,
    MetricValue,
    Row,
    RunRealtimeReportResponse,
    RunReportResponse,
)

from marketing_analytics_mcp.auth import ProviderClients
from marketing_analytics_mcp.config import (
    AppConfig,
    GA4Config,
    GoogleAdsConfig,
    GoogleAuthConfig,
    GSCConfig,
    MetaConfig,
)


def ga4_response(dimensions, metrics, rows, totals=None, realtime=False):
    """Build a real GA4 response message from plain lists."""
    response_type = RunRealtimeReportResponse if realtime else RunReportResponse
    return response_type(
        dimension_headers=[DimensionHeader(name=name) for name in dimensions],
        metric_headers=[MetricHeader(name=name) for name in metrics],
        rows=[
            Row(
                dimension_values=[DimensionValue(value=value) for value in dims],
                metric_values=[MetricValue(value=value) for value in mets],
            )
            for dims, mets in rows
        ],
        totals=[
            Row(metric_values=[MetricValue(value=value) for value in total])
            for total in (totals or [])
        ],
        row_count=len(rows),
    )


@pytest.fixture
def google_auth():
    return GoogleAuthConfig(client_id="client-id", client_secret="client-secret", refresh_token="refresh-token")


@pytest.fixture
def full_config(google_auth):
    """Every provider configured, with GA4 and GSC defaults."""
    return AppConfig(
        google=google_auth,
        ga4=GA4Config(property_id="999"),
        gsc=GSCConfig(site_url="https://www.example.com/"),
        meta=MetaConfig(access_token="meta-token"),
        google_ads=GoogleAdsConfig(developer_token="dev-token", customer_account_id="1234567890"),
    )


@pytest.fixture
def empty_config():
    return AppConfig()


@pytest.fixture
def mock_clients():
    """ProviderClients factory with MagicMock vendor clients."""
    def build(config):
        clients = ProviderClients(
            config=config,
            google=MagicMock(name="google") if config.google else None,
            meta=MagicMock(name="meta") if config.meta else None,
        )
        return clients
    return build


@pytest.fixture
def make_ga4_response():
    return ga4_response
