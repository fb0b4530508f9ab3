"""Tests for the provider auth adapters."""
from unittest.mock import MagicMock, patch

import pytest
from google.ads.googleads.errors import GoogleAdsException
from google.protobuf.struct_pb2 import Struct

from marketing_analytics_mcp.auth import (
    GoogleAdsCustomer,
    GoogleAdsQueryError,
    GoogleClients,
    MetaSession,
    ProviderClients,
)
from marketing_analytics_mcp.auth.google_ads_auth import customer_for
from marketing_analytics_mcp.auth.google_auth import GOOGLE_SCOPES, TOKEN_URI
from marketing_analytics_mcp.config import AppConfig, GoogleAdsConfig, MetaConfig


class TestGoogleClients:
    def test_credentials(self, google_auth):
        clients = GoogleClients(google_auth)

        credentials = clients.credentials

        assert credentials.refresh_token == "refresh-token"
        assert credentials.client_id == "client-id"
        assert credentials.token_uri == TOKEN_URI
        assert credentials.scopes == GOOGLE_SCOPES
        assert clients.credentials is credentials

    @patch("marketing_analytics_mcp.auth.google_auth.BetaAnalyticsDataClient")
    def test_data_client_built_once(self, mock_client_cls, google_auth):
        clients = GoogleClients(google_auth)

        first = clients.analytics_data
        second = clients.analytics_data

        assert first is second
        mock_client_cls.assert_called_once_with(credentials=clients.credentials)

    @patch("marketing_analytics_mcp.auth.google_auth.build")
    def test_discovery_services(self, mock_build, google_auth):
        clients = GoogleClients(google_auth)

        clients.webmasters
        clients.webmasters
        clients.search_console

        assert mock_build.call_count == 2
        names = [call.args[:2] for call in mock_build.call_args_list]
        assert names == [("webmasters", "v3"), ("searchconsole", "v1")]
        assert mock_build.call_args.kwargs["cache_discovery"] is False


class TestMetaSession:
    @patch("marketing_analytics_mcp.auth.meta_auth.FacebookAdsApi")
    def test_api_initialised_once(self, mock_api_cls):
        session = MetaSession(MetaConfig(access_token="token", app_id="app", app_secret="secret"))

        session.api
        session.api

        mock_api_cls.init.assert_called_once_with(
            app_id="app", app_secret="secret", access_token="token", crash_log=False
        )

    @patch("marketing_analytics_mcp.auth.meta_auth.AdAccount")
    @patch("marketing_analytics_mcp.auth.meta_auth.FacebookAdsApi")
    def test_ad_account_bound_to_session(self, mock_api_cls, mock_account_cls):
        session = MetaSession(MetaConfig(access_token="token"))

        session.ad_account("act_123")

        mock_account_cls.assert_called_once_with("act_123", api=mock_api_cls.init.return_value)


class TestGoogleAdsCustomer:
    @patch("marketing_analytics_mcp.auth.google_ads_auth.GoogleAdsClient")
    def test_from_config(self, mock_client_cls, google_auth):
        ads = GoogleAdsConfig(developer_token="dev", customer_account_id="1234567890", login_customer_id="999")

        customer = GoogleAdsCustomer.from_config(google_auth, ads)

        mock_client_cls.load_from_dict.assert_called_once_with({
            "developer_token": "dev",
            "client_id": "client-id",
            "client_secret": "client-secret",
            "refresh_token": "refresh-token",
            "use_proto_plus": True,
            "login_customer_id": "999",
        })
        assert customer.client is mock_client_cls.load_from_dict.return_value
        assert customer.customer_id == "1234567890"

    @patch("marketing_analytics_mcp.auth.google_ads_auth.GoogleAdsClient")
    def test_from_config_without_login_customer(self, mock_client_cls, google_auth):
        GoogleAdsCustomer.from_config(google_auth, GoogleAdsConfig(developer_token="dev", customer_account_id="1"))
        settings = mock_client_cls.load_from_dict.call_args.args[0]
        assert "login_customer_id" not in settings

    def test_search(self):
        client = MagicMock()
        service = client.get_service.return_value
        service.search.return_value = iter(["row-1", "row-2"])

        rows = GoogleAdsCustomer(client, "1234567890").search("SELECT campaign.id FROM campaign")

        assert rows == ["row-1", "row-2"]
        client.get_service.assert_called_once_with("GoogleAdsService")
        service.search.assert_called_once_with(customer_id="1234567890", query="SELECT campaign.id FROM campaign")

    def test_search_error(self):
        failure = MagicMock()
        failure.errors = [MagicMock(message="Unrecognized field in the query: 'campaign.nam'.")]
        client = MagicMock()
        client.get_service.return_value.search.side_effect = GoogleAdsException(None, None, failure, "req-1")

        with pytest.raises(GoogleAdsQueryError) as exc_info:
            GoogleAdsCustomer(client, "1").search("SELECT campaign.nam FROM campaign")

        assert str(exc_info.value) == "Google Ads API Error: Unrecognized field in the query: 'campaign.nam'."

    def test_search_as_dicts(self):
        payload = Struct()
        payload.update({"campaign": {"name": "Brand"}, "metrics": {"clicks": "12"}})
        row = MagicMock(_pb=payload)
        client = MagicMock()
        client.get_service.return_value.search.return_value = [row]

        rows = GoogleAdsCustomer(client, "1").search_as_dicts("SELECT campaign.name FROM campaign")

        assert rows == [{"campaign": {"name": "Brand"}, "metrics": {"clicks": "12"}}]

    def test_customer_for_requires_both_groups(self, google_auth):
        with pytest.raises(GoogleAdsQueryError):
            customer_for(google_auth, None)
        with pytest.raises(GoogleAdsQueryError):
            customer_for(None, GoogleAdsConfig(developer_token="dev", customer_account_id="1"))


class TestProviderClients:
    def test_only_configured_providers(self, google_auth):
        clients = ProviderClients.from_config(AppConfig(google=google_auth))
        assert isinstance(clients.google, GoogleClients)
        assert clients.meta is None

    def test_nothing_configured(self):
        clients = ProviderClients.from_config(AppConfig())
        assert clients.google is None
        assert clients.meta is None

    @patch("marketing_analytics_mcp.auth.google_ads_auth.GoogleAdsClient")
    def test_google_ads_customer_is_fresh(self, mock_client_cls, full_config):
        clients = ProviderClients.from_config(full_config)

        first = clients.google_ads_customer()
        second = clients.google_ads_customer()

        assert first is not second
        assert mock_client_cls.load_from_dict.call_count == 2
        assert first.customer_id == "1234567890"
