"""Tests for the response envelope and setup guides."""
import threading

import pytest
from mcp.types import CallToolResult

from marketing_analytics_mcp.config import AppConfig, MetaConfig, ProviderFamily
from marketing_analytics_mcp.responses import (
    ToolResponse,
    error_response,
    handle_tool_error,
    not_configured_response,
    text_response,
)
from marketing_analytics_mcp.setup_guides import SETUP_TIP, full_setup_guide


class TestEnvelope:
    def test_text_response(self):
        response = text_response("hello")
        assert response.text == "hello"
        assert response.is_error is False

    def test_error_response(self):
        response = error_response("boom")
        assert response.text == "Error: boom"
        assert response.is_error is True

    def test_to_call_tool_result(self):
        result = error_response("boom").to_call_tool_result()
        assert isinstance(result, CallToolResult)
        assert result.isError is True
        assert result.content[0].text == "Error: boom"


class TestHandleToolError:
    @pytest.mark.asyncio
    async def test_wraps_string_result(self):
        response = await handle_tool_error(lambda name: f"Hello {name}", "GA4")
        assert response.text == "Hello GA4"
        assert not response.is_error

    @pytest.mark.asyncio
    async def test_passes_tool_response_through(self):
        original = ToolResponse(content=text_response("x").content)
        assert await handle_tool_error(lambda: original) is original

    @pytest.mark.asyncio
    async def test_exception_becomes_error(self):
        def failing_report():
            raise RuntimeError("Quota exceeded")

        response = await handle_tool_error(failing_report)
        assert response.is_error
        assert response.text == "Error: Quota exceeded"

    @pytest.mark.asyncio
    async def test_runs_in_worker_thread(self):
        caller = threading.get_ident()
        response = await handle_tool_error(lambda: str(threading.get_ident()))
        assert response.text != str(caller)


class TestNotConfigured:
    def test_google(self):
        response = not_configured_response(ProviderFamily.GOOGLE, AppConfig())
        assert response.is_error
        assert "Google OAuth2 is not configured" in response.text
        assert "GOOGLE_REFRESH_TOKEN" in response.text
        assert response.text.endswith(SETUP_TIP)

    def test_meta(self):
        response = not_configured_response(ProviderFamily.META, AppConfig())
        assert response.is_error
        assert "Meta Ads is not configured" in response.text
        assert "META_ACCESS_TOKEN" in response.text

    def test_google_ads_without_google_lists_oauth_first(self):
        response = not_configured_response(ProviderFamily.GOOGLE_ADS, AppConfig())
        text = response.text
        assert "which is also not configured" in text
        assert text.index("## Google OAuth2 Setup") < text.index("## Google Ads Setup")

    def test_google_ads_with_google(self, google_auth):
        text = not_configured_response(ProviderFamily.GOOGLE_ADS, AppConfig(google=google_auth)).text
        assert "## Google OAuth2 Setup" not in text
        assert "GOOGLE_ADS_DEVELOPER_TOKEN" in text


class TestFullSetupGuide:
    def test_nothing_configured(self):
        guide = full_setup_guide(AppConfig())
        assert "- Google OAuth2 (GA4 + Search Console): **NOT CONFIGURED**" in guide
        assert "- Google Ads: **NOT CONFIGURED**" in guide
        assert "## Meta (Facebook) Ads Setup" in guide

    def test_partially_configured(self):
        guide = full_setup_guide(AppConfig(meta=MetaConfig(access_token="t")))
        assert "- Meta Ads: **CONFIGURED**" in guide
        assert "## Meta (Facebook) Ads Setup" not in guide
        assert "## Google Ads Setup" in guide

    def test_everything_configured(self, full_config):
        guide = full_setup_guide(full_config)
        assert "All APIs are configured" in guide
        assert "`gads_account_summary`" in guide
        assert "NOT CONFIGURED" not in guide
