"""Tools for Meta (Facebook) Ads insights."""
from typing import Literal, Optional

from pydantic import Field

from ..auth import ProviderClients
from ..config import ProviderFamily
from ..coordinator import ToolRegistry
from ..reports import meta
from ..responses import ToolResponse, error_response, handle_tool_error
from ..security import DATE_PATTERN, ToolArguments, validate_entity_id

MISSING_ACCOUNT = (
    "No ad account ID provided. Use meta_list_ad_accounts to find your account ID, "
    "then pass it as account_id."
)


class ListAdAccountsInput(ToolArguments):
    limit: int = Field(default=25, ge=1, le=500, description="Max accounts to return")


class AccountInput(ToolArguments):
    account_id: Optional[str] = Field(
        default=None,
        description="Ad account ID, e.g. 'act_123456789'. Use meta_list_ad_accounts to find available accounts.",
    )
    start_date: str = Field(..., pattern=DATE_PATTERN, description="Start date YYYY-MM-DD")
    end_date: str = Field(..., pattern=DATE_PATTERN, description="End date YYYY-MM-DD")


class AccountOverviewInput(AccountInput):
    breakdown: Literal["none", "age", "gender", "country", "placement", "device_platform"] = Field(
        default="none", description="Optional breakdown dimension"
    )


class CampaignInsightsInput(AccountInput):
    status: Literal["all", "ACTIVE", "PAUSED", "ARCHIVED"] = Field(
        default="all", description="Filter by campaign status"
    )
    limit: int = Field(default=25, ge=1, le=500, description="Max campaigns to return")


class AdSetInsightsInput(AccountInput):
    campaign_id: Optional[str] = Field(default=None, description="Filter to a specific campaign ID")
    limit: int = Field(default=25, ge=1, le=500, description="Max ad sets to return")


class AdInsightsInput(AccountInput):
    campaign_id: Optional[str] = Field(default=None, description="Filter to a specific campaign ID")
    adset_id: Optional[str] = Field(default=None, description="Filter to a specific ad set ID")
    limit: int = Field(default=25, ge=1, le=500, description="Max ads to return")


def register_meta_tools(registry: ToolRegistry, clients: ProviderClients) -> None:
    """Register the meta_* tools"""

    def resolve_account(account_id: Optional[str]) -> Optional[str]:
        if not account_id or not account_id.strip():
            return None
        return meta.normalize_account_id(account_id)

    @registry.tool(
        "meta_list_ad_accounts",
        "List all Meta/Facebook ad accounts accessible with the current access token. "
        "Returns account ID, name, status, currency, and timezone.",
        family=ProviderFamily.META,
        arguments=ListAdAccountsInput,
    )
    async def meta_list_ad_accounts(limit: int) -> ToolResponse:
        return await handle_tool_error(meta.list_ad_accounts, clients.meta, limit)

    @registry.tool(
        "meta_account_overview",
        "Get a high-level performance overview for a Meta ad account: total spend, impressions, clicks, "
        "CTR, CPC, CPM, and conversions for the specified date range. Optionally break down by age, "
        "gender, country, placement, or device.",
        family=ProviderFamily.META,
        arguments=AccountOverviewInput,
    )
    async def meta_account_overview(
        start_date: str, end_date: str, breakdown: str, account_id: Optional[str] = None
    ) -> ToolResponse:
        account = resolve_account(account_id)
        if not account:
            return error_response(MISSING_ACCOUNT)
        return await handle_tool_error(
            meta.account_overview, clients.meta, account, start_date, end_date, breakdown
        )

    @registry.tool(
        "meta_campaign_insights",
        "Get performance insights for all campaigns in a Meta ad account. "
        "Shows each campaign's spend, impressions, clicks, CTR, CPC, and conversions.",
        family=ProviderFamily.META,
        arguments=CampaignInsightsInput,
    )
    async def meta_campaign_insights(
        start_date: str, end_date: str, status: str, limit: int, account_id: Optional[str] = None
    ) -> ToolResponse:
        account = resolve_account(account_id)
        if not account:
            return error_response(MISSING_ACCOUNT)
        return await handle_tool_error(
            meta.campaign_insights, clients.meta, account, start_date, end_date, status, limit
        )

    @registry.tool(
        "meta_adset_insights",
        "Get performance insights for ad sets within a campaign or account. "
        "Shows spend, impressions, clicks, and conversions per ad set.",
        family=ProviderFamily.META,
        arguments=AdSetInsightsInput,
    )
    async def meta_adset_insights(
        start_date: str,
        end_date: str,
        limit: int,
        account_id: Optional[str] = None,
        campaign_id: Optional[str] = None,
    ) -> ToolResponse:
        account = resolve_account(account_id)
        if not account:
            return error_response(MISSING_ACCOUNT)
        if campaign_id:
            validate_entity_id(campaign_id, "Campaign ID")
        return await handle_tool_error(
            meta.adset_insights, clients.meta, account, start_date, end_date, campaign_id, limit
        )

    @registry.tool(
        "meta_ad_insights",
        "Get performance insights for individual ads. Shows each ad's name, ad set, campaign, "
        "spend, impressions, clicks, and conversions.",
        family=ProviderFamily.META,
        arguments=AdInsightsInput,
    )
    async def meta_ad_insights(
        start_date: str,
        end_date: str,
        limit: int,
        account_id: Optional[str] = None,
        campaign_id: Optional[str] = None,
        adset_id: Optional[str] = None,
    ) -> ToolResponse:
        account = resolve_account(account_id)
        if not account:
            return error_response(MISSING_ACCOUNT)
        if campaign_id:
            validate_entity_id(campaign_id, "Campaign ID")
        if adset_id:
            validate_entity_id(adset_id, "Ad set ID")
        return await handle_tool_error(
            meta.ad_insights, clients.meta, account, start_date, end_date, campaign_id, adset_id, limit
        )
