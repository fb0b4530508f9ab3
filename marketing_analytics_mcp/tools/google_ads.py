"""Tools for Google Ads reporting through GAQL."""
from typing import Any, Callable, Literal, Optional

from pydantic import Field

from ..auth import ProviderClients
from ..config import ProviderFamily
from ..coordinator import ToolRegistry
from ..reports import google_ads
from ..responses import ToolResponse, handle_tool_error
from ..security import ToolArguments

DateRange = Literal[tuple(google_ads.DATE_RANGES)]
OrderBy = Literal[tuple(google_ads.ORDER_BY_METRICS)]


class QueryInput(ToolArguments):
    query: str = Field(..., min_length=1, description="A valid GAQL SELECT query")


class DateRangeInput(ToolArguments):
    date_range: DateRange = Field(default="LAST_30_DAYS", description="Predefined date range")


class CampaignPerformanceInput(DateRangeInput):
    """Input model for gads_campaign_performance."""

    status: Literal[tuple(google_ads.CAMPAIGN_STATUSES)] = Field(
        default="all", description="Filter by campaign status"
    )
    campaign_type: Literal[tuple(google_ads.CAMPAIGN_TYPES)] = Field(
        default="all", description="Filter by campaign type"
    )
    limit: int = Field(default=25, ge=1, le=10000, description="Max campaigns to return")
    order_by: OrderBy = Field(default="cost", description="Sort by metric")


class CampaignNameInput(DateRangeInput):
    campaign_name: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="Filter to a specific campaign (exact name match)",
    )


class KeywordPerformanceInput(CampaignNameInput):
    limit: int = Field(default=50, ge=1, le=10000, description="Max keywords to return")
    order_by: OrderBy = Field(default="clicks", description="Sort by metric")


class AdGroupPerformanceInput(CampaignNameInput):
    limit: int = Field(default=25, ge=1, le=10000, description="Max ad groups to return")
    order_by: OrderBy = Field(default="cost", description="Sort by metric")


def register_google_ads_tools(registry: ToolRegistry, clients: ProviderClients) -> None:
    """Register the gads_* tools"""

    def with_customer(report: Callable[..., str], *args: Any, **kwargs: Any) -> str:
        # A new client per call, built inside the worker thread
        return report(clients.google_ads_customer(), *args, **kwargs)

    @registry.tool(
        "gads_query",
        "Execute a raw Google Ads Query Language (GAQL) query. Use for custom queries not covered by "
        "other tools. Example: SELECT campaign.name, metrics.clicks FROM campaign WHERE segments.date "
        "DURING LAST_30_DAYS",
        family=ProviderFamily.GOOGLE_ADS,
        arguments=QueryInput,
    )
    async def gads_query(query: str) -> ToolResponse:
        return await handle_tool_error(with_customer, google_ads.execute_query, query)

    @registry.tool(
        "gads_campaign_performance",
        "Get performance metrics for Google Ads campaigns: impressions, clicks, cost, conversions, CTR, "
        "CPC, and conversion rate.",
        family=ProviderFamily.GOOGLE_ADS,
        arguments=CampaignPerformanceInput,
    )
    async def gads_campaign_performance(
        date_range: str, status: str, campaign_type: str, limit: int, order_by: str
    ) -> ToolResponse:
        return await handle_tool_error(
            with_customer,
            google_ads.campaign_performance,
            date_range=date_range,
            status=status,
            campaign_type=campaign_type,
            limit=limit,
            order_by=order_by,
        )

    @registry.tool(
        "gads_keyword_performance",
        "Get performance metrics for Google Ads keywords: search term, match type, clicks, impressions, "
        "cost, conversions, and quality score.",
        family=ProviderFamily.GOOGLE_ADS,
        arguments=KeywordPerformanceInput,
    )
    async def gads_keyword_performance(
        date_range: str, limit: int, order_by: str, campaign_name: Optional[str] = None
    ) -> ToolResponse:
        return await handle_tool_error(
            with_customer,
            google_ads.keyword_performance,
            date_range=date_range,
            campaign_name=campaign_name,
            limit=limit,
            order_by=order_by,
        )

    @registry.tool(
        "gads_ad_group_performance",
        "Get performance metrics for Google Ads ad groups: impressions, clicks, cost, conversions "
        "grouped by ad group within campaigns.",
        family=ProviderFamily.GOOGLE_ADS,
        arguments=AdGroupPerformanceInput,
    )
    async def gads_ad_group_performance(
        date_range: str, limit: int, order_by: str, campaign_name: Optional[str] = None
    ) -> ToolResponse:
        return await handle_tool_error(
            with_customer,
            google_ads.ad_group_performance,
            date_range=date_range,
            campaign_name=campaign_name,
            limit=limit,
            order_by=order_by,
        )

    @registry.tool(
        "gads_account_summary",
        "Get a high-level summary of the Google Ads account: total spend, clicks, impressions, "
        "conversions, and key averages, plus top 5 campaigns by spend.",
        family=ProviderFamily.GOOGLE_ADS,
        arguments=DateRangeInput,
    )
    async def gads_account_summary(date_range: str) -> ToolResponse:
        return await handle_tool_error(with_customer, google_ads.account_summary, date_range)
