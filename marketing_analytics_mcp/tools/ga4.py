"""Tools for Google Analytics 4 reporting."""
from typing import List, Literal, Optional

from pydantic import Field

from ..auth import ProviderClients
from ..config import ProviderFamily
from ..coordinator import ToolRegistry
from ..reports import ga4
from ..responses import ToolResponse, error_response, handle_tool_error
from ..security import GA4_DATE_PATTERN, ToolArguments

MISSING_PROPERTY = (
    "No Property ID provided. Use ga4_list_accounts to find your Property ID, "
    "then pass it as property_id."
)

PROPERTY_ID_DESCRIPTION = (
    "GA4 Property ID (e.g. '123456789'). Use ga4_list_accounts to find available "
    "properties. If omitted, uses the default from env."
)
DATE_HINT = "(YYYY-MM-DD or relative like '7daysAgo', 'yesterday', 'today')"


class PropertyInput(ToolArguments):
    property_id: Optional[str] = Field(default=None, description=PROPERTY_ID_DESCRIPTION)


class DateRangeInput(PropertyInput):
    start_date: str = Field(default="28daysAgo", pattern=GA4_DATE_PATTERN, description=f"Start date {DATE_HINT}")
    end_date: str = Field(default="today", pattern=GA4_DATE_PATTERN, description=f"End date {DATE_HINT}")


class RunReportInput(DateRangeInput):
    """Input model for ga4_run_report."""

    dimensions: List[str] = Field(..., description="GA4 dimension names, e.g. ['pagePath', 'sessionSource']")
    metrics: List[str] = Field(
        ..., description="GA4 metric names, e.g. ['activeUsers', 'sessions', 'screenPageViews']"
    )
    limit: int = Field(default=10, ge=1, le=100000, description="Max rows to return")
    filter_field: Optional[str] = Field(default=None, description="Dimension name to filter on")
    filter_match: Optional[Literal["EXACT", "BEGINS_WITH", "ENDS_WITH", "CONTAINS", "FULL_REGEXP"]] = Field(
        default=None, description="Filter match type"
    )
    filter_value: Optional[str] = Field(default=None, description="Filter value")


class RealtimeReportInput(PropertyInput):
    dimensions: List[str] = Field(
        default=["unifiedScreenName"],
        description="Realtime dimensions, e.g. 'unifiedScreenName', 'country', 'city', 'deviceCategory'",
    )
    metrics: List[str] = Field(
        default=["activeUsers"],
        description="Realtime metrics, e.g. 'activeUsers', 'screenPageViews', 'conversions'",
    )
    limit: int = Field(default=10, ge=1, le=100000, description="Max rows to return")


class TopRowsInput(DateRangeInput):
    limit: int = Field(default=20, ge=1, le=100000, description="Max rows to return")


class UserMetricsInput(DateRangeInput):
    compare_previous_period: bool = Field(
        default=False,
        description="If true, also fetches the previous period of the same length for comparison",
    )


def register_ga4_tools(registry: ToolRegistry, clients: ProviderClients) -> None:
    """Register the ga4_* tools"""
    default_property = clients.config.ga4.property_id if clients.config.ga4 else None

    def resolve_property(property_id: Optional[str]) -> Optional[str]:
        return property_id or default_property

    @registry.tool(
        "ga4_list_accounts",
        "List all GA4 properties accessible to the authenticated Google account. "
        "Use this to discover Property IDs for use with other ga4_* tools.",
        family=ProviderFamily.GOOGLE,
    )
    async def ga4_list_accounts() -> ToolResponse:
        return await handle_tool_error(ga4.list_accounts, clients.google.analytics_admin)

    @registry.tool(
        "ga4_run_report",
        "Run a custom GA4 report with specified dimensions, metrics, and date range. "
        "Use GA4 API names like 'activeUsers', 'sessions', 'pagePath', 'sessionSource'. "
        "Dates: YYYY-MM-DD or relative like '7daysAgo', '30daysAgo', 'today', 'yesterday'.",
        family=ProviderFamily.GOOGLE,
        arguments=RunReportInput,
    )
    async def ga4_run_report(
        dimensions: List[str],
        metrics: List[str],
        start_date: str,
        end_date: str,
        limit: int,
        property_id: Optional[str] = None,
        filter_field: Optional[str] = None,
        filter_match: Optional[str] = None,
        filter_value: Optional[str] = None,
    ) -> ToolResponse:
        prop = resolve_property(property_id)
        if not prop:
            return error_response(MISSING_PROPERTY)
        return await handle_tool_error(
            ga4.run_report,
            clients.google.analytics_data,
            prop,
            dimensions,
            metrics,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            filter_field=filter_field,
            filter_match=filter_match,
            filter_value=filter_value,
        )

    @registry.tool(
        "ga4_realtime_report",
        "Get a realtime GA4 report showing current active users and activity from the last 30 minutes.",
        family=ProviderFamily.GOOGLE,
        arguments=RealtimeReportInput,
    )
    async def ga4_realtime_report(
        dimensions: List[str],
        metrics: List[str],
        limit: int,
        property_id: Optional[str] = None,
    ) -> ToolResponse:
        prop = resolve_property(property_id)
        if not prop:
            return error_response(MISSING_PROPERTY)
        return await handle_tool_error(
            ga4.realtime_report, clients.google.analytics_data, prop, dimensions, metrics, limit
        )

    @registry.tool(
        "ga4_top_pages",
        "Get the top pages by views for the specified date range. "
        "Returns page path, title, views, users, and average session duration.",
        family=ProviderFamily.GOOGLE,
        arguments=TopRowsInput,
    )
    async def ga4_top_pages(start_date: str, end_date: str, limit: int, property_id: Optional[str] = None) -> ToolResponse:
        prop = resolve_property(property_id)
        if not prop:
            return error_response(MISSING_PROPERTY)
        return await handle_tool_error(
            ga4.top_pages, clients.google.analytics_data, prop, start_date, end_date, limit
        )

    @registry.tool(
        "ga4_traffic_sources",
        "Get traffic source breakdown showing sessions, users, and engagement by source/medium "
        "for the specified date range.",
        family=ProviderFamily.GOOGLE,
        arguments=TopRowsInput,
    )
    async def ga4_traffic_sources(start_date: str, end_date: str, limit: int, property_id: Optional[str] = None) -> ToolResponse:
        prop = resolve_property(property_id)
        if not prop:
            return error_response(MISSING_PROPERTY)
        return await handle_tool_error(
            ga4.traffic_sources, clients.google.analytics_data, prop, start_date, end_date, limit
        )

    @registry.tool(
        "ga4_user_metrics",
        "Get a summary of key user metrics: total users, new users, sessions, page views, bounce rate, "
        "avg session duration, and engagement rate. Optionally compare with the previous period.",
        family=ProviderFamily.GOOGLE,
        arguments=UserMetricsInput,
    )
    async def ga4_user_metrics(
        start_date: str,
        end_date: str,
        compare_previous_period: bool,
        property_id: Optional[str] = None,
    ) -> ToolResponse:
        prop = resolve_property(property_id)
        if not prop:
            return error_response(MISSING_PROPERTY)
        return await handle_tool_error(
            ga4.user_metrics,
            clients.google.analytics_data,
            prop,
            start_date,
            end_date,
            compare_previous_period,
        )
