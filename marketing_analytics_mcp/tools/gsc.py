"""Tools for Google Search Console."""
from typing import List, Literal, Optional

from pydantic import Field

from ..auth import ProviderClients
from ..config import ProviderFamily
from ..coordinator import ToolRegistry
from ..reports import gsc
from ..responses import ToolResponse, error_response, handle_tool_error
from ..security import DATE_PATTERN, ToolArguments

MISSING_SITE = "No Site URL provided. Use gsc_list_sites to find your site, then pass it as site_url."

SITE_URL_DESCRIPTION = (
    "Site URL (e.g. 'https://example.com/' or 'sc-domain:example.com'). Use gsc_list_sites "
    "to find available sites. If omitted, uses the default from env."
)


class SiteInput(ToolArguments):
    site_url: Optional[str] = Field(default=None, description=SITE_URL_DESCRIPTION)


class DateRangeInput(SiteInput):
    start_date: str = Field(..., pattern=DATE_PATTERN, description="Start date YYYY-MM-DD")
    end_date: str = Field(..., pattern=DATE_PATTERN, description="End date YYYY-MM-DD")


class SearchAnalyticsInput(DateRangeInput):
    """Input model for gsc_search_analytics."""

    dimensions: List[Literal["query", "page", "country", "device", "date", "searchAppearance"]] = Field(
        default=["query"], description="Dimensions to group by"
    )
    row_limit: int = Field(default=25, ge=1, le=25000, description="Max rows (1-25000)")
    search_type: Literal["web", "image", "video", "news", "discover", "googleNews"] = Field(
        default="web", description="Search type to filter"
    )
    filter_dimension: Optional[Literal["query", "page", "country", "device"]] = Field(
        default=None, description="Dimension to filter on"
    )
    filter_operator: Optional[
        Literal["equals", "contains", "notContains", "includingRegex", "excludingRegex"]
    ] = Field(default=None, description="Filter operator")
    filter_expression: Optional[str] = Field(default=None, description="Filter expression/value")


class TopQueriesInput(DateRangeInput):
    limit: int = Field(default=25, ge=1, le=25000, description="Max rows to return")
    page_filter: Optional[str] = Field(
        default=None, description="Filter to queries for a specific page URL (contains match)"
    )


class TopPagesInput(DateRangeInput):
    limit: int = Field(default=25, ge=1, le=25000, description="Max rows to return")
    query_filter: Optional[str] = Field(
        default=None, description="Filter to pages matching a specific query (contains match)"
    )


class InspectUrlInput(SiteInput):
    url: str = Field(
        ..., min_length=1, description="The fully qualified URL to inspect, e.g. https://example.com/page"
    )


def register_gsc_tools(registry: ToolRegistry, clients: ProviderClients) -> None:
    """Register the gsc_* tools"""
    default_site = clients.config.gsc.site_url if clients.config.gsc else None

    def resolve_site(site_url: Optional[str]) -> Optional[str]:
        return site_url or default_site

    @registry.tool(
        "gsc_list_sites",
        "List all Search Console sites/properties accessible to the authenticated Google account. "
        "Use this to discover Site URLs for use with other gsc_* tools.",
        family=ProviderFamily.GOOGLE,
    )
    async def gsc_list_sites() -> ToolResponse:
        return await handle_tool_error(gsc.list_sites, clients.google.webmasters)

    @registry.tool(
        "gsc_search_analytics",
        "Query Search Console performance data (clicks, impressions, CTR, position) grouped by "
        "query, page, country, device, date or search appearance, with an optional filter.",
        family=ProviderFamily.GOOGLE,
        arguments=SearchAnalyticsInput,
    )
    async def gsc_search_analytics(
        start_date: str,
        end_date: str,
        dimensions: List[str],
        row_limit: int,
        search_type: str,
        site_url: Optional[str] = None,
        filter_dimension: Optional[str] = None,
        filter_operator: Optional[str] = None,
        filter_expression: Optional[str] = None,
    ) -> ToolResponse:
        site = resolve_site(site_url)
        if not site:
            return error_response(MISSING_SITE)
        return await handle_tool_error(
            gsc.search_analytics,
            clients.google.webmasters,
            site,
            start_date,
            end_date,
            dimensions=dimensions,
            row_limit=row_limit,
            search_type=search_type,
            filter_dimension=filter_dimension,
            filter_operator=filter_operator,
            filter_expression=filter_expression,
        )

    @registry.tool(
        "gsc_top_queries",
        "Get the top search queries driving traffic to the site, with clicks, impressions, CTR "
        "and average position. Optionally restrict to one page.",
        family=ProviderFamily.GOOGLE,
        arguments=TopQueriesInput,
    )
    async def gsc_top_queries(
        start_date: str,
        end_date: str,
        limit: int,
        site_url: Optional[str] = None,
        page_filter: Optional[str] = None,
    ) -> ToolResponse:
        site = resolve_site(site_url)
        if not site:
            return error_response(MISSING_SITE)
        return await handle_tool_error(
            gsc.top_queries, clients.google.webmasters, site, start_date, end_date, limit, page_filter
        )

    @registry.tool(
        "gsc_top_pages",
        "Get the top pages in Google Search by clicks, with impressions, CTR and average "
        "position. Optionally restrict to one query.",
        family=ProviderFamily.GOOGLE,
        arguments=TopPagesInput,
    )
    async def gsc_top_pages(
        start_date: str,
        end_date: str,
        limit: int,
        site_url: Optional[str] = None,
        query_filter: Optional[str] = None,
    ) -> ToolResponse:
        site = resolve_site(site_url)
        if not site:
            return error_response(MISSING_SITE)
        return await handle_tool_error(
            gsc.top_pages, clients.google.webmasters, site, start_date, end_date, limit, query_filter
        )

    @registry.tool(
        "gsc_inspect_url",
        "Inspect a URL to see its Google indexing status, crawl info, mobile usability, and any "
        "issues. Useful for debugging why a page isn't appearing in search.",
        family=ProviderFamily.GOOGLE,
        arguments=InspectUrlInput,
    )
    async def gsc_inspect_url(url: str, site_url: Optional[str] = None) -> ToolResponse:
        site = resolve_site(site_url)
        if not site:
            return error_response(MISSING_SITE)
        return await handle_tool_error(gsc.inspect_url, clients.google.search_console, site, url)

    @registry.tool(
        "gsc_list_sitemaps",
        "List all sitemaps submitted for the site, including their status, last download date, "
        "and number of URLs submitted/indexed.",
        family=ProviderFamily.GOOGLE,
        arguments=SiteInput,
    )
    async def gsc_list_sitemaps(site_url: Optional[str] = None) -> ToolResponse:
        site = resolve_site(site_url)
        if not site:
            return error_response(MISSING_SITE)
        return await handle_tool_error(gsc.list_sitemaps, clients.google.webmasters, site)
