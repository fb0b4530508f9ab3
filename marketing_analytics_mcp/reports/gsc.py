"""Google Search Console reports (webmasters v3 and searchconsole v1)."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import structlog

from marketing_analytics_mcp.formatters import (
    bullet_list,
    format_number,
    format_percent,
    markdown_table,
)

logger = structlog.get_logger(__name__)

METRIC_HEADERS = ["Clicks", "Impressions", "CTR", "Position"]


@dataclass
class SearchAnalyticsRow:
    keys: List[str] = field(default_factory=list)
    clicks: float = 0
    impressions: float = 0
    ctr: float = 0
    position: float = 0

    @classmethod
    def from_api(cls, row: Dict[str, Any]) -> "SearchAnalyticsRow":
        return cls(
            keys=[key or "" for key in row.get("keys") or []],
            clicks=row.get("clicks") or 0,
            impressions=row.get("impressions") or 0,
            ctr=row.get("ctr") or 0,
            position=row.get("position") or 0,
        )

    def key(self, index: int = 0) -> str:
        return self.keys[index] if index < len(self.keys) else ""

    def metric_cells(self) -> List[str]:
        return [
            format_number(self.clicks),
            format_number(self.impressions),
            format_percent(self.ctr),
            f"{float(self.position):.1f}",
        ]


@dataclass
class SitemapEntry:
    path: str = ""
    type: str = ""
    is_pending: bool = False
    last_downloaded: str = ""
    submitted: int = 0
    indexed: int = 0

    @classmethod
    def from_api(cls, sitemap: Dict[str, Any]) -> "SitemapEntry":
        contents = sitemap.get("contents") or []
        return cls(
            path=sitemap.get("path") or "",
            type=sitemap.get("type") or "",
            is_pending=bool(sitemap.get("isPending")),
            last_downloaded=sitemap.get("lastDownloaded") or "",
            # int64 counts arrive as strings
            submitted=sum(int(content.get("submitted") or 0) for content in contents),
            indexed=sum(int(content.get("indexed") or 0) for content in contents),
        )


def _filter_groups(dimension: str, operator: str, expression: str) -> List[Dict[str, Any]]:
    return [{"filters": [{"dimension": dimension, "operator": operator, "expression": expression}]}]


def _query(webmasters, site_url: str, body: Dict[str, Any]) -> List[SearchAnalyticsRow]:
    response = webmasters.searchanalytics().query(siteUrl=site_url, body=body).execute()
    rows = response.get("rows") or []
    logger.debug("gsc_query", site_url=site_url, dimensions=body.get("dimensions"), rows=len(rows))
    return [SearchAnalyticsRow.from_api(row) for row in rows]


def list_sites(webmasters) -> str:
    response = webmasters.sites().list().execute()
    sites = response.get("siteEntry") or []
    if not sites:
        return "No Search Console sites found for the authenticated user."

    rows = [[site.get("siteUrl") or "", site.get("permissionLevel") or ""] for site in sites]
    header = f"**Search Console Sites** ({len(rows)} found)\n\nUse the Site URL with any gsc_* tool.\n\n"
    return header + markdown_table(["Site URL", "Permission Level"], rows)


def search_analytics(
    webmasters,
    site_url: str,
    start_date: str,
    end_date: str,
    dimensions: Optional[List[str]] = None,
    row_limit: int = 25,
    search_type: str = "web",
    filter_dimension: Optional[str] = None,
    filter_operator: Optional[str] = None,
    filter_expression: Optional[str] = None,
) -> str:
    """
    Search performance grouped by the requested dimensions.

    Args:
        webmasters: webmasters v3 service
        site_url: Property URL or sc-domain: property
        start_date: YYYY-MM-DD
        end_date: YYYY-MM-DD
        dimensions: query, page, country, device, date, searchAppearance
        row_limit: 1-25000
        search_type: web, image, video, news, discover, googleNews
        filter_dimension, filter_operator, filter_expression: Optional
            single filter, applied only when all three are given

    Returns:
        Markdown table, one column per dimension plus the four metrics
    """
    dimensions = dimensions or ["query"]
    body: Dict[str, Any] = {
        "startDate": start_date,
        "endDate": end_date,
        "dimensions": dimensions,
        "rowLimit": row_limit,
        "type": search_type,
    }
    if filter_dimension and filter_operator and filter_expression:
        body["dimensionFilterGroups"] = _filter_groups(filter_dimension, filter_operator, filter_expression)

    rows = _query(webmasters, site_url, body)
    if not rows:
        return f"No search analytics data found for {start_date} to {end_date}."

    table = [
        [row.key(i) for i in range(len(dimensions))] + row.metric_cells()
        for row in rows
    ]
    header = f"**Search Analytics** ({start_date} to {end_date}, type: {search_type})\n\n"
    return header + markdown_table(dimensions + METRIC_HEADERS, table)


def top_queries(
    webmasters,
    site_url: str,
    start_date: str,
    end_date: str,
    limit: int = 25,
    page_filter: Optional[str] = None,
) -> str:
    body: Dict[str, Any] = {
        "startDate": start_date,
        "endDate": end_date,
        "dimensions": ["query"],
        "rowLimit": limit,
    }
    if page_filter:
        body["dimensionFilterGroups"] = _filter_groups("page", "contains", page_filter)

    rows = _query(webmasters, site_url, body)
    if not rows:
        return f"No query data found for {start_date} to {end_date}."

    table = [[row.key()] + row.metric_cells() for row in rows]
    header = f"**Top Search Queries** ({start_date} to {end_date})\n\n"
    return header + markdown_table(["Query"] + METRIC_HEADERS, table)


def top_pages(
    webmasters,
    site_url: str,
    start_date: str,
    end_date: str,
    limit: int = 25,
    query_filter: Optional[str] = None,
) -> str:
    body: Dict[str, Any] = {
        "startDate": start_date,
        "endDate": end_date,
        "dimensions": ["page"],
        "rowLimit": limit,
    }
    if query_filter:
        body["dimensionFilterGroups"] = _filter_groups("query", "contains", query_filter)

    rows = _query(webmasters, site_url, body)
    if not rows:
        return f"No page data found for {start_date} to {end_date}."

    table = [[row.key()] + row.metric_cells() for row in rows]
    header = f"**Top Pages in Search** ({start_date} to {end_date})\n\n"
    return header + markdown_table(["Page"] + METRIC_HEADERS, table)


def inspect_url(search_console, site_url: str, url: str) -> str:
    """Index status and mobile usability of one URL"""
    body = {"inspectionUrl": url, "siteUrl": site_url}
    response = search_console.urlInspection().index().inspect(body=body).execute()

    result = response.get("inspectionResult")
    if not result:
        return f"No inspection data returned for {url}."

    output = f"**URL Inspection: {url}**\n\n"

    index_status = result.get("indexStatusResult")
    if index_status:
        items = [
            ("Coverage State", index_status.get("coverageState") or "Unknown"),
            ("Indexing State", index_status.get("indexingState") or "Unknown"),
            ("Last Crawl Time", index_status.get("lastCrawlTime") or "Never"),
            ("Page Fetch State", index_status.get("pageFetchState") or "Unknown"),
            ("Robots.txt State", index_status.get("robotsTxtState") or "Unknown"),
            ("Crawled As", index_status.get("crawledAs") or "Unknown"),
        ]
        if index_status.get("referringUrls"):
            items.append(("Referring URLs", ", ".join(index_status["referringUrls"])))
        if index_status.get("sitemap"):
            items.append(("Sitemaps", ", ".join(index_status["sitemap"])))
        output += "### Indexing\n" + bullet_list(items)

    mobile = result.get("mobileUsabilityResult")
    if mobile:
        output += "\n### Mobile Usability\n"
        output += bullet_list([("Verdict", mobile.get("verdict") or "Unknown")])
        issues = mobile.get("issues") or []
        if issues:
            output += "- **Issues:**\n"
            for issue in issues:
                output += f"  - {issue.get('issueType', '')}: {issue.get('severity', '')}\n"

    return output


def list_sitemaps(webmasters, site_url: str) -> str:
    response = webmasters.sitemaps().list(siteUrl=site_url).execute()
    sitemaps = [SitemapEntry.from_api(item) for item in response.get("sitemap") or []]
    if not sitemaps:
        return f"No sitemaps found for {site_url}."

    rows = [
        [
            sitemap.path,
            sitemap.type,
            "Pending" if sitemap.is_pending else "Processed",
            sitemap.last_downloaded or "N/A",
            format_number(sitemap.submitted),
            format_number(sitemap.indexed),
        ]
        for sitemap in sitemaps
    ]
    headers = ["Sitemap URL", "Type", "Status", "Last Downloaded", "Submitted", "Indexed"]
    return f"**Sitemaps for {site_url}**\n\n" + markdown_table(headers, rows)
