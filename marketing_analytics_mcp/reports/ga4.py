"""
GA4 Reports
===========

Report functions for the Google Analytics Data API (v1beta) and the
Admin API account listing. Each function takes an authenticated client,
issues the request and renders markdown.
"""

import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional, Tuple

import structlog
from google.analytics.admin_v1beta import ListAccountSummariesRequest
from google.analytics.data_v1beta.types import (
    DateRange,
    Dimension,
    Filter,
    FilterExpression,
    Metric,
    MetricAggregation,
    OrderBy,
    RunRealtimeReportRequest,
    RunReportRequest,
)

from marketing_analytics_mcp.formatters import (
    bullet_list,
    format_change,
    format_duration,
    format_number,
    format_percent,
    markdown_table,
    truncate,
)

logger = structlog.get_logger(__name__)

USER_METRICS = [
    ("totalUsers", "Total Users"),
    ("newUsers", "New Users"),
    ("sessions", "Sessions"),
    ("screenPageViews", "Page Views"),
    ("bounceRate", "Bounce Rate"),
    ("averageSessionDuration", "Avg Session Duration"),
    ("engagementRate", "Engagement Rate"),
]

_DAYS_AGO = re.compile(r'^(\d+)daysAgo$')


@dataclass
class ReportRow:
    dimensions: List[str]
    metrics: List[str]

    def dimension(self, index: int, default: str = "") -> str:
        if index < len(self.dimensions) and self.dimensions[index]:
            return self.dimensions[index]
        return default

    def metric(self, index: int) -> str:
        if index < len(self.metrics) and self.metrics[index]:
            return self.metrics[index]
        return "0"


@dataclass
class ReportTable:
    """A GA4 response flattened to header names and string cells"""
    dimension_headers: List[str] = field(default_factory=list)
    metric_headers: List[str] = field(default_factory=list)
    rows: List[ReportRow] = field(default_factory=list)
    row_count: int = 0
    totals: List[ReportRow] = field(default_factory=list)

    @classmethod
    def from_response(cls, response) -> "ReportTable":
        def to_row(row) -> ReportRow:
            return ReportRow(
                dimensions=[value.value for value in row.dimension_values],
                metrics=[value.value for value in row.metric_values],
            )

        rows = [to_row(row) for row in response.rows]
        return cls(
            dimension_headers=[header.name for header in response.dimension_headers],
            metric_headers=[header.name for header in response.metric_headers],
            rows=rows,
            row_count=response.row_count or len(rows),
            totals=[to_row(row) for row in response.totals],
        )

    @property
    def headers(self) -> List[str]:
        return self.dimension_headers + self.metric_headers


def resolve_date(value: str, today: Optional[date] = None) -> date:
    """
    Resolve a GA4 date string to a calendar date.

    Accepts YYYY-MM-DD, "today", "yesterday" and "NdaysAgo".
    """
    today = today or date.today()
    if value == "today":
        return today
    if value == "yesterday":
        return today - timedelta(days=1)
    match = _DAYS_AGO.match(value)
    if match:
        return today - timedelta(days=int(match.group(1)))
    return date.fromisoformat(value)


def previous_period(start_date: str, end_date: str, today: Optional[date] = None) -> Tuple[str, str]:
    """
    The period of equal inclusive length ending the day before start_date.

    2024-01-08..2024-01-14 gives 2024-01-01..2024-01-07.
    """
    start = resolve_date(start_date, today)
    end = resolve_date(end_date, today)
    days = (end - start).days + 1
    prev_end = start - timedelta(days=1)
    prev_start = prev_end - timedelta(days=days - 1)
    return prev_start.isoformat(), prev_end.isoformat()


def format_metric(name: str, value: str) -> str:
    """Format a metric value based on its API name"""
    lowered = name.lower()
    if "rate" in lowered or "ctr" in lowered:
        return format_percent(value)
    if "duration" in lowered or "time" in lowered:
        return format_duration(value)
    return format_number(value)


def _property(property_id: str) -> str:
    return f"properties/{property_id}"


def list_accounts(admin) -> str:
    """List every GA4 property the authenticated user can read"""
    summaries = list(admin.list_account_summaries(request=ListAccountSummariesRequest(page_size=200)))
    if not summaries:
        return "No GA4 accounts found for the authenticated user."

    rows = []
    for account in summaries:
        account_name = account.display_name or account.account or ""
        for prop in account.property_summaries:
            rows.append([
                account_name,
                prop.display_name or "",
                (prop.property or "").replace("properties/", ""),
            ])

    if not rows:
        return "Accounts found but no GA4 properties available."

    header = f"**GA4 Properties** ({len(rows)} found)\n\nUse the Property ID with any ga4_* tool.\n\n"
    return header + markdown_table(["Account", "Property Name", "Property ID"], rows)


def run_report(
    client,
    property_id: str,
    dimensions: List[str],
    metrics: List[str],
    start_date: str = "28daysAgo",
    end_date: str = "today",
    limit: int = 10,
    filter_field: Optional[str] = None,
    filter_match: Optional[str] = None,
    filter_value: Optional[str] = None,
) -> str:
    """
    Run an arbitrary GA4 report.

    The dimension filter is applied only when field, match type and value
    are all given.
    """
    request = RunReportRequest(
        property=_property(property_id),
        date_ranges=[DateRange(start_date=start_date, end_date=end_date)],
        dimensions=[Dimension(name=name) for name in dimensions],
        metrics=[Metric(name=name) for name in metrics],
        limit=limit,
    )
    if filter_field and filter_match and filter_value:
        request.dimension_filter = FilterExpression(
            filter=Filter(
                field_name=filter_field,
                string_filter=Filter.StringFilter(
                    match_type=Filter.StringFilter.MatchType[filter_match],
                    value=filter_value,
                ),
            )
        )

    table = ReportTable.from_response(client.run_report(request=request))
    if not table.rows:
        return f"No data found for {start_date} to {end_date}."

    rows = []
    for row in table.rows:
        cells = [row.dimension(i) for i in range(len(table.dimension_headers))]
        cells.extend(
            format_metric(name, row.metric(i)) for i, name in enumerate(table.metric_headers)
        )
        rows.append(cells)

    header = f"**GA4 Report** ({start_date} to {end_date}) - {table.row_count} rows\n\n"
    return header + markdown_table(table.headers, rows)


def realtime_report(
    client,
    property_id: str,
    dimensions: Optional[List[str]] = None,
    metrics: Optional[List[str]] = None,
    limit: int = 10,
) -> str:
    """Activity from the last 30 minutes, with the total of the first metric"""
    dimensions = dimensions or ["unifiedScreenName"]
    metrics = metrics or ["activeUsers"]
    request = RunRealtimeReportRequest(
        property=_property(property_id),
        dimensions=[Dimension(name=name) for name in dimensions],
        metrics=[Metric(name=name) for name in metrics],
        limit=limit,
        metric_aggregations=[MetricAggregation.TOTAL],
    )

    table = ReportTable.from_response(client.run_realtime_report(request=request))
    if not table.rows:
        return "No realtime data available right now."

    rows = [
        [row.dimension(i) for i in range(len(table.dimension_headers))]
        + [format_number(row.metric(i)) for i in range(len(table.metric_headers))]
        for row in table.rows
    ]

    total_line = ""
    if table.totals and table.totals[0].metrics:
        total_line = f"\n\n**Total active users (last 30 min):** {format_number(table.totals[0].metric(0))}"

    return "**GA4 Realtime Report** (last 30 minutes)\n\n" + markdown_table(table.headers, rows) + total_line


def top_pages(client, property_id: str, start_date: str = "28daysAgo", end_date: str = "today", limit: int = 20) -> str:
    request = RunReportRequest(
        property=_property(property_id),
        date_ranges=[DateRange(start_date=start_date, end_date=end_date)],
        dimensions=[Dimension(name="pagePath"), Dimension(name="pageTitle")],
        metrics=[
            Metric(name="screenPageViews"),
            Metric(name="totalUsers"),
            Metric(name="averageSessionDuration"),
        ],
        order_bys=[OrderBy(metric=OrderBy.MetricOrderBy(metric_name="screenPageViews"), desc=True)],
        limit=limit,
    )

    table = ReportTable.from_response(client.run_report(request=request))
    if not table.rows:
        return f"No page data found for {start_date} to {end_date}."

    rows = [
        [
            row.dimension(0),
            truncate(row.dimension(1), 50),
            format_number(row.metric(0)),
            format_number(row.metric(1)),
            format_duration(row.metric(2)),
        ]
        for row in table.rows
    ]
    headers = ["Page Path", "Page Title", "Views", "Users", "Avg Duration"]
    return f"**Top Pages** ({start_date} to {end_date})\n\n" + markdown_table(headers, rows)


def traffic_sources(client, property_id: str, start_date: str = "28daysAgo", end_date: str = "today", limit: int = 20) -> str:
    request = RunReportRequest(
        property=_property(property_id),
        date_ranges=[DateRange(start_date=start_date, end_date=end_date)],
        dimensions=[Dimension(name="sessionSource"), Dimension(name="sessionMedium")],
        metrics=[
            Metric(name="sessions"),
            Metric(name="totalUsers"),
            Metric(name="bounceRate"),
            Metric(name="averageSessionDuration"),
        ],
        order_bys=[OrderBy(metric=OrderBy.MetricOrderBy(metric_name="sessions"), desc=True)],
        limit=limit,
    )

    table = ReportTable.from_response(client.run_report(request=request))
    if not table.rows:
        return f"No traffic source data found for {start_date} to {end_date}."

    rows = [
        [
            row.dimension(0, "(not set)"),
            row.dimension(1, "(not set)"),
            format_number(row.metric(0)),
            format_number(row.metric(1)),
            format_percent(row.metric(2)),
            format_duration(row.metric(3)),
        ]
        for row in table.rows
    ]
    headers = ["Source", "Medium", "Sessions", "Users", "Bounce Rate", "Avg Duration"]
    return f"**Traffic Sources** ({start_date} to {end_date})\n\n" + markdown_table(headers, rows)


def _user_metrics_row(client, property_id: str, start_date: str, end_date: str) -> Optional[ReportRow]:
    request = RunReportRequest(
        property=_property(property_id),
        date_ranges=[DateRange(start_date=start_date, end_date=end_date)],
        metrics=[Metric(name=name) for name, _ in USER_METRICS],
    )
    table = ReportTable.from_response(client.run_report(request=request))
    return table.rows[0] if table.rows else None


def user_metrics(
    client,
    property_id: str,
    start_date: str = "28daysAgo",
    end_date: str = "today",
    compare_previous_period: bool = False,
    today: Optional[date] = None,
) -> str:
    """
    Headline user metrics, optionally compared with the previous period.

    Args:
        client: BetaAnalyticsDataClient
        property_id: GA4 property ID (digits only)
        start_date: YYYY-MM-DD or relative date
        end_date: YYYY-MM-DD or relative date
        compare_previous_period: Also fetch the preceding period of equal length
        today: Reference date for relative dates (defaults to the current date)

    Returns:
        Markdown bullet summary
    """
    row = _user_metrics_row(client, property_id, start_date, end_date)
    if row is None:
        return f"No data found for {start_date} to {end_date}."

    values = [row.metric(i) for i in range(len(USER_METRICS))]
    total_users, new_users, sessions, page_views, bounce_rate, avg_duration, engagement_rate = values

    result = f"**User Metrics Summary** ({start_date} to {end_date})\n\n"
    result += bullet_list([
        ("Total Users", format_number(total_users)),
        ("New Users", format_number(new_users)),
        ("Sessions", format_number(sessions)),
        ("Page Views", format_number(page_views)),
        ("Bounce Rate", format_percent(bounce_rate)),
        ("Avg Session Duration", format_duration(avg_duration)),
        ("Engagement Rate", format_percent(engagement_rate)),
    ])

    if not compare_previous_period:
        return result

    prev_start, prev_end = previous_period(start_date, end_date, today)
    logger.debug("ga4_previous_period", start=prev_start, end=prev_end)
    prev_row = _user_metrics_row(client, property_id, prev_start, prev_end)
    if prev_row is None:
        return result

    result += f"\n**Comparison with Previous Period** ({prev_start} to {prev_end})\n\n"
    changes = []
    for i, (_, label) in enumerate(USER_METRICS):
        current = float(row.metric(i))
        previous = float(prev_row.metric(i))
        changes.append((label, format_change(current, previous)))
    result += bullet_list(changes)
    return result
