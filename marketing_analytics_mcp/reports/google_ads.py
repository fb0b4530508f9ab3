"""
Google Ads Reports
==================

GAQL-backed reports. Rows are read through GoogleAdsCustomer.search_as_dicts,
so field names match the GAQL paths (campaign.name, metrics.cost_micros)
and int64 values arrive as strings.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import structlog

from marketing_analytics_mcp.formatters import (
    bullet_list,
    format_currency,
    format_number,
    format_percent,
    markdown_table,
    round_half_up,
    truncate,
)
from marketing_analytics_mcp.security import (
    gaql_string_literal,
    parse_select_fields,
    validate_campaign_name,
)

logger = structlog.get_logger(__name__)

DATE_RANGES = [
    "TODAY",
    "YESTERDAY",
    "LAST_7_DAYS",
    "LAST_30_DAYS",
    "THIS_MONTH",
    "LAST_MONTH",
    "LAST_90_DAYS",
]

ORDER_BY_METRICS = {
    "cost": "metrics.cost_micros",
    "clicks": "metrics.clicks",
    "conversions": "metrics.conversions",
    "impressions": "metrics.impressions",
}

CAMPAIGN_STATUSES = ["all", "ENABLED", "PAUSED", "REMOVED"]
CAMPAIGN_TYPES = ["all", "SEARCH", "DISPLAY", "SHOPPING", "VIDEO", "PERFORMANCE_MAX"]


def get_path(row: Dict[str, Any], path: str) -> Any:
    """Look up a dotted GAQL field path in a row dict, None when absent"""
    current: Any = row
    for key in path.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def _label(value: Any) -> str:
    return str(value or "").replace("_", " ", 1)


def _whole(value: float) -> str:
    return format_number(int(round_half_up(value)))


@dataclass
class AdsMetrics:
    impressions: float = 0
    clicks: float = 0
    ctr: float = 0
    cost_micros: float = 0
    average_cpc: float = 0
    conversions: float = 0
    conversion_rate: float = 0
    cost_per_conversion: float = 0

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AdsMetrics":
        metrics = row.get("metrics") or {}
        return cls(
            impressions=_number(metrics.get("impressions")),
            clicks=_number(metrics.get("clicks")),
            ctr=_number(metrics.get("ctr")),
            cost_micros=_number(metrics.get("cost_micros")),
            average_cpc=_number(metrics.get("average_cpc")),
            conversions=_number(metrics.get("conversions")),
            conversion_rate=_number(metrics.get("conversions_from_interactions_rate")),
            cost_per_conversion=_number(metrics.get("cost_per_conversion")),
        )


def _campaign_filter(campaign_name: Optional[str]) -> str:
    if not campaign_name:
        return ""
    validate_campaign_name(campaign_name)
    return f" AND campaign.name = {gaql_string_literal(campaign_name)}"


def _order_clause(order_by: str, default: str, limit: int) -> str:
    metric = ORDER_BY_METRICS.get(order_by) or ORDER_BY_METRICS[default]
    return f" ORDER BY {metric} DESC LIMIT {int(limit)}"


def campaign_performance(
    customer,
    date_range: str = "LAST_30_DAYS",
    status: str = "all",
    campaign_type: str = "all",
    limit: int = 25,
    order_by: str = "cost",
) -> str:
    query = f"""
        SELECT
          campaign.name,
          campaign.status,
          campaign.advertising_channel_type,
          metrics.impressions,
          metrics.clicks,
          metrics.ctr,
          metrics.cost_micros,
          metrics.average_cpc,
          metrics.conversions,
          metrics.conversions_from_interactions_rate
        FROM campaign
        WHERE segments.date DURING {date_range}"""
    if status != "all":
        query += f" AND campaign.status = '{status}'"
    if campaign_type != "all":
        query += f" AND campaign.advertising_channel_type = '{campaign_type}'"
    query += _order_clause(order_by, "cost", limit)

    results = customer.search_as_dicts(query)
    if not results:
        return f"No campaign data found for {date_range}."

    rows = []
    for row in results:
        m = AdsMetrics.from_row(row)
        rows.append([
            truncate(get_path(row, "campaign.name"), 35),
            _label(get_path(row, "campaign.advertising_channel_type")),
            str(get_path(row, "campaign.status") or ""),
            format_number(m.impressions),
            format_number(m.clicks),
            format_percent(m.ctr),
            format_currency(m.cost_micros),
            format_currency(m.average_cpc),
            _whole(m.conversions),
            format_percent(m.conversion_rate),
        ])

    headers = ["Campaign", "Type", "Status", "Impressions", "Clicks", "CTR", "Cost", "CPC", "Conversions", "Conv Rate"]
    return f"**Google Ads Campaign Performance** ({date_range})\n\n" + markdown_table(headers, rows)


def keyword_performance(
    customer,
    date_range: str = "LAST_30_DAYS",
    campaign_name: Optional[str] = None,
    limit: int = 50,
    order_by: str = "clicks",
) -> str:
    query = f"""
        SELECT
          ad_group_criterion.keyword.text,
          ad_group_criterion.keyword.match_type,
          campaign.name,
          ad_group.name,
          metrics.impressions,
          metrics.clicks,
          metrics.ctr,
          metrics.cost_micros,
          metrics.average_cpc,
          metrics.conversions,
          ad_group_criterion.quality_info.quality_score
        FROM keyword_view
        WHERE segments.date DURING {date_range}"""
    query += _campaign_filter(campaign_name)
    query += _order_clause(order_by, "clicks", limit)

    results = customer.search_as_dicts(query)
    if not results:
        return f"No keyword data found for {date_range}."

    rows = []
    for row in results:
        m = AdsMetrics.from_row(row)
        quality_score = get_path(row, "ad_group_criterion.quality_info.quality_score")
        rows.append([
            truncate(get_path(row, "ad_group_criterion.keyword.text"), 30),
            _label(get_path(row, "ad_group_criterion.keyword.match_type")),
            truncate(get_path(row, "campaign.name"), 20),
            truncate(get_path(row, "ad_group.name"), 20),
            format_number(m.clicks),
            format_number(m.impressions),
            format_percent(m.ctr),
            format_currency(m.cost_micros),
            format_currency(m.average_cpc),
            _whole(m.conversions),
            str(quality_score) if quality_score is not None else "N/A",
        ])

    headers = ["Keyword", "Match", "Campaign", "Ad Group", "Clicks", "Impr", "CTR", "Cost", "CPC", "Conv", "QS"]
    return f"**Google Ads Keyword Performance** ({date_range})\n\n" + markdown_table(headers, rows)


def ad_group_performance(
    customer,
    date_range: str = "LAST_30_DAYS",
    campaign_name: Optional[str] = None,
    limit: int = 25,
    order_by: str = "cost",
) -> str:
    query = f"""
        SELECT
          ad_group.name,
          ad_group.status,
          campaign.name,
          metrics.impressions,
          metrics.clicks,
          metrics.ctr,
          metrics.cost_micros,
          metrics.average_cpc,
          metrics.conversions,
          metrics.conversions_from_interactions_rate
        FROM ad_group
        WHERE segments.date DURING {date_range}"""
    query += _campaign_filter(campaign_name)
    query += _order_clause(order_by, "cost", limit)

    results = customer.search_as_dicts(query)
    if not results:
        return f"No ad group data found for {date_range}."

    rows = []
    for row in results:
        m = AdsMetrics.from_row(row)
        rows.append([
            truncate(get_path(row, "ad_group.name"), 30),
            truncate(get_path(row, "campaign.name"), 25),
            str(get_path(row, "ad_group.status") or ""),
            format_number(m.impressions),
            format_number(m.clicks),
            format_percent(m.ctr),
            format_currency(m.cost_micros),
            format_currency(m.average_cpc),
            _whole(m.conversions),
            format_percent(m.conversion_rate),
        ])

    headers = ["Ad Group", "Campaign", "Status", "Impressions", "Clicks", "CTR", "Cost", "CPC", "Conversions", "Conv Rate"]
    return f"**Google Ads Ad Group Performance** ({date_range})\n\n" + markdown_table(headers, rows)


def account_summary(customer, date_range: str = "LAST_30_DAYS") -> str:
    """Account totals plus the five campaigns with the highest spend"""
    account_query = f"""
        SELECT
          metrics.impressions,
          metrics.clicks,
          metrics.ctr,
          metrics.cost_micros,
          metrics.average_cpc,
          metrics.conversions,
          metrics.cost_per_conversion
        FROM customer
        WHERE segments.date DURING {date_range}"""

    account_rows = customer.search_as_dicts(account_query)
    if not account_rows:
        return f"No data found for {date_range}."

    m = AdsMetrics.from_row(account_rows[0])
    result = f"**Google Ads Account Summary** ({date_range})\n\n"
    result += bullet_list([
        ("Total Spend", format_currency(m.cost_micros)),
        ("Total Impressions", format_number(m.impressions)),
        ("Total Clicks", format_number(m.clicks)),
        ("Avg CTR", format_percent(m.ctr)),
        ("Avg CPC", format_currency(m.average_cpc)),
        ("Total Conversions", _whole(m.conversions)),
        ("Cost per Conversion", format_currency(m.cost_per_conversion)),
    ])

    campaigns_query = f"""
        SELECT
          campaign.name,
          metrics.cost_micros,
          metrics.clicks,
          metrics.conversions
        FROM campaign
        WHERE segments.date DURING {date_range}
        ORDER BY metrics.cost_micros DESC
        LIMIT 5"""

    campaign_rows = customer.search_as_dicts(campaigns_query)
    if campaign_rows:
        rows = []
        for row in campaign_rows:
            cm = AdsMetrics.from_row(row)
            rows.append([
                truncate(get_path(row, "campaign.name"), 40),
                format_currency(cm.cost_micros),
                format_number(cm.clicks),
                _whole(cm.conversions),
            ])
        result += "\n**Top 5 Campaigns by Spend:**\n\n"
        result += markdown_table(["Campaign", "Spend", "Clicks", "Conversions"], rows)

    return result


def _format_cell(field: str, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return str(value)

    numeric = not isinstance(value, bool) and isinstance(value, (int, float))
    if not numeric and field.startswith("metrics.") and isinstance(value, str):
        # int64 metrics are serialised as strings
        try:
            value = float(value)
            numeric = True
        except ValueError:
            pass

    if not numeric:
        return str(value)
    if "cost_micros" in field or field.endswith("_micros"):
        return format_currency(value)
    if "rate" in field or "ctr" in field:
        return format_percent(value)
    return format_number(value)


def execute_query(customer, query: str) -> str:
    """
    Run a raw GAQL SELECT and render every selected field as a column.

    Raises:
        ValidationError: If the query is not a SELECT statement
    """
    fields = parse_select_fields(query)
    results = customer.search_as_dicts(query)
    if not results:
        return "No results returned for the query."

    logger.info("gaql_query_rendered", columns=len(fields), rows=len(results))
    headers = [field.split(".")[-1] for field in fields]
    rows = [[_format_cell(field, get_path(row, field)) for field in fields] for row in results]
    return f"**GAQL Query Results** ({len(results)} rows)\n\n" + markdown_table(headers, rows)
