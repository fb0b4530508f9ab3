"""
Meta Ads Reports
================

Insights reports built on the facebook-business SDK. The SDK returns
auto-paginating cursors; only the requested number of rows is read.
"""

from dataclasses import dataclass, field
from itertools import islice
from typing import Any, Dict, List, Optional

import structlog

from marketing_analytics_mcp.formatters import (
    bullet_list,
    format_dollars,
    format_number,
    format_percent,
    markdown_table,
    truncate,
)

logger = structlog.get_logger(__name__)

ACCOUNT_STATUS = {
    1: "ACTIVE",
    2: "DISABLED",
    3: "UNSETTLED",
    7: "PENDING_RISK_REVIEW",
    8: "PENDING_SETTLEMENT",
    9: "IN_GRACE_PERIOD",
    100: "PENDING_CLOSURE",
    101: "CLOSED",
    201: "ANY_ACTIVE",
    202: "ANY_CLOSED",
}

CONVERSION_ACTIONS = ("purchase", "lead", "offsite_conversion.fb_pixel_purchase")

# Tool breakdown name -> Insights API breakdown
BREAKDOWNS = {
    "age": "age",
    "gender": "gender",
    "country": "country",
    "placement": "publisher_platform",
    "device_platform": "device_platform",
}

OVERVIEW_FIELDS = ["spend", "impressions", "clicks", "ctr", "cpc", "cpm", "actions", "cost_per_action_type"]

# Upper bound on breakdown rows read for the account overview
OVERVIEW_ROW_LIMIT = 100


def normalize_account_id(account_id: str) -> str:
    """Ad account IDs are addressed as act_<id>"""
    account_id = account_id.strip()
    return account_id if account_id.startswith("act_") else f"act_{account_id}"


def _to_float(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


@dataclass
class InsightsRow:
    """One row of an Insights response"""
    spend: float = 0
    impressions: float = 0
    clicks: float = 0
    ctr: float = 0
    cpc: float = 0
    cpm: float = 0
    campaign_name: str = ""
    adset_name: str = ""
    ad_name: str = ""
    actions: Dict[str, float] = field(default_factory=dict)
    breakdown_value: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any], breakdown: Optional[str] = None) -> "InsightsRow":
        actions: Dict[str, float] = {}
        for action in data.get("actions") or []:
            action_type = action.get("action_type")
            if action_type:
                actions[action_type] = actions.get(action_type, 0) + _to_float(action.get("value"))
        return cls(
            spend=_to_float(data.get("spend")),
            impressions=_to_float(data.get("impressions")),
            clicks=_to_float(data.get("clicks")),
            ctr=_to_float(data.get("ctr")),
            cpc=_to_float(data.get("cpc")),
            cpm=_to_float(data.get("cpm")),
            campaign_name=data.get("campaign_name") or "",
            adset_name=data.get("adset_name") or "",
            ad_name=data.get("ad_name") or "",
            actions=actions,
            breakdown_value=str(data.get(breakdown) or "") if breakdown else "",
        )

    @property
    def conversions(self) -> float:
        return sum(self.actions.get(action_type, 0) for action_type in CONVERSION_ACTIONS)


def _export(obj) -> Dict[str, Any]:
    if hasattr(obj, "export_all_data"):
        return obj.export_all_data()
    return dict(obj)


def _insights(account, fields: List[str], params: Dict[str, Any], limit: int, breakdown: Optional[str] = None) -> List[InsightsRow]:
    cursor = account.get_insights(fields=fields, params=params)
    rows = [InsightsRow.from_api(_export(item), breakdown) for item in islice(cursor, limit)]
    logger.debug("meta_insights_fetched", level=params.get("level", "account"), rows=len(rows))
    return rows


def _time_range(start_date: str, end_date: str) -> Dict[str, str]:
    return {"since": start_date, "until": end_date}


def list_ad_accounts(session, limit: int = 25) -> str:
    """Ad accounts reachable with the session's access token"""
    fields = ["account_id", "name", "account_status", "currency", "timezone_name"]
    cursor = session.me().get_ad_accounts(fields=fields, params={"limit": limit})
    accounts = [_export(account) for account in islice(cursor, limit)]
    if not accounts:
        return "No ad accounts found for the current user."

    rows = []
    for account in accounts:
        status = account.get("account_status")
        try:
            status_name = ACCOUNT_STATUS.get(int(status), str(status))
        except (TypeError, ValueError):
            status_name = str(status or "")
        rows.append([
            f"act_{account.get('account_id', '')}",
            account.get("name") or "",
            status_name,
            account.get("currency") or "",
            account.get("timezone_name") or "",
        ])

    headers = ["Account ID", "Name", "Status", "Currency", "Timezone"]
    return "**Meta Ad Accounts**\n\n" + markdown_table(headers, rows)


def account_overview(session, account_id: str, start_date: str, end_date: str, breakdown: str = "none") -> str:
    """
    Account level totals for a date range.

    Args:
        session: MetaSession
        account_id: act_<id>
        start_date: YYYY-MM-DD
        end_date: YYYY-MM-DD
        breakdown: none, age, gender, country, placement or device_platform

    Returns:
        Bullet summary with conversions, or a table with one row per
        breakdown value
    """
    account = session.ad_account(account_id)
    params: Dict[str, Any] = {"time_range": _time_range(start_date, end_date)}

    api_breakdown = BREAKDOWNS.get(breakdown) if breakdown != "none" else None
    if api_breakdown:
        params["breakdowns"] = [api_breakdown]

    limit = OVERVIEW_ROW_LIMIT if api_breakdown else 1
    rows = _insights(account, OVERVIEW_FIELDS, params, limit, api_breakdown)
    if not rows:
        return f"No data found for {account_id} from {start_date} to {end_date}."

    if api_breakdown:
        table = [
            [
                row.breakdown_value,
                format_dollars(row.spend),
                format_number(row.impressions),
                format_number(row.clicks),
                format_percent(row.ctr, already_percent=True),
                format_dollars(row.cpc),
                format_dollars(row.cpm),
            ]
            for row in rows
        ]
        headers = [breakdown, "Spend", "Impressions", "Clicks", "CTR", "CPC", "CPM"]
        header = f"**Account Overview: {account_id}** ({start_date} to {end_date}, by {breakdown})\n\n"
        return header + markdown_table(headers, table)

    row = rows[0]
    result = f"**Account Overview: {account_id}** ({start_date} to {end_date})\n\n"
    result += bullet_list([
        ("Spend", format_dollars(row.spend)),
        ("Impressions", format_number(row.impressions)),
        ("Clicks", format_number(row.clicks)),
        ("CTR", format_percent(row.ctr, already_percent=True)),
        ("CPC", format_dollars(row.cpc)),
        ("CPM", format_dollars(row.cpm)),
    ])

    conversions = [(action_type, value) for action_type, value in row.actions.items() if value > 0]
    if conversions:
        result += "\n**Conversions:**\n"
        for action_type, value in conversions:
            result += f"- {action_type}: {format_number(value)}\n"

    return result


def campaign_insights(session, account_id: str, start_date: str, end_date: str, status: str = "all", limit: int = 25) -> str:
    params: Dict[str, Any] = {
        "time_range": _time_range(start_date, end_date),
        "level": "campaign",
        "limit": limit,
    }
    if status != "all":
        params["filtering"] = [{"field": "campaign.effective_status", "operator": "IN", "value": [status]}]

    fields = ["campaign_name", "campaign_id", "spend", "impressions", "clicks", "ctr", "cpc", "actions", "objective"]
    rows = _insights(session.ad_account(account_id), fields, params, limit)
    if not rows:
        return f"No campaign data found for {account_id} from {start_date} to {end_date}."

    table = [
        [
            truncate(row.campaign_name, 40),
            format_dollars(row.spend),
            format_number(row.impressions),
            format_number(row.clicks),
            format_percent(row.ctr, already_percent=True),
            format_dollars(row.cpc),
            format_number(row.conversions),
        ]
        for row in rows
    ]
    headers = ["Campaign", "Spend", "Impressions", "Clicks", "CTR", "CPC", "Conversions"]
    return f"**Campaign Insights: {account_id}** ({start_date} to {end_date})\n\n" + markdown_table(headers, table)


def adset_insights(
    session,
    account_id: str,
    start_date: str,
    end_date: str,
    campaign_id: Optional[str] = None,
    limit: int = 25,
) -> str:
    params: Dict[str, Any] = {
        "time_range": _time_range(start_date, end_date),
        "level": "adset",
        "limit": limit,
    }
    if campaign_id:
        params["filtering"] = [{"field": "campaign.id", "operator": "EQUAL", "value": campaign_id}]

    fields = ["adset_name", "adset_id", "campaign_name", "spend", "impressions", "clicks", "ctr", "cpc", "actions"]
    rows = _insights(session.ad_account(account_id), fields, params, limit)
    if not rows:
        return f"No ad set data found for {account_id} from {start_date} to {end_date}."

    table = [
        [
            truncate(row.adset_name, 35),
            truncate(row.campaign_name, 25),
            format_dollars(row.spend),
            format_number(row.impressions),
            format_number(row.clicks),
            format_percent(row.ctr, already_percent=True),
            format_dollars(row.cpc),
            format_number(row.conversions),
        ]
        for row in rows
    ]
    headers = ["Ad Set", "Campaign", "Spend", "Impressions", "Clicks", "CTR", "CPC", "Conversions"]
    return f"**Ad Set Insights: {account_id}** ({start_date} to {end_date})\n\n" + markdown_table(headers, table)


def ad_insights(
    session,
    account_id: str,
    start_date: str,
    end_date: str,
    campaign_id: Optional[str] = None,
    adset_id: Optional[str] = None,
    limit: int = 25,
) -> str:
    params: Dict[str, Any] = {
        "time_range": _time_range(start_date, end_date),
        "level": "ad",
        "limit": limit,
    }
    filters = []
    if campaign_id:
        filters.append({"field": "campaign.id", "operator": "EQUAL", "value": campaign_id})
    if adset_id:
        filters.append({"field": "adset.id", "operator": "EQUAL", "value": adset_id})
    if filters:
        params["filtering"] = filters

    fields = ["ad_name", "ad_id", "adset_name", "campaign_name", "spend", "impressions", "clicks", "ctr", "actions"]
    rows = _insights(session.ad_account(account_id), fields, params, limit)
    if not rows:
        return f"No ad data found for {account_id} from {start_date} to {end_date}."

    table = [
        [
            truncate(row.ad_name, 30),
            truncate(row.adset_name, 25),
            truncate(row.campaign_name, 20),
            format_dollars(row.spend),
            format_number(row.impressions),
            format_number(row.clicks),
            format_percent(row.ctr, already_percent=True),
            format_number(row.conversions),
        ]
        for row in rows
    ]
    headers = ["Ad", "Ad Set", "Campaign", "Spend", "Impressions", "Clicks", "CTR", "Conversions"]
    return f"**Ad Insights: {account_id}** ({start_date} to {end_date})\n\n" + markdown_table(headers, table)
