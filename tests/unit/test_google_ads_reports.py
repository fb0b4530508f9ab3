"""
Tests for the Google Ads report functions.

Rows are given in the shape GoogleAdsCustomer.search_as_dicts returns:
nested dicts with snake_case keys and int64 values as strings.
"""
from unittest.mock import MagicMock

import pytest

from marketing_analytics_mcp.reports import google_ads
from marketing_analytics_mcp.security import ValidationError

CAMPAIGN_ROW = {
    "campaign": {"name": "Brand", "status": "ENABLED", "advertising_channel_type": "PERFORMANCE_MAX"},
    "metrics": {
        "impressions": "1000",
        "clicks": "50",
        "ctr": 0.05,
        "cost_micros": "25000000",
        "average_cpc": 500000.0,
        "conversions": 2.5,
        "conversions_from_interactions_rate": 0.05,
    },
}


def _customer(*results):
    customer = MagicMock()
    customer.search_as_dicts.side_effect = list(results)
    return customer


def _query(customer, call=0):
    return customer.search_as_dicts.call_args_list[call].args[0]


def _cells(text, row=0):
    """Stripped cells of the given data row of the first table in text"""
    lines = [line for line in text.splitlines() if line.startswith("|")]
    return [cell.strip() for cell in lines[2 + row].strip("|").split("|")]


class TestGetPath:
    def test_nested(self):
        assert google_ads.get_path(CAMPAIGN_ROW, "campaign.name") == "Brand"

    def test_missing(self):
        assert google_ads.get_path(CAMPAIGN_ROW, "ad_group.name") is None
        assert google_ads.get_path(CAMPAIGN_ROW, "campaign.name.first") is None


class TestCampaignPerformance:
    def test_row_formatting(self):
        customer = _customer([CAMPAIGN_ROW])

        text = google_ads.campaign_performance(customer)

        assert text.startswith("**Google Ads Campaign Performance** (LAST_30_DAYS)\n\n")
        assert _cells(text) == [
            "Brand", "PERFORMANCE MAX", "ENABLED", "1,000", "50", "5.00%", "$25.00", "$0.50", "3", "5.00%",
        ]

    def test_query_filters_and_order(self):
        customer = _customer([])

        text = google_ads.campaign_performance(
            customer, "LAST_7_DAYS", status="PAUSED", campaign_type="SEARCH", limit=10, order_by="clicks"
        )

        assert text == "No campaign data found for LAST_7_DAYS."
        query = _query(customer)
        assert "WHERE segments.date DURING LAST_7_DAYS" in query
        assert "AND campaign.status = 'PAUSED'" in query
        assert "AND campaign.advertising_channel_type = 'SEARCH'" in query
        assert query.endswith(" ORDER BY metrics.clicks DESC LIMIT 10")

    def test_all_means_no_filter(self):
        customer = _customer([])
        google_ads.campaign_performance(customer)
        query = _query(customer)
        assert "campaign.status =" not in query
        assert query.endswith(" ORDER BY metrics.cost_micros DESC LIMIT 25")

    def test_missing_metrics(self):
        customer = _customer([{"campaign": {"name": "New"}}])
        cells = _cells(google_ads.campaign_performance(customer))
        assert cells[3:] == ["0", "0", "0.00%", "$0.00", "$0.00", "0", "0.00%"]


class TestKeywordPerformance:
    def test_quality_score(self):
        customer = _customer([
            {
                "ad_group_criterion": {
                    "keyword": {"text": "running shoes", "match_type": "EXACT"},
                    "quality_info": {"quality_score": 7},
                },
                "campaign": {"name": "Brand"},
                "ad_group": {"name": "Shoes"},
                "metrics": {"clicks": "10"},
            },
            {
                "ad_group_criterion": {"keyword": {"text": "trainers", "match_type": "BROAD"}},
                "metrics": {"clicks": "5"},
            },
        ])

        text = google_ads.keyword_performance(customer)

        assert _cells(text, 0)[0] == "running shoes"
        assert _cells(text, 0)[-1] == "7"
        assert _cells(text, 1)[-1] == "N/A"
        assert _query(customer).endswith(" ORDER BY metrics.clicks DESC LIMIT 50")

    def test_campaign_name_is_escaped(self):
        customer = _customer([])

        text = google_ads.keyword_performance(customer, campaign_name="Bob's Shop")

        assert text == "No keyword data found for LAST_30_DAYS."
        assert "AND campaign.name = 'Bob\\'s Shop'" in _query(customer)

    def test_quote_cannot_close_the_literal(self):
        customer = _customer([])

        google_ads.keyword_performance(customer, campaign_name="x' OR campaign.id > 0")

        assert "AND campaign.name = 'x\\' OR campaign.id > 0' ORDER BY" in _query(customer)

    def test_symbols_in_campaign_name(self):
        customer = _customer([])

        google_ads.ad_group_performance(customer, campaign_name="Sale $50 off")

        assert "AND campaign.name = 'Sale $50 off'" in _query(customer)

    def test_invalid_campaign_name(self):
        customer = _customer([])
        with pytest.raises(ValidationError):
            google_ads.keyword_performance(customer, campaign_name="x\nOR campaign.id > 0")
        customer.search_as_dicts.assert_not_called()


class TestAdGroupPerformance:
    def test_rows(self):
        customer = _customer([{
            "ad_group": {"name": "Shoes", "status": "ENABLED"},
            "campaign": {"name": "Brand"},
            "metrics": {"impressions": "200", "cost_micros": "1234567"},
        }])

        text = google_ads.ad_group_performance(customer, "LAST_MONTH", campaign_name="Brand")

        assert text.startswith("**Google Ads Ad Group Performance** (LAST_MONTH)")
        cells = _cells(text)
        assert cells[:4] == ["Shoes", "Brand", "ENABLED", "200"]
        assert cells[6] == "$1.23"
        assert "AND campaign.name = 'Brand'" in _query(customer)

    def test_empty(self):
        assert google_ads.ad_group_performance(_customer([])) == "No ad group data found for LAST_30_DAYS."


class TestAccountSummary:
    ACCOUNT_ROW = {
        "metrics": {
            "impressions": "50000",
            "clicks": "1500",
            "ctr": 0.03,
            "cost_micros": "750000000",
            "average_cpc": 500000.0,
            "conversions": 42.0,
            "cost_per_conversion": 17857142.86,
        }
    }

    def test_totals_and_top_campaigns(self):
        customer = _customer([self.ACCOUNT_ROW], [CAMPAIGN_ROW])

        text = google_ads.account_summary(customer, "LAST_7_DAYS")

        assert text.startswith("**Google Ads Account Summary** (LAST_7_DAYS)\n\n")
        assert "- **Total Spend:** $750.00\n" in text
        assert "- **Total Clicks:** 1,500\n" in text
        assert "- **Avg CTR:** 3.00%\n" in text
        assert "- **Total Conversions:** 42\n" in text
        assert "- **Cost per Conversion:** $17.86\n" in text
        assert "\n**Top 5 Campaigns by Spend:**\n\n" in text
        assert _cells(text) == ["Brand", "$25.00", "50", "3"]
        assert _query(customer, 1).rstrip().endswith("LIMIT 5")

    def test_without_top_campaigns(self):
        customer = _customer([self.ACCOUNT_ROW], [])
        text = google_ads.account_summary(customer)
        assert "Top 5" not in text
        assert customer.search_as_dicts.call_count == 2

    def test_empty(self):
        customer = _customer([])
        assert google_ads.account_summary(customer) == "No data found for LAST_30_DAYS."
        assert customer.search_as_dicts.call_count == 1


class TestExecuteQuery:
    QUERY = "SELECT campaign.name, metrics.clicks, metrics.cost_micros, metrics.ctr FROM campaign"

    def test_columns_follow_select(self):
        customer = _customer([
            {"campaign": {"name": "A"}, "metrics": {"clicks": "12", "cost_micros": "1500000", "ctr": 0.1}},
            {"campaign": {"name": "B"}},
        ])

        text = google_ads.execute_query(customer, self.QUERY)

        assert text.startswith("**GAQL Query Results** (2 rows)\n\n")
        header = [cell.strip() for cell in text.splitlines()[2].strip("|").split("|")]
        assert header == ["name", "clicks", "cost_micros", "ctr"]
        assert _cells(text, 0) == ["A", "12", "$1.50", "10.00%"]
        assert _cells(text, 1) == ["B", "", "", ""]
        assert _query(customer) == self.QUERY

    def test_non_metric_strings_kept(self):
        customer = _customer([{"campaign": {"id": "123", "status": "ENABLED"}}])
        text = google_ads.execute_query(customer, "SELECT campaign.id, campaign.status FROM campaign")
        assert _cells(text) == ["123", "ENABLED"]

    def test_empty(self):
        assert google_ads.execute_query(_customer([]), self.QUERY) == "No results returned for the query."

    def test_rejects_non_select(self):
        customer = _customer([])
        with pytest.raises(ValidationError):
            google_ads.execute_query(customer, "DELETE FROM campaign")
        customer.search_as_dicts.assert_not_called()
