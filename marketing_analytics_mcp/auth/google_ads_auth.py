"""Google Ads client construction and GAQL execution."""
from typing import Any, Dict, List, Optional

import structlog
from google.ads.googleads.client import GoogleAdsClient
from google.ads.googleads.errors import GoogleAdsException
from google.protobuf import json_format

from marketing_analytics_mcp.config import GoogleAdsConfig, GoogleAuthConfig

logger = structlog.get_logger(__name__)


class GoogleAdsQueryError(Exception):
    """A GAQL request was rejected by the Google Ads API."""
    pass


class GoogleAdsCustomer:
    """
    A Google Ads client bound to one customer account.

    Built fresh for every tool call; nothing is cached between calls.
    """

    def __init__(self, client: GoogleAdsClient, customer_id: str):
        self.client = client
        self.customer_id = customer_id

    @classmethod
    def from_config(
        cls, google: GoogleAuthConfig, google_ads: GoogleAdsConfig
    ) -> "GoogleAdsCustomer":
        settings: Dict[str, Any] = {
            "developer_token": google_ads.developer_token,
            "client_id": google.client_id,
            "client_secret": google.client_secret,
            "refresh_token": google.refresh_token,
            "use_proto_plus": True,
        }
        if google_ads.login_customer_id:
            settings["login_customer_id"] = google_ads.login_customer_id
        client = GoogleAdsClient.load_from_dict(settings)
        return cls(client, google_ads.customer_account_id)

    def search(self, query: str) -> List[Any]:
        """
        Run a GAQL query and return every row.

        Raises:
            GoogleAdsQueryError: With the first error message from the API
        """
        service = self.client.get_service("GoogleAdsService")
        try:
            response = service.search(customer_id=self.customer_id, query=query)
            rows = list(response)
        except GoogleAdsException as ex:
            errors = ex.failure.errors if ex.failure is not None else []
            message = errors[0].message if errors else str(ex)
            logger.error(
                "gaql_query_failed",
                customer_id=self.customer_id,
                request_id=getattr(ex, "request_id", None),
                error=message,
            )
            raise GoogleAdsQueryError(f"Google Ads API Error: {message}") from ex

        logger.debug("gaql_query_ok", customer_id=self.customer_id, rows=len(rows))
        return rows

    def search_as_dicts(self, query: str) -> List[Dict[str, Any]]:
        """Rows as nested dicts keyed by snake_case field names"""
        return [
            json_format.MessageToDict(row._pb, preserving_proto_field_name=True)
            for row in self.search(query)
        ]


def customer_for(
    google: Optional[GoogleAuthConfig], google_ads: Optional[GoogleAdsConfig]
) -> GoogleAdsCustomer:
    if google is None or google_ads is None:
        raise GoogleAdsQueryError("Google Ads is not configured")
    return GoogleAdsCustomer.from_config(google, google_ads)
