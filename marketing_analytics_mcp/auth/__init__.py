"""Provider auth adapters."""
from dataclasses import dataclass
from typing import Optional

from marketing_analytics_mcp.config import AppConfig

from .google_ads_auth import GoogleAdsCustomer, GoogleAdsQueryError, customer_for
from .google_auth import GoogleClients
from .meta_auth import MetaSession


@dataclass
class ProviderClients:
    """Vendor clients for the configured providers, created once at startup."""
    config: AppConfig
    google: Optional[GoogleClients] = None
    meta: Optional[MetaSession] = None

    @classmethod
    def from_config(cls, config: AppConfig) -> "ProviderClients":
        return cls(
            config=config,
            google=GoogleClients(config.google) if config.google else None,
            meta=MetaSession(config.meta) if config.meta else None,
        )

    def google_ads_customer(self) -> GoogleAdsCustomer:
        """A fresh Google Ads client for the configured customer account"""
        return customer_for(self.config.google, self.config.google_ads)


__all__ = [
    "GoogleAdsCustomer",
    "GoogleAdsQueryError",
    "GoogleClients",
    "MetaSession",
    "ProviderClients",
]
