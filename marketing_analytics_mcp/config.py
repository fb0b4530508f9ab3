"""Configuration module: resolves provider credentials from the environment."""
import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

import structlog

logger = structlog.get_logger(__name__)


class ProviderFamily(str, Enum):
    """Credential groups that gate the tools."""
    GOOGLE = "google"          # GA4 + Search Console (shared OAuth2)
    META = "meta"
    GOOGLE_ADS = "google_ads"  # also needs GOOGLE


@dataclass(frozen=True)
class GoogleAuthConfig:
    client_id: str
    client_secret: str
    refresh_token: str


@dataclass(frozen=True)
class GA4Config:
    property_id: str


@dataclass(frozen=True)
class GSCConfig:
    site_url: str


@dataclass(frozen=True)
class MetaConfig:
    access_token: str
    app_id: Optional[str] = None
    app_secret: Optional[str] = None


@dataclass(frozen=True)
class GoogleAdsConfig:
    developer_token: str
    customer_account_id: str
    login_customer_id: Optional[str] = None


@dataclass(frozen=True)
class AppConfig:
    """
    Immutable snapshot of everything the tools need.

    A sub-config is None when its required settings are missing.
    google_ads is only ever set together with google.
    """
    google: Optional[GoogleAuthConfig] = None
    ga4: Optional[GA4Config] = None
    gsc: Optional[GSCConfig] = None
    meta: Optional[MetaConfig] = None
    google_ads: Optional[GoogleAdsConfig] = None

    def is_configured(self, family: ProviderFamily) -> bool:
        if family == ProviderFamily.GOOGLE:
            return self.google is not None
        if family == ProviderFamily.META:
            return self.meta is not None
        if family == ProviderFamily.GOOGLE_ADS:
            return self.google is not None and self.google_ads is not None
        raise ValueError(f"Unknown provider family: {family}")


def format_customer_id(customer_id: str) -> str:
    """Strip dashes and anything else that is not a digit from a Google Ads customer ID."""
    return "".join(char for char in str(customer_id) if char.isdigit())


def _get(environ: Mapping[str, str], key: str) -> Optional[str]:
    value = environ.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Build an AppConfig from environment settings.

    Args:
        environ: Key-value settings. Defaults to os.environ.

    Returns:
        AppConfig with one sub-config per fully specified provider group.
    """
    if environ is None:
        environ = os.environ

    # Google OAuth2 (shared by GA4, GSC and Google Ads)
    google = None
    client_id = _get(environ, "GOOGLE_CLIENT_ID")
    client_secret = _get(environ, "GOOGLE_CLIENT_SECRET")
    refresh_token = _get(environ, "GOOGLE_REFRESH_TOKEN")
    if client_id and client_secret and refresh_token:
        google = GoogleAuthConfig(client_id, client_secret, refresh_token)
        logger.info("google_oauth_configured")
    else:
        logger.info(
            "google_oauth_not_configured",
            missing="GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET or GOOGLE_REFRESH_TOKEN",
        )

    # GA4 / GSC defaults are optional, the list tools can pick one at runtime
    ga4 = None
    property_id = _get(environ, "GA4_PROPERTY_ID")
    if property_id:
        ga4 = GA4Config(property_id)
        logger.info("ga4_default_property", property_id=property_id)
    else:
        logger.info("ga4_default_property_not_set", hint="use ga4_list_accounts")

    gsc = None
    site_url = _get(environ, "GSC_SITE_URL")
    if site_url:
        gsc = GSCConfig(site_url)
        logger.info("gsc_default_site", site_url=site_url)
    else:
        logger.info("gsc_default_site_not_set", hint="use gsc_list_sites")

    meta = None
    access_token = _get(environ, "META_ACCESS_TOKEN")
    if access_token:
        meta = MetaConfig(
            access_token=access_token,
            app_id=_get(environ, "META_APP_ID"),
            app_secret=_get(environ, "META_APP_SECRET"),
        )
        logger.info("meta_ads_configured", app_secret_proof=bool(meta.app_secret))
    else:
        logger.info("meta_ads_not_configured", missing="META_ACCESS_TOKEN")

    google_ads = None
    developer_token = _get(environ, "GOOGLE_ADS_DEVELOPER_TOKEN")
    # Customer IDs count only once reduced to digits ("n/a" is not an ID)
    customer_id = format_customer_id(_get(environ, "GOOGLE_ADS_CUSTOMER_ID") or "") or None
    login_customer_id = format_customer_id(_get(environ, "GOOGLE_ADS_LOGIN_CUSTOMER_ID") or "") or None
    if developer_token and customer_id and google:
        google_ads = GoogleAdsConfig(
            developer_token=developer_token,
            customer_account_id=customer_id,
            login_customer_id=login_customer_id,
        )
        logger.info("google_ads_configured", customer_id=google_ads.customer_account_id)
    elif (developer_token or customer_id) and not google:
        logger.warning("google_ads_disabled", reason="Google OAuth2 credentials missing")
    else:
        logger.info(
            "google_ads_not_configured",
            missing="GOOGLE_ADS_DEVELOPER_TOKEN or GOOGLE_ADS_CUSTOMER_ID",
        )

    return AppConfig(google=google, ga4=ga4, gsc=gsc, meta=meta, google_ads=google_ads)
