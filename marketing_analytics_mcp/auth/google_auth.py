"""Google OAuth2 credentials and the GA4 / Search Console clients built on them."""
import threading
from typing import Optional

import structlog
from google.analytics.admin_v1beta import AnalyticsAdminServiceClient
from google.analytics.data_v1beta import BetaAnalyticsDataClient
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from marketing_analytics_mcp.config import GoogleAuthConfig

logger = structlog.get_logger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"

GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/analytics.readonly",
    "https://www.googleapis.com/auth/webmasters.readonly",
    "https://www.googleapis.com/auth/adwords",
]


class GoogleClients:
    """
    Lazily built Google API clients sharing one set of OAuth2 credentials.

    The refresh token is exchanged for an access token by google-auth on
    the first request. Each client is created once per instance; creation
    is guarded by a lock because report functions run in worker threads.
    """

    def __init__(self, config: GoogleAuthConfig):
        self.config = config
        self._lock = threading.Lock()
        self._credentials: Optional[Credentials] = None
        self._analytics_data = None
        self._analytics_admin = None
        self._search_console = None
        self._webmasters = None

    @property
    def credentials(self) -> Credentials:
        with self._lock:
            if self._credentials is None:
                self._credentials = Credentials(
                    token=None,
                    refresh_token=self.config.refresh_token,
                    client_id=self.config.client_id,
                    client_secret=self.config.client_secret,
                    token_uri=TOKEN_URI,
                    scopes=GOOGLE_SCOPES,
                )
                logger.info("google_credentials_created")
            return self._credentials

    @property
    def analytics_data(self) -> BetaAnalyticsDataClient:
        """GA4 Data API client (reports, realtime)"""
        credentials = self.credentials
        with self._lock:
            if self._analytics_data is None:
                self._analytics_data = BetaAnalyticsDataClient(credentials=credentials)
            return self._analytics_data

    @property
    def analytics_admin(self) -> AnalyticsAdminServiceClient:
        """GA4 Admin API client (account summaries)"""
        credentials = self.credentials
        with self._lock:
            if self._analytics_admin is None:
                self._analytics_admin = AnalyticsAdminServiceClient(credentials=credentials)
            return self._analytics_admin

    @property
    def search_console(self):
        """Search Console v1 service (URL inspection)"""
        credentials = self.credentials
        with self._lock:
            if self._search_console is None:
                self._search_console = build(
                    "searchconsole", "v1", credentials=credentials, cache_discovery=False
                )
            return self._search_console

    @property
    def webmasters(self):
        """Webmasters v3 service (sites, sitemaps, search analytics)"""
        credentials = self.credentials
        with self._lock:
            if self._webmasters is None:
                self._webmasters = build(
                    "webmasters", "v3", credentials=credentials, cache_discovery=False
                )
            return self._webmasters
