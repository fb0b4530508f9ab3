"""Meta Marketing API session."""
import threading

import structlog
from facebook_business.adobjects.adaccount import AdAccount
from facebook_business.adobjects.user import User
from facebook_business.api import FacebookAdsApi

from marketing_analytics_mcp.config import MetaConfig

logger = structlog.get_logger(__name__)


class MetaSession:
    """Owns one initialised FacebookAdsApi and hands out objects bound to it"""

    def __init__(self, config: MetaConfig):
        self.config = config
        self._lock = threading.Lock()
        self._api = None

    @property
    def api(self) -> FacebookAdsApi:
        with self._lock:
            if self._api is None:
                # app_secret turns on appsecret_proof for every request
                self._api = FacebookAdsApi.init(
                    app_id=self.config.app_id,
                    app_secret=self.config.app_secret,
                    access_token=self.config.access_token,
                    crash_log=False,
                )
                logger.info("meta_api_initialized", app_secret_proof=bool(self.config.app_secret))
            return self._api

    def ad_account(self, account_id: str) -> AdAccount:
        return AdAccount(account_id, api=self.api)

    def me(self) -> User:
        return User(fbid="me", api=self.api)
