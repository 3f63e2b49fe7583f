# =============================================================================
# core/config.py  -  API configuration
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Holds the settings shared by the tourism, photo-award and weather
#   clients: the data.go.kr service key, base URLs, timeout, and the
#   live/mock toggle.
#
# EXPLICIT, NOT GLOBAL:
#   An ApiConfig is built once (usually from the environment) and handed to
#   each client constructor.  There is no module-level mutable service key.
#
# ENVIRONMENT VARIABLES:
#   DATA_GO_KR_SERVICE_KEY   the decoded service key from data.go.kr
#   USE_LIVE_DATA=true       call the real APIs (default: deterministic mock)
#   API_TIMEOUT_SECONDS      per-request timeout (default 10)
#
#   Entry points call dotenv.load_dotenv() first, so a .env file works too.
# =============================================================================

import os
from dataclasses import dataclass

from core.errors import ConfigError

WEATHER_BASE_URL = "http://apis.data.go.kr/1360000/VilageFcstInfoService_2.0"
TOUR_BASE_URL = "https://apis.data.go.kr/B551011/KorService2"
PHOTO_AWARD_BASE_URL = "https://apis.data.go.kr/B551011/PhokoAwrdService"


@dataclass(frozen=True)
class ApiConfig:
    service_key: str = ""
    weather_base_url: str = WEATHER_BASE_URL
    tour_base_url: str = TOUR_BASE_URL
    photo_award_base_url: str = PHOTO_AWARD_BASE_URL
    mobile_os: str = "ETC"
    mobile_app: str = "TravelWeb"
    timeout: float = 10.0
    use_live: bool = False

    @classmethod
    def from_env(cls) -> "ApiConfig":
        """Build a config from environment variables."""
        use_live = os.environ.get("USE_LIVE_DATA", "false").lower() == "true"
        timeout_raw = os.environ.get("API_TIMEOUT_SECONDS", "10")
        try:
            timeout = float(timeout_raw)
        except ValueError:
            raise ConfigError(f"API_TIMEOUT_SECONDS must be a number, got {timeout_raw!r}")

        config = cls(
            service_key=os.environ.get("DATA_GO_KR_SERVICE_KEY", ""),
            timeout=timeout,
            use_live=use_live,
        )
        config.require_key()
        return config

    def require_key(self) -> None:
        """Raise ConfigError if live mode is on without a service key."""
        if self.use_live and not self.service_key:
            raise ConfigError(
                "USE_LIVE_DATA is true but DATA_GO_KR_SERVICE_KEY is not set."
            )
