# =============================================================================
# core/weather.py  -  Short-term forecast client & weather lookups
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Talks to the national weather service's short-term forecast API
#   (VilageFcstInfoService_2.0) and composes the pure pieces of this package
#   into "weather at this latitude/longitude" lookups:
#
#       (lat, lon) --project_to_grid--> (nx, ny)
#       now        --resolve_*_window--> (base_date, base_time)
#       HTTP GET   --> category/value rows --decode_observation--> observation
#
# DATA SOURCE TOGGLE:
#   ApiConfig.use_live (USE_LIVE_DATA=true) switches between the real API and
#   a deterministic mock that answers in the exact same row format.  Both
#   paths go through the same row parser and decoder, so everything above the
#   client is identical in both modes.
#
# THE THREE ENDPOINTS:
#   ultra_srt_ncst   current observation for the hour
#   ultra_srt_fcst   next ~6 hours, hourly
#   vilage_fcst      next ~3 days, hourly (adds POP / TMP / PCP)
# =============================================================================

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from typing import Optional

from core.broadcast import (
    resolve_fcst_window,
    resolve_ncst_window,
    resolve_village_window,
)
from core.conditions import decode_observation, group_forecast
from core.config import ApiConfig
from core.errors import ApiFormatError, TravelApiError
from core.grid import project_to_grid
from core.http import extract_items, get_envelope
from core.models import (
    ForecastItem,
    ForecastSlot,
    ForecastWindow,
    GridCell,
    WeatherObservation,
)

logger = logging.getLogger(__name__)

WEATHER_SUCCESS_CODE = "00"

DEFAULT_PARAMS = {
    "dataType": "JSON",
    "numOfRows": 1000,
    "pageNo": 1,
}

ENDPOINT_NCST = "getUltraSrtNcst"
ENDPOINT_FCST = "getUltraSrtFcst"
ENDPOINT_VILLAGE = "getVilageFcst"


def _grid_coordinate(row: dict, key: str) -> int:
    try:
        return int(row.get(key, 0))
    except (TypeError, ValueError) as e:
        raise ApiFormatError(f"weather row has a malformed {key}: {row.get(key)!r}") from e


def parse_item(row: dict) -> ForecastItem:
    """Turn one raw API row into a ForecastItem.

    Raises:
        ApiFormatError: nx or ny is not an integer.
    """
    value = row.get("obsrValue")
    if value is None:
        value = row.get("fcstValue", "")
    return ForecastItem(
        category=row.get("category", ""),
        value=str(value),
        base_date=str(row.get("baseDate", "")),
        base_time=str(row.get("baseTime", "")),
        nx=_grid_coordinate(row, "nx"),
        ny=_grid_coordinate(row, "ny"),
        fcst_date=row.get("fcstDate"),
        fcst_time=row.get("fcstTime"),
    )


class WeatherClient:
    """Client for the three short-term forecast endpoints."""

    def __init__(self, config: ApiConfig):
        config.require_key()
        self.config = config

    def ultra_srt_ncst(self, grid: GridCell, window: ForecastWindow) -> list[ForecastItem]:
        return self._fetch(ENDPOINT_NCST, grid, window)

    def ultra_srt_fcst(self, grid: GridCell, window: ForecastWindow) -> list[ForecastItem]:
        return self._fetch(ENDPOINT_FCST, grid, window)

    def vilage_fcst(self, grid: GridCell, window: ForecastWindow) -> list[ForecastItem]:
        return self._fetch(ENDPOINT_VILLAGE, grid, window)

    def _fetch(self, endpoint: str, grid: GridCell, window: ForecastWindow) -> list[ForecastItem]:
        if self.config.use_live:
            rows = self._fetch_live(endpoint, grid, window)
        else:
            rows = mock_rows(endpoint, grid, window)
        return [parse_item(row) for row in rows]

    def _fetch_live(self, endpoint: str, grid: GridCell, window: ForecastWindow) -> list[dict]:
        params = {
            **DEFAULT_PARAMS,
            "serviceKey": self.config.service_key,
            **window.as_params(),
            "nx": grid.nx,
            "ny": grid.ny,
        }
        body = get_envelope(
            f"{self.config.weather_base_url}/{endpoint}",
            params,
            timeout=self.config.timeout,
            service="weather",
            success_code=WEATHER_SUCCESS_CODE,
        )
        return extract_items(body)


# =============================================================================
# MOCK PROVIDER: deterministic rows in the API's own shape
# =============================================================================
# Seeded from the grid cell and the window, so the same place and batch
# always produce the same rows.  Values are plausible, not meteorological.
# =============================================================================
_NCST_CATEGORIES = ("T1H", "RN1", "REH", "PTY", "VEC", "WSD")
_FCST_CATEGORIES = ("T1H", "RN1", "SKY", "REH", "PTY", "VEC", "WSD")
_VILLAGE_CATEGORIES = ("TMP", "SKY", "PTY", "POP", "PCP", "REH", "VEC", "WSD")

_FCST_HOURS = 6
_VILLAGE_HOURS = 24


def _mock_value(rng: random.Random, category: str) -> str:
    if category in ("T1H", "TMP"):
        return f"{rng.uniform(-5.0, 30.0):.1f}"
    if category == "REH":
        return str(rng.randint(30, 95))
    if category == "SKY":
        return rng.choice(["1", "1", "3", "4"])
    if category == "PTY":
        return rng.choice(["0", "0", "0", "1", "4"])
    if category == "POP":
        return str(rng.choice([0, 10, 20, 30, 60, 80]))
    if category in ("RN1", "PCP"):
        return rng.choice(["강수없음", "강수없음", "1.0mm", "5.0mm"])
    if category == "VEC":
        return str(rng.randint(0, 359))
    if category == "WSD":
        return f"{rng.uniform(0.0, 9.0):.1f}"
    return "0"


def mock_rows(endpoint: str, grid: GridCell, window: ForecastWindow) -> list[dict]:
    """Generate raw rows for `endpoint` as the live API would return them."""
    rng = random.Random(f"{endpoint}:{grid.nx}:{grid.ny}:{window.base_date}{window.base_time}")
    base = {
        "baseDate": window.base_date,
        "baseTime": window.base_time,
        "nx": grid.nx,
        "ny": grid.ny,
    }

    if endpoint == ENDPOINT_NCST:
        return [
            {**base, "category": category, "obsrValue": _mock_value(rng, category)}
            for category in _NCST_CATEGORIES
        ]

    if endpoint == ENDPOINT_FCST:
        categories, hours = _FCST_CATEGORIES, _FCST_HOURS
    else:
        categories, hours = _VILLAGE_CATEGORIES, _VILLAGE_HOURS

    issued = datetime.strptime(window.base_date + window.base_time, "%Y%m%d%H%M")
    first = issued.replace(minute=0) + timedelta(hours=1)
    rows = []
    for i in range(hours):
        slot = first + timedelta(hours=i)
        for category in categories:
            rows.append({
                **base,
                "category": category,
                "fcstDate": slot.strftime("%Y%m%d"),
                "fcstTime": slot.strftime("%H%M"),
                "fcstValue": _mock_value(rng, category),
            })
    return rows


# =============================================================================
# PUBLIC API: weather by coordinate
# =============================================================================
def current_weather(
    client: WeatherClient,
    latitude: float,
    longitude: float,
    now: Optional[datetime] = None,
) -> WeatherObservation:
    """The current observation at a coordinate."""
    grid = project_to_grid(latitude, longitude)
    window = resolve_ncst_window(now)
    return decode_observation(client.ultra_srt_ncst(grid, window))


def short_term_forecast(
    client: WeatherClient,
    latitude: float,
    longitude: float,
    now: Optional[datetime] = None,
) -> list[ForecastSlot]:
    """Hourly forecast for the next few hours at a coordinate."""
    grid = project_to_grid(latitude, longitude)
    window = resolve_fcst_window(now)
    return group_forecast(client.ultra_srt_fcst(grid, window))


def village_forecast(
    client: WeatherClient,
    latitude: float,
    longitude: float,
    now: Optional[datetime] = None,
) -> list[ForecastSlot]:
    """Hourly forecast for the next days at a coordinate."""
    grid = project_to_grid(latitude, longitude)
    window = resolve_village_window(now)
    return group_forecast(client.vilage_fcst(grid, window))


def weather_for_locations(
    client: WeatherClient,
    locations: list[tuple[str, float, float]],
    now: Optional[datetime] = None,
    max_workers: int = 8,
) -> dict[str, WeatherObservation]:
    """Current observations for many named places, fetched in parallel.

    Args:
        client: The weather client.
        locations: (name, latitude, longitude) triples.
        now: Reference instant; one window is resolved for all places.
        max_workers: Thread-pool size.

    Returns:
        {name: observation}.  Places whose request failed, or that came back
        with no rows, are logged and left out.
    """
    if not locations:
        return {}

    window = resolve_ncst_window(now)

    def fetch(location: tuple[str, float, float]) -> list[ForecastItem]:
        _, lat, lon = location
        return client.ultra_srt_ncst(project_to_grid(lat, lon), window)

    results: dict[str, WeatherObservation] = {}
    with ThreadPoolExecutor(max_workers=min(max_workers, len(locations))) as pool:
        futures = [(loc[0], pool.submit(fetch, loc)) for loc in locations]
        for name, future in futures:
            try:
                items = future.result()
            except TravelApiError as e:
                logger.warning("Weather for %s failed: %s", name, e)
                continue
            if not items:
                logger.warning("Weather for %s returned no rows", name)
                continue
            results[name] = decode_observation(items)
    return results
