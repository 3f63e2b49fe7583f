# =============================================================================
# core/conditions.py  -  Category-code decoding
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   The weather API answers with one row per variable: a terse category code
#   ("T1H", "SKY", "PTY", ...) and a string value.  decode_observation() folds
#   those rows into a single WeatherObservation with human-readable labels.
#
# DEGRADE GRACEFULLY:
#   - unknown category codes are skipped
#   - unknown SKY / PTY codes become "Unknown"
#   - a numeric value that does not parse leaves its field unset
#   A partially decoded observation is still worth showing.
# =============================================================================

import logging
from collections.abc import Iterable
from typing import Optional, Union

from core.models import ForecastItem, ForecastSlot, WeatherObservation

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

# -----------------------------------------------------------------------------
# Category codes
# -----------------------------------------------------------------------------
# Observation (getUltraSrtNcst): T1H RN1 UUU VVV REH PTY VEC WSD
# Ultra-short forecast adds:     SKY LGT
# Village forecast adds:         POP PCP SNO TMP TMN TMX WAV
# -----------------------------------------------------------------------------
CATEGORY_FIELDS: dict[str, str] = {
    "T1H": "temperature",
    "TMP": "temperature",
    "REH": "humidity",
    "RN1": "precipitation",
    "PCP": "precipitation",
    "PTY": "precipitation_type",
    "SKY": "sky_condition",
    "WSD": "wind_speed",
    "VEC": "wind_direction",
    "POP": "precipitation_probability",
}

SKY_LABELS: dict[str, str] = {
    "1": "Clear",
    "3": "Partly Cloudy",
    "4": "Cloudy",
}

# 4 only appears in village forecasts, 5-7 only in ultra-short data.
PTY_LABELS: dict[str, str] = {
    "0": "None",
    "1": "Rain",
    "2": "Rain/Snow",
    "3": "Snow",
    "4": "Shower",
    "5": "Raindrop",
    "6": "Raindrop/Snow Flurry",
    "7": "Snow Flurry",
}

_NUMERIC_FIELDS = {
    "temperature",
    "humidity",
    "wind_speed",
    "wind_direction",
    "precipitation_probability",
}


def describe_sky(code: str) -> str:
    return SKY_LABELS.get(str(code).strip(), UNKNOWN)


def describe_precipitation_type(code: str) -> str:
    return PTY_LABELS.get(str(code).strip(), UNKNOWN)


def _parse_float(category: str, raw: str) -> Optional[float]:
    try:
        return float(raw)
    except (TypeError, ValueError):
        logger.debug("Skipping unparseable %s value %r", category, raw)
        return None


Pair = Union[tuple[str, str], ForecastItem]


def decode_observation(pairs: Iterable[Pair]) -> WeatherObservation:
    """Fold (category, value) rows into a WeatherObservation.

    Args:
        pairs: (category_code, raw_value) tuples or ForecastItem rows, in
            response order.  A later row for the same field overwrites an
            earlier one.

    Returns:
        A WeatherObservation.  Fields with no matching row stay None.
    """
    observation = WeatherObservation()

    for pair in pairs:
        if isinstance(pair, ForecastItem):
            category, raw = pair.category, pair.value
        else:
            category, raw = pair

        field_name = CATEGORY_FIELDS.get(category)
        if field_name is None:
            continue

        if field_name in _NUMERIC_FIELDS:
            value = _parse_float(category, raw)
            if value is None:
                continue
        elif field_name == "sky_condition":
            value = describe_sky(raw)
        elif field_name == "precipitation_type":
            value = describe_precipitation_type(raw)
        else:
            value = raw

        setattr(observation, field_name, value)

    return observation


def group_forecast(items: Iterable[ForecastItem]) -> list[ForecastSlot]:
    """Decode forecast rows per (fcst_date, fcst_time), oldest first.

    Rows without a forecast timestamp (observation rows) are ignored.
    """
    grouped: dict[tuple[str, str], list[ForecastItem]] = {}
    for item in items:
        if item.fcst_date is None or item.fcst_time is None:
            continue
        grouped.setdefault((item.fcst_date, item.fcst_time), []).append(item)

    return [
        ForecastSlot(fcst_date=date, fcst_time=time, observation=decode_observation(rows))
        for (date, time), rows in sorted(grouped.items())
    ]
