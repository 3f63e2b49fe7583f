# =============================================================================
# core/broadcast.py  -  Forecast issuance ("base_date"/"base_time") resolution
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Every weather endpoint needs the timestamp of the batch you want to read.
#   Ask for a batch that has not been published yet and the API answers
#   "NO_DATA".  These functions pick the most recent batch that is already
#   queryable at a reference instant.
#
# THE THREE SCHEDULES:
#
#   endpoint             issued at            queryable from
#   -------------------  -------------------  -------------------------
#   getUltraSrtNcst      every hour, HH:00    about HH:10
#   getUltraSrtFcst      every hour, HH:30    HH:45
#   getVilageFcst        02,05,...,23 :00     HH:10
#
# REFERENCE TIME:
#   `now` defaults to the current instant in Asia/Seoul.  An aware datetime in
#   any other zone is converted to Seoul time first; a naive datetime is taken
#   as Seoul wall-clock time.  Date rollover (day, month, year) is plain
#   timedelta arithmetic.
# =============================================================================

from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from core.models import ForecastWindow

SERVICE_TZ = ZoneInfo("Asia/Seoul")

# Ultra-short-term forecast: published at HH:30, safe from HH:45.
FCST_ISSUE_MINUTE = 30
FCST_READY_MINUTE = 45

# Village forecast: eight fixed issuances, each safe 10 minutes later.
VILLAGE_ISSUE_HOURS = (2, 5, 8, 11, 14, 17, 20, 23)
VILLAGE_READY_MINUTE = 10

_DATE_FORMAT = "%Y%m%d"


def service_now() -> datetime:
    """The current wall-clock time in the service time zone (naive)."""
    return datetime.now(SERVICE_TZ).replace(tzinfo=None)


def _local(now: Optional[datetime]) -> datetime:
    if now is None:
        return service_now()
    if now.tzinfo is not None:
        return now.astimezone(SERVICE_TZ).replace(tzinfo=None)
    return now


def _window(moment: datetime, hour: int, minute: int) -> ForecastWindow:
    return ForecastWindow(
        base_date=moment.strftime(_DATE_FORMAT),
        base_time=f"{hour:02d}{minute:02d}",
    )


def resolve_ncst_window(now: Optional[datetime] = None) -> ForecastWindow:
    """Issuance of the current hour's observation ("HH00").

    Unlike resolve_fcst_window there is no step-back before the ~10 minute
    publication lag has passed.  Callers querying in the first minutes of the
    hour may get NO_DATA.
    """
    local = _local(now)
    return _window(local, local.hour, 0)


def resolve_fcst_window(now: Optional[datetime] = None) -> ForecastWindow:
    """Latest queryable ultra-short-term forecast ("HH30").

    Before HH:45 the HH:30 batch is not ready yet, so the previous hour's
    batch is used; stepping back from 00:xx lands on the previous day.
    """
    local = _local(now)
    if local.minute < FCST_READY_MINUTE:
        local -= timedelta(hours=1)
    return _window(local, local.hour, FCST_ISSUE_MINUTE)


def resolve_village_window(now: Optional[datetime] = None) -> ForecastWindow:
    """Latest queryable village forecast (one of the eight daily issuances).

    Before 02:10 the newest batch is the previous day's 23:00 issuance.
    """
    local = _local(now)
    first = VILLAGE_ISSUE_HOURS[0]

    if local.hour < first or (local.hour == first and local.minute < VILLAGE_READY_MINUTE):
        return _window(local - timedelta(days=1), VILLAGE_ISSUE_HOURS[-1], 0)

    selected = first
    for hour in reversed(VILLAGE_ISSUE_HOURS):
        if local.hour >= hour:
            selected = hour
            break
    return _window(local, selected, 0)


def resolve_all_windows(now: Optional[datetime] = None) -> dict[str, ForecastWindow]:
    """All three windows for one reference instant, keyed by endpoint name."""
    local = _local(now)
    return {
        "ultra_srt_ncst": resolve_ncst_window(local),
        "ultra_srt_fcst": resolve_fcst_window(local),
        "vilage_fcst": resolve_village_window(local),
    }
