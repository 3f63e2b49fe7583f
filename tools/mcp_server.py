# =============================================================================
# tools/mcp_server.py  -  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines every MCP tool the agent can call.  Each tool is a thin wrapper
#   around core/ functions: it validates input, calls core/, converts the
#   dataclasses to dicts, and trims the output.
#
# HOW IT WORKS (the flow):
#   1. The ADK agent decides it needs information (e.g., weather in Busan)
#   2. It calls a tool by name via MCP (e.g., "get_destination_weather")
#   3. FastMCP routes the call to the registered function below
#   4. The function calls core/ logic, formats the result, and returns it
#
# TOOL NAMING CONVENTIONS:
#   - get_*     read-only retrieval
#   - search_*  query with filters
#   - compare_* the same lookup for several places at once
#   All tools are read-only and safe to retry.
#
# REGISTRATION:
#   The tools are plain module-level functions, registered with the server
#   in one place at the bottom of the file.  The names stay callable as
#   ordinary functions.
#
# ERRORS:
#   Client failures (TravelApiError) and bad input (ValueError) come back as
#   {"error": "..."} dicts rather than exceptions, so the agent can explain
#   the failure to the user.
#
# RUNNING THIS SERVER:
#   a) Standalone:  python -m tools.mcp_server
#   b) Spawned by the ADK agent over stdio (agent/travel_agent.py)
# =============================================================================

import json
import logging
import sys
from dataclasses import asdict
from functools import lru_cache

from dotenv import load_dotenv
from fastmcp import FastMCP

from core.broadcast import resolve_all_windows
from core.config import ApiConfig
from core.errors import TravelApiError
from core.grid import project_to_grid
from core.photo_award import PhotoAwardClient
from core.tour import AREA_CODE, CONTENT_TYPE, SORT_ORDERS, TourClient, date_range
from core.weather import (
    WeatherClient,
    current_weather,
    short_term_forecast,
    village_forecast,
    weather_for_locations,
)

load_dotenv()

# =============================================================================
# Logging Setup
# =============================================================================
# STDERR only: stdout carries the MCP JSON stream, and anything printed there
# would corrupt it.
#
# Colors: CYAN requests, YELLOW status, GREEN responses.
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)

# Caps on list sizes returned to the agent.
_MAX_SPOTS = 5
_MAX_FORECAST_SLOTS = 6
_MAX_COMPARE = 10
_MAX_IMAGES = 5
_MAX_AWARDS = 5


def _log_request(tool_name: str, **params) -> None:
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: dict) -> dict:
    logging.info(
        f"{_GREEN}  ← {tool_name} response: "
        f"{json.dumps(result, separators=(',', ':'), ensure_ascii=False)}{_RESET}"
    )
    return result


def _error(tool_name: str, message: str) -> dict:
    _log_status(f"Error: {message}")
    return _log_response(tool_name, {"error": message})


@lru_cache(maxsize=1)
def _config() -> ApiConfig:
    return ApiConfig.from_env()


def _weather_client() -> WeatherClient:
    return WeatherClient(_config())


def _tour_client() -> TourClient:
    return TourClient(_config())


def _photo_client() -> PhotoAwardClient:
    return PhotoAwardClient(_config())


def _check_coordinate(latitude: float, longitude: float) -> None:
    # The projection is undefined at the poles.
    if not -90.0 < latitude < 90.0:
        raise ValueError(f"latitude must be strictly between -90 and 90, got {latitude}")
    if not -180.0 <= longitude <= 180.0:
        raise ValueError(f"longitude must be between -180 and 180, got {longitude}")


def _observation_dict(observation) -> dict:
    # Drop unreported fields so "not reported" never reads as a value.
    return {k: v for k, v in asdict(observation).items() if v is not None}


def _slot_dicts(slots) -> list[dict]:
    return [
        {"date": s.fcst_date, "time": s.fcst_time, **_observation_dict(s.observation)}
        for s in slots[:_MAX_FORECAST_SLOTS]
    ]


def _spot_dict(spot) -> dict:
    result = {
        "content_id": spot.content_id,
        "content_type_id": spot.content_type_id,
        "title": spot.title,
        "address": spot.address,
        "latitude": spot.latitude,
        "longitude": spot.longitude,
    }
    if spot.event_start_date:
        result["event_start_date"] = spot.event_start_date
        result["event_end_date"] = spot.event_end_date
    return result


def _page_dict(page) -> dict:
    return {
        "total_count": page.total_count,
        "page_no": page.page_no,
        "items": [_spot_dict(s) for s in page.items[:_MAX_SPOTS]],
    }


def _award_dict(award) -> dict:
    return {
        "content_id": award.content_id,
        "title": award.title,
        "english_title": award.english_title,
        "location": award.english_location or award.location,
        "region_code": award.region_code,
        "award": award.award,
        "rank": award.award_rank,
        "photographer": award.photographer,
        "film_date": award.film_date,
        "keywords": award.keywords,
        "image_url": award.image_url,
    }


def _area(area: str):
    """Accept an area name ("Busan") or an area code ("6")."""
    if not area:
        return None
    return AREA_CODE.get(area.strip().upper(), area.strip())


def _content_type(content_type: str):
    """Accept a type name ("RESTAURANT") or a type id ("39")."""
    if not content_type:
        return None
    return CONTENT_TYPE.get(content_type.strip().upper(), content_type.strip())


def _sort_order(sort_by: str) -> str:
    try:
        return SORT_ORDERS[(sort_by or "modified").strip().lower()]
    except KeyError:
        raise ValueError(f"sort_by must be one of {sorted(SORT_ORDERS)}, got {sort_by!r}")


# =============================================================================
# TOOL 1-2: grid and issuance helpers
# =============================================================================
def get_grid_cell(latitude: float, longitude: float) -> dict:
    """Convert a latitude/longitude to the weather service's (nx, ny) grid cell.

    Args:
        latitude: Decimal degrees north (e.g., 37.5665 for Seoul).
        longitude: Decimal degrees east (e.g., 126.9780 for Seoul).

    Returns:
        {"nx": int, "ny": int}
    """
    _log_request("get_grid_cell", latitude=latitude, longitude=longitude)
    try:
        _check_coordinate(latitude, longitude)
    except ValueError as e:
        return _error("get_grid_cell", str(e))
    return _log_response("get_grid_cell", asdict(project_to_grid(latitude, longitude)))


def get_forecast_windows() -> dict:
    """Show which forecast batches (base_date/base_time) are current right now.

    Returns:
        {"ultra_srt_ncst": {...}, "ultra_srt_fcst": {...}, "vilage_fcst": {...}}
        each with base_date (YYYYMMDD) and base_time (HHmm), Korea time.
    """
    _log_request("get_forecast_windows")
    windows = resolve_all_windows()
    return _log_response(
        "get_forecast_windows",
        {name: asdict(window) for name, window in windows.items()},
    )


# =============================================================================
# TOOL 3-5: weather by coordinate
# =============================================================================
def get_current_weather(latitude: float, longitude: float) -> dict:
    """Get the current observed weather at a coordinate in South Korea.

    WHEN TO CALL THIS: When you already know coordinates.  If you only have a
    place name, call get_destination_weather instead.

    Returns:
        A dict with any of: temperature (°C), humidity (%), precipitation,
        precipitation_type, sky_condition, wind_speed (m/s),
        wind_direction (deg).  Unreported fields are omitted.
    """
    _log_request("get_current_weather", latitude=latitude, longitude=longitude)
    try:
        _check_coordinate(latitude, longitude)
        observation = current_weather(_weather_client(), latitude, longitude)
    except (TravelApiError, ValueError) as e:
        return _error("get_current_weather", str(e))
    return _log_response("get_current_weather", _observation_dict(observation))


def get_short_term_forecast(latitude: float, longitude: float) -> dict:
    """Get the hourly forecast for the next ~6 hours at a coordinate.

    Returns:
        {"slots": [{"date", "time", temperature, sky_condition, ...}, ...]}
    """
    _log_request("get_short_term_forecast", latitude=latitude, longitude=longitude)
    try:
        _check_coordinate(latitude, longitude)
        slots = short_term_forecast(_weather_client(), latitude, longitude)
    except (TravelApiError, ValueError) as e:
        return _error("get_short_term_forecast", str(e))
    _log_status(f"Got {len(slots)} forecast slots")
    return _log_response("get_short_term_forecast", {"slots": _slot_dicts(slots)})


def get_village_forecast(latitude: float, longitude: float, hours: int = 6) -> dict:
    """Get the multi-day hourly forecast (with rain probability) at a coordinate.

    Args:
        latitude: Decimal degrees north.
        longitude: Decimal degrees east.
        hours: How many hourly slots to return (max 24).

    Returns:
        {"slots": [{"date", "time", temperature, precipitation_probability, ...}]}
    """
    _log_request("get_village_forecast", latitude=latitude, longitude=longitude, hours=hours)
    try:
        _check_coordinate(latitude, longitude)
        slots = village_forecast(_weather_client(), latitude, longitude)
    except (TravelApiError, ValueError) as e:
        return _error("get_village_forecast", str(e))
    limit = max(1, min(hours, 24))
    result = [
        {"date": s.fcst_date, "time": s.fcst_time, **_observation_dict(s.observation)}
        for s in slots[:limit]
    ]
    return _log_response("get_village_forecast", {"slots": result})


# =============================================================================
# TOOL 6-10: tourism listings
# =============================================================================
def search_destinations(
    keyword: str,
    area: str = "",
    content_type: str = "",
    sort_by: str = "modified",
) -> dict:
    """Search Korean travel destinations by keyword.

    Args:
        keyword: Search text, Korean or English (e.g., "경복궁", "Haeundae").
        area: Optional area name or code (e.g., "Seoul", "Busan", "39").
        content_type: Optional type name (e.g., "TOURIST_SPOT", "RESTAURANT").
        sort_by: "modified" (default), "title" or "created".

    Returns:
        {"total_count", "page_no", "items": [{content_id, title, address,
        latitude, longitude, ...}]} with at most 5 items.
    """
    _log_request("search_destinations", keyword=keyword, area=area,
                 content_type=content_type, sort_by=sort_by)
    try:
        page = _tour_client().search_keyword(
            keyword,
            content_type_id=_content_type(content_type),
            area_code=_area(area),
            arrange=_sort_order(sort_by),
        )
    except (TravelApiError, ValueError) as e:
        return _error("search_destinations", str(e))
    _log_status(f"Found {page.total_count} destinations")
    return _log_response("search_destinations", _page_dict(page))


def search_nearby(
    latitude: float,
    longitude: float,
    radius: int = 2000,
    content_type: str = "",
) -> dict:
    """Find listings within a radius of a coordinate.

    Args:
        latitude: Decimal degrees north.
        longitude: Decimal degrees east.
        radius: Search radius in metres (1-20000).
        content_type: Optional type name (e.g., "RESTAURANT", "ACCOMMODATION").
    """
    _log_request("search_nearby", latitude=latitude, longitude=longitude,
                 radius=radius, content_type=content_type)
    try:
        _check_coordinate(latitude, longitude)
        page = _tour_client().location_based_list(
            latitude,
            longitude,
            radius=radius,
            content_type_id=_content_type(content_type),
        )
    except (TravelApiError, ValueError) as e:
        return _error("search_nearby", str(e))
    return _log_response("search_nearby", _page_dict(page))


def search_festivals(start_date: str = "", end_date: str = "", area: str = "") -> dict:
    """List festivals running in a date range.

    Args:
        start_date: YYYYMMDD; defaults to today.
        end_date: YYYYMMDD; defaults to 30 days after today.
        area: Optional area name or code.
    """
    _log_request("search_festivals", start_date=start_date, end_date=end_date, area=area)
    default_start, default_end = date_range(30)
    try:
        page = _tour_client().search_festival(
            start_date or default_start,
            event_end_date=end_date or default_end,
            area_code=_area(area),
        )
    except (TravelApiError, ValueError) as e:
        return _error("search_festivals", str(e))
    return _log_response("search_festivals", _page_dict(page))


def search_accommodations(area: str = "") -> dict:
    """List accommodations (hotels, guesthouses, ...) in an area.

    Args:
        area: Area name or code (e.g., "Jeju", "6").  Empty for nationwide.
    """
    _log_request("search_accommodations", area=area)
    try:
        page = _tour_client().search_accommodations(area_code=_area(area))
    except (TravelApiError, ValueError) as e:
        return _error("search_accommodations", str(e))
    return _log_response("search_accommodations", _page_dict(page))


def browse_area(area: str = "", content_type: str = "", sort_by: str = "modified") -> dict:
    """List what an area has to offer, without a keyword.

    Args:
        area: Area name or code.  Empty for nationwide.
        content_type: Optional type name (e.g., "TOURIST_SPOT").
        sort_by: "modified" (default), "title" or "created".
    """
    _log_request("browse_area", area=area, content_type=content_type, sort_by=sort_by)
    try:
        page = _tour_client().area_based_list(
            area_code=_area(area),
            content_type_id=_content_type(content_type),
            arrange=_sort_order(sort_by),
        )
    except (TravelApiError, ValueError) as e:
        return _error("browse_area", str(e))
    return _log_response("browse_area", _page_dict(page))


# =============================================================================
# TOOL 11-13: listing details
# =============================================================================
def get_destination_details(content_id: str) -> dict:
    """Get address, coordinates and overview for one listing by content_id."""
    _log_request("get_destination_details", content_id=content_id)
    try:
        spot = _tour_client().detail_common(content_id)
    except (TravelApiError, ValueError) as e:
        return _error("get_destination_details", str(e))
    if spot is None:
        return _error("get_destination_details", f"No listing with content_id {content_id!r}.")
    result = _spot_dict(spot)
    if spot.overview:
        result["overview"] = spot.overview[:500]
    return _log_response("get_destination_details", result)


def get_destination_intro(content_id: str, content_type_id: str) -> dict:
    """Practical facts for one listing: opening hours, closed days, parking,
    check-in times or festival venue, depending on its type.

    Args:
        content_id: The listing's content_id.
        content_type_id: The listing's content_type_id (from search results).
    """
    _log_request("get_destination_intro", content_id=content_id, content_type_id=content_type_id)
    try:
        intro = _tour_client().detail_intro(content_id, content_type_id)
    except (TravelApiError, ValueError) as e:
        return _error("get_destination_intro", str(e))
    if intro is None:
        return _error("get_destination_intro", f"No introduction for content_id {content_id!r}.")
    return _log_response("get_destination_intro", intro)


def get_destination_images(content_id: str) -> dict:
    """Photo URLs for one listing (at most 5)."""
    _log_request("get_destination_images", content_id=content_id)
    try:
        images = _tour_client().detail_images(content_id)
    except (TravelApiError, ValueError) as e:
        return _error("get_destination_images", str(e))
    return _log_response("get_destination_images", {
        "images": [
            {"image_url": i.image_url, "thumbnail_url": i.thumbnail_url}
            for i in images[:_MAX_IMAGES]
        ],
    })


# =============================================================================
# TOOL 14-15: code tables
# =============================================================================
def get_area_codes(area: str = "") -> dict:
    """Province area codes, or the district codes within one province.

    Args:
        area: Empty for provinces; an area name or code for its districts.
    """
    _log_request("get_area_codes", area=area)
    try:
        codes = _tour_client().area_codes(_area(area))
    except (TravelApiError, ValueError) as e:
        return _error("get_area_codes", str(e))
    return _log_response("get_area_codes", {"codes": [asdict(c) for c in codes]})


def get_category_codes(content_type: str = "", cat1: str = "", cat2: str = "") -> dict:
    """Service category codes one level below the deepest code given.

    Args:
        content_type: Optional type name or id.
        cat1: Optional top-level category (e.g., "A02").
        cat2: Optional second-level category (e.g., "A0201").
    """
    _log_request("get_category_codes", content_type=content_type, cat1=cat1, cat2=cat2)
    try:
        codes = _tour_client().category_codes(
            content_type_id=_content_type(content_type),
            cat1=cat1 or None,
            cat2=cat2 or None,
        )
    except (TravelApiError, ValueError) as e:
        return _error("get_category_codes", str(e))
    return _log_response("get_category_codes", {"codes": [asdict(c) for c in codes]})


# =============================================================================
# TOOL 16: photo contest winners
# =============================================================================
def search_photo_awards(keyword: str = "", region_code: str = "", count: int = 5) -> dict:
    """Award-winning tourism photos, as visual inspiration for a place.

    Args:
        keyword: Search text (e.g., "해운대", "sunrise").  Takes precedence.
        region_code: Legal-district province code (e.g., "11" Seoul,
            "26" Busan, "50" Jeju).  Not the same as tourism area codes.
        count: How many winners to return (max 5).

    With neither keyword nor region_code, returns the latest winners.
    """
    _log_request("search_photo_awards", keyword=keyword, region_code=region_code, count=count)
    limit = max(1, min(count, _MAX_AWARDS))
    try:
        client = _photo_client()
        if keyword:
            awards = client.search(keyword, num_of_rows=limit)
        elif region_code:
            awards = client.by_region(region_code, num_of_rows=limit)
        else:
            awards = client.latest(limit)
    except (TravelApiError, ValueError) as e:
        return _error("search_photo_awards", str(e))
    return _log_response("search_photo_awards", {
        "awards": [_award_dict(a) for a in awards[:limit]],
    })


# =============================================================================
# TOOL 17-18: destination weather (composition)
# =============================================================================
# Place name -> first listing with coordinates -> grid -> weather.
# =============================================================================
def get_destination_weather(keyword: str) -> dict:
    """Current weather plus the next few hours of forecast for a named place.

    WHEN TO CALL THIS: When the user names a destination ("Is it raining at
    Haeundae?").  It finds the place, projects its coordinates to the weather
    grid, and fetches both observation and forecast.

    Returns:
        {"destination": {...}, "grid": {"nx", "ny"}, "current": {...},
         "forecast": [...]}
    """
    _log_request("get_destination_weather", keyword=keyword)
    try:
        page = _tour_client().search_keyword(keyword, num_of_rows=20)
        spot = next((s for s in page.items if s.coordinate is not None), None)
        if spot is None:
            return _error("get_destination_weather", f"No destination with coordinates matches {keyword!r}.")
        _log_status(f"Resolved {keyword!r} to {spot.title}")

        client = _weather_client()
        current = current_weather(client, spot.latitude, spot.longitude)
        forecast = short_term_forecast(client, spot.latitude, spot.longitude)
    except (TravelApiError, ValueError) as e:
        return _error("get_destination_weather", str(e))

    return _log_response("get_destination_weather", {
        "destination": _spot_dict(spot),
        "grid": asdict(project_to_grid(spot.latitude, spot.longitude)),
        "current": _observation_dict(current),
        "forecast": _slot_dicts(forecast),
    })


def compare_destination_weather(keywords: list[str]) -> dict:
    """Current weather side by side for several named places (max 10).

    Places that cannot be found or whose weather lookup fails are listed
    under "unresolved".
    """
    _log_request("compare_destination_weather", keywords=keywords)
    try:
        tour = _tour_client()
        weather = _weather_client()
    except TravelApiError as e:
        return _error("compare_destination_weather", str(e))
    locations = []
    unresolved = []
    for keyword in keywords[:_MAX_COMPARE]:
        try:
            page = tour.search_keyword(keyword, num_of_rows=20)
        except (TravelApiError, ValueError) as e:
            _log_status(f"{keyword!r}: {e}")
            unresolved.append(keyword)
            continue
        spot = next((s for s in page.items if s.coordinate is not None), None)
        if spot is None:
            unresolved.append(keyword)
            continue
        locations.append((keyword, spot.latitude, spot.longitude))

    observations = weather_for_locations(weather, locations)

    unresolved.extend(name for name, _, _ in locations if name not in observations)
    return _log_response("compare_destination_weather", {
        "weather": {name: _observation_dict(obs) for name, obs in observations.items()},
        "unresolved": unresolved,
    })


# =============================================================================
# Server instance and tool registration
# =============================================================================
mcp = FastMCP("korea-travel-weather")

TOOLS = (
    get_grid_cell,
    get_forecast_windows,
    get_current_weather,
    get_short_term_forecast,
    get_village_forecast,
    search_destinations,
    search_nearby,
    search_festivals,
    search_accommodations,
    browse_area,
    get_destination_details,
    get_destination_intro,
    get_destination_images,
    get_area_codes,
    get_category_codes,
    search_photo_awards,
    get_destination_weather,
    compare_destination_weather,
)

for _tool in TOOLS:
    mcp.tool()(_tool)


if __name__ == "__main__":
    mcp.run()
