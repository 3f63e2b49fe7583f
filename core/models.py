# =============================================================================
# core/models.py  -  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shape of every piece of information that flows
# through the system.  They carry no behavior.
#
# VALUE TYPES:
#   GeoCoordinate, GridCell and ForecastWindow are frozen: they are the inputs
#   and outputs of pure functions and live for a single computation.
#
# "NOT REPORTED" VS "ZERO":
#   Every WeatherObservation field defaults to None.  A field the API did not
#   report stays None, so callers can tell it apart from a reported 0.
# =============================================================================

from dataclasses import dataclass, field
from typing import Optional


# -----------------------------------------------------------------------------
# Geometry
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class GeoCoordinate:
    """A point in decimal degrees (WGS84)."""

    latitude: float                    # [-90, 90]
    longitude: float                   # [-180, 180]


@dataclass(frozen=True)
class GridCell:
    """A cell of the forecast provider's 5 km Lambert grid."""

    nx: int
    ny: int


# -----------------------------------------------------------------------------
# ForecastWindow - the "base_date"/"base_time" query pair
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ForecastWindow:
    """The issuance timestamp of a published forecast batch."""

    base_date: str                     # "YYYYMMDD"
    base_time: str                     # "HHmm"

    def as_params(self) -> dict:
        return {"base_date": self.base_date, "base_time": self.base_time}


# -----------------------------------------------------------------------------
# WeatherObservation - decoded category/value rows
# -----------------------------------------------------------------------------
@dataclass
class WeatherObservation:
    """Weather for one place and time, decoded from raw category codes."""

    temperature: Optional[float] = None              # °C (T1H / TMP)
    humidity: Optional[float] = None                 # % (REH)
    precipitation: Optional[str] = None              # RN1 / PCP, kept raw ("강수없음", "1.0mm")
    precipitation_type: Optional[str] = None         # PTY label, e.g. "Rain"
    sky_condition: Optional[str] = None              # SKY label, e.g. "Clear"
    wind_speed: Optional[float] = None               # m/s (WSD)
    wind_direction: Optional[float] = None           # degrees (VEC)
    precipitation_probability: Optional[float] = None  # % (POP)


# -----------------------------------------------------------------------------
# ForecastItem - one flattened row of a weather API response
# -----------------------------------------------------------------------------
# Observation rows ("obsrValue") and forecast rows ("fcstValue") are folded
# into the same shape; only forecast rows carry fcst_date / fcst_time.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ForecastItem:
    category: str                      # "T1H", "SKY", "PTY", ...
    value: str
    base_date: str
    base_time: str
    nx: int
    ny: int
    fcst_date: Optional[str] = None
    fcst_time: Optional[str] = None


@dataclass
class ForecastSlot:
    """Decoded forecast for a single forecast timestamp."""

    fcst_date: str                     # "YYYYMMDD"
    fcst_time: str                     # "HHmm"
    observation: WeatherObservation = field(default_factory=WeatherObservation)


# -----------------------------------------------------------------------------
# Tourism listings
# -----------------------------------------------------------------------------
@dataclass
class TouristSpot:
    """One row of a tourism listing (destination, festival, accommodation)."""

    content_id: str
    content_type_id: str
    title: str
    address: str = ""
    latitude: Optional[float] = None   # "mapy" in the API
    longitude: Optional[float] = None  # "mapx" in the API
    image_url: Optional[str] = None
    area_code: Optional[str] = None
    tel: Optional[str] = None
    overview: Optional[str] = None
    event_start_date: Optional[str] = None   # festivals only
    event_end_date: Optional[str] = None     # festivals only

    @property
    def coordinate(self) -> Optional[GeoCoordinate]:
        if self.latitude is None or self.longitude is None:
            return None
        return GeoCoordinate(self.latitude, self.longitude)


@dataclass
class ListPage:
    """One page of listing results, as paged by the API."""

    items: list[TouristSpot] = field(default_factory=list)
    page_no: int = 1
    num_of_rows: int = 10
    total_count: int = 0


@dataclass
class TourImage:
    """One photo attached to a listing (detail image endpoint)."""

    content_id: str
    image_url: str
    thumbnail_url: Optional[str] = None
    serial_num: Optional[str] = None


@dataclass(frozen=True)
class CodeName:
    """A row of a code table: area codes, category codes, region codes."""

    code: str
    name: str


# -----------------------------------------------------------------------------
# Photo contest awards
# -----------------------------------------------------------------------------
@dataclass
class PhotoAward:
    """An award-winning tourism photo and where it was taken."""

    content_id: str
    title: str
    english_title: str = ""
    location: str = ""                 # where it was shot (Korean)
    english_location: str = ""
    region_code: str = ""              # legal-district province code
    photographer: str = ""
    award: str = ""                    # e.g. "스마트폰 부문 [입선]"
    award_category: str = ""           # e.g. "스마트폰 부문"
    award_rank: str = ""               # e.g. "입선"
    keywords: list[str] = field(default_factory=list)
    film_date: str = ""                # "YYYY-MM", or raw when not YYYYMM
    image_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    registered_at: Optional[str] = None   # "YYYYMMDDHHmmss"
    modified_at: Optional[str] = None
