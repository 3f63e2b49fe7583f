# =============================================================================
# core/grid.py  -  Latitude/longitude to forecast-grid projection
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   The short-term forecast API does not accept coordinates.  It publishes
#   per cell of a 5 km grid laid over a Lambert Conformal Conic (LCC)
#   projection.  project_to_grid() turns a decimal-degree coordinate into the
#   (nx, ny) cell the API expects.
#
# THE CONSTANTS:
#   KMA_LCC below is the provider's own grid definition.  Change any value and
#   coordinates land in different cells than the provider's own indexing.
#
#       RE     earth radius (km)                  6371.00877
#       GRID   grid spacing (km)                  5.0
#       SLAT1  standard parallel 1 (deg)          30.0
#       SLAT2  standard parallel 2 (deg)          60.0
#       OLON   origin longitude (deg)             126.0
#       OLAT   origin latitude (deg)              38.0
#       XO/YO  grid index of the origin           43 / 136
#
# DOMAIN:
#   Any latitude strictly between the poles.  At exactly +/-90 the tangent
#   terms blow up and the result is meaningless; callers guard that.  Points
#   outside the serviced territory still map to a cell, the forecast endpoint
#   rejects them.
# =============================================================================

import math
from types import MappingProxyType

from core.models import GeoCoordinate, GridCell

KMA_LCC = MappingProxyType({
    "RE": 6371.00877,
    "GRID": 5.0,
    "SLAT1": 30.0,
    "SLAT2": 60.0,
    "OLON": 126.0,
    "OLAT": 38.0,
    "XO": 43,
    "YO": 136,
})

_DEGRAD = math.pi / 180.0
_QUARTER_PI = math.pi * 0.25


def _cone_constants(params) -> tuple[float, float, float, float]:
    """Derive (re, sn, sf, ro) for an LCC grid definition.

    re  earth radius in grid units
    sn  cone constant
    sf  scale factor
    ro  projected radius of the origin latitude
    """
    re = params["RE"] / params["GRID"]
    slat1 = params["SLAT1"] * _DEGRAD
    slat2 = params["SLAT2"] * _DEGRAD
    olat = params["OLAT"] * _DEGRAD

    sn = math.tan(_QUARTER_PI + slat2 * 0.5) / math.tan(_QUARTER_PI + slat1 * 0.5)
    sn = math.log(math.cos(slat1) / math.cos(slat2)) / math.log(sn)
    sf = math.tan(_QUARTER_PI + slat1 * 0.5)
    sf = math.pow(sf, sn) * math.cos(slat1) / sn
    ro = math.tan(_QUARTER_PI + olat * 0.5)
    ro = re * sf / math.pow(ro, sn)
    return re, sn, sf, ro


# Computed once; the grid definition never changes at runtime.
_RE, _SN, _SF, _RO = _cone_constants(KMA_LCC)


def project_to_grid(latitude: float, longitude: float) -> GridCell:
    """Project a decimal-degree coordinate onto the forecast grid.

    Args:
        latitude: Degrees north (negative for south).
        longitude: Degrees east (negative for west).

    Returns:
        The GridCell containing the point.  Rounding is add-0.5-then-floor,
        so a point exactly on a half boundary rounds up.
    """
    ra = math.tan(_QUARTER_PI + latitude * _DEGRAD * 0.5)
    ra = _RE * _SF / math.pow(ra, _SN)

    theta = longitude * _DEGRAD - KMA_LCC["OLON"] * _DEGRAD
    if theta > math.pi:
        theta -= 2.0 * math.pi
    if theta < -math.pi:
        theta += 2.0 * math.pi
    theta *= _SN

    nx = math.floor(ra * math.sin(theta) + KMA_LCC["XO"] + 0.5)
    ny = math.floor(_RO - ra * math.cos(theta) + KMA_LCC["YO"] + 0.5)
    return GridCell(nx=nx, ny=ny)


def coordinate_to_grid(coordinate: GeoCoordinate) -> GridCell:
    """Convenience wrapper taking a GeoCoordinate."""
    return project_to_grid(coordinate.latitude, coordinate.longitude)
