"""
Geohash Cells
=============

Hierarchical grid cells: each extra character splits a cell into 32, and a
cell's token is a prefix of every cell it contains.
"""

import math
from typing import List, Tuple

# Base32 alphabet for geohash
_BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"
_DECODE_MAP = {c: i for i, c in enumerate(_BASE32)}

MAX_PRECISION = 12

# Mean length of one degree of latitude, in meters
METERS_PER_DEGREE = 111_195.0


def encode(lat: float, lon: float, precision: int = 8) -> str:
    """
    Encode latitude/longitude to a geohash string.

    Example:
        >>> encode(37.7749, -122.4194, 5)
        '9q8yy'
    """
    if not 1 <= precision <= MAX_PRECISION:
        raise ValueError(f"precision must be in [1, {MAX_PRECISION}], got {precision}")

    lat_range = [-90.0, 90.0]
    lon_range = [-180.0, 180.0]

    geohash = []
    bits = [16, 8, 4, 2, 1]
    bit = 0
    ch = 0
    is_lon = True

    while len(geohash) < precision:
        if is_lon:
            mid = (lon_range[0] + lon_range[1]) / 2
            if lon >= mid:
                ch |= bits[bit]
                lon_range[0] = mid
            else:
                lon_range[1] = mid
        else:
            mid = (lat_range[0] + lat_range[1]) / 2
            if lat >= mid:
                ch |= bits[bit]
                lat_range[0] = mid
            else:
                lat_range[1] = mid

        is_lon = not is_lon

        if bit < 4:
            bit += 1
        else:
            geohash.append(_BASE32[ch])
            bit = 0
            ch = 0

    return "".join(geohash)


def bounds(geohash: str) -> Tuple[float, float, float, float]:
    """
    Bounding box of a cell.

    Returns:
        (lat_min, lat_max, lon_min, lon_max)
    """
    if not geohash:
        raise ValueError("Empty geohash")

    lat_range = [-90.0, 90.0]
    lon_range = [-180.0, 180.0]
    is_lon = True

    for c in geohash:
        try:
            value = _DECODE_MAP[c]
        except KeyError:
            raise ValueError(f"Invalid geohash character {c!r} in {geohash!r}") from None
        for mask in (16, 8, 4, 2, 1):
            target = lon_range if is_lon else lat_range
            mid = (target[0] + target[1]) / 2
            if value & mask:
                target[0] = mid
            else:
                target[1] = mid
            is_lon = not is_lon

    return lat_range[0], lat_range[1], lon_range[0], lon_range[1]


def cell_dimensions(precision: int) -> Tuple[float, float]:
    """Cell (height, width) in degrees at a precision."""
    total_bits = 5 * precision
    lon_bits = (total_bits + 1) // 2
    lat_bits = total_bits // 2
    return 180.0 / (2 ** lat_bits), 360.0 / (2 ** lon_bits)


def cell_size_meters(precision: int, latitude: float = 0.0) -> Tuple[float, float]:
    """Approximate cell (height, width) in meters at a latitude."""
    height_deg, width_deg = cell_dimensions(precision)
    lat = min(90.0, abs(latitude))
    return (
        height_deg * METERS_PER_DEGREE,
        width_deg * METERS_PER_DEGREE * math.cos(math.radians(lat)),
    )


def _wrap_longitude(lon: float) -> float:
    return ((lon + 180.0) % 360.0) - 180.0


def neighbors(geohash: str) -> List[str]:
    """
    The up to eight cells surrounding a cell at the same precision.

    Cells beyond the poles are omitted; longitude wraps at the antimeridian.
    """
    lat_min, lat_max, lon_min, lon_max = bounds(geohash)
    height = lat_max - lat_min
    width = lon_max - lon_min
    center_lat = (lat_min + lat_max) / 2
    center_lon = (lon_min + lon_max) / 2
    precision = len(geohash)

    result: List[str] = []
    for dlat in (1, 0, -1):
        lat = center_lat + dlat * height
        if not -90.0 < lat < 90.0:
            continue
        for dlon in (-1, 0, 1):
            if dlat == 0 and dlon == 0:
                continue
            cell = encode(lat, _wrap_longitude(center_lon + dlon * width), precision)
            if cell != geohash and cell not in result:
                result.append(cell)
    return result
