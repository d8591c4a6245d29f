from typing import Optional
import re

from .match_record import GeoBounds

#points awarded per rule
EXACT_PINCODE_POINTS = 100
EXACT_WARD_POINTS = 80
EXACT_AREA_POINTS = 70
COVERAGE_AREA_POINTS = 60
CITY_POINTS = 50
DISTRICT_POINTS = 40
STATE_POINTS = 30

NEARBY_PINCODE_MAX_DISTANCE = 10
NEARBY_PINCODE_BASE = 20
NEARBY_PINCODE_FLOOR = 5

_PINCODE_RE = re.compile(r"\s*(\d+)\s*")

#empty strings count as absent
def is_present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""

#both present and equal ignoring case
def text_equals(candidate: Optional[str], query: Optional[str]) -> bool:
    if not is_present(candidate) or not is_present(query):
        return False

    return candidate.casefold() == query.casefold()

#pincodes compare case-sensitively
def pincode_equals(candidate: Optional[str], query: Optional[str]) -> bool:
    if not is_present(candidate) or not is_present(query):
        return False

    return candidate == query

def parse_pincode(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None

    m = _PINCODE_RE.fullmatch(value)
    if m is None:
        return None

    try:
        return int(m.group(1))
    except ValueError:
        #past the interpreter digit limit
        return None

#5-20 points for pincodes at most 10 apart, 0 otherwise
def nearby_pincode_points(candidate: Optional[str], query: Optional[str]) -> int:
    cand = parse_pincode(candidate)
    want = parse_pincode(query)
    if cand is None or want is None:
        return 0

    distance = abs(cand - want)
    if distance > NEARBY_PINCODE_MAX_DISTANCE:
        return 0

    return max(NEARBY_PINCODE_BASE - distance, NEARBY_PINCODE_FLOOR)

#inclusive on every edge
def within_bounds(bounds: Optional[GeoBounds],
                  latitude: Optional[float],
                  longitude: Optional[float]) -> bool:
    if bounds is None or not bounds.is_complete():
        return False
    if latitude is None or longitude is None:
        return False

    return (bounds.south <= latitude <= bounds.north
            and bounds.west <= longitude <= bounds.east)
