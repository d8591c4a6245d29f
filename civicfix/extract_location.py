import math
from typing import Optional, Dict, Any

from .match_record import LocationQuery

LOCATION_ALIASES = {
    # coordinates
    'lat': 'latitude',
    'lng': 'longitude',
    'lon': 'longitude',
    'long': 'longitude',

    # pincode
    'pin': 'pincode',
    'pin_code': 'pincode',
    'pinCode': 'pincode',
    'postal_code': 'pincode',
    'postcode': 'pincode',

    # ward / area
    'ward_no': 'ward',
    'ward_number': 'ward',
    'locality': 'area',
    'neighbourhood': 'area',

    # administrative
    'town': 'city',
    'district_name': 'district',
}

COORDINATE_FIELDS = {'latitude', 'longitude'}
TEXT_FIELDS = {'city', 'state', 'district', 'pincode', 'ward', 'area'}

def _parse_coordinate(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        coord = float(value)
    except (TypeError, ValueError, OverflowError):
        return None

    return coord if math.isfinite(coord) else None

def _clean_text(value: Any) -> Optional[str]:
    #numeric pincodes arrive as JSON numbers
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, int):
            value = str(value)
        elif isinstance(value, float):
            value = str(int(value)) if value.is_integer() else str(value)
    except (ValueError, OverflowError):
        #digit limit on int -> str, or inf
        return None
    if not isinstance(value, str):
        return None

    value = value.strip()
    return value or None

def extract_location(raw: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}

    if not raw:
        return result

    for key, value in raw.items():
        if value is None:
            continue

        internal_name = LOCATION_ALIASES.get(key) or key.lower().replace(' ', '_')

        #canonical names win over aliases
        if internal_name in result and key != internal_name:
            continue

        if internal_name in COORDINATE_FIELDS:
            coord = _parse_coordinate(value)
            if coord is not None:
                result[internal_name] = coord

        elif internal_name in TEXT_FIELDS:
            text = _clean_text(value)
            if text is not None:
                result[internal_name] = text

    return result

def to_location_query(raw: Optional[Dict[str, Any]]) -> LocationQuery:
    return LocationQuery(**extract_location(raw))
