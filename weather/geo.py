import logging
from zoneinfo import ZoneInfoNotFoundError
from config import USER_AGENT
import weather.helpers
from clock.aligner import TimezoneOffset, timezone_offset_for_zone

logger = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org"
GOOGLE_TIMEZONE_URL = "https://maps.googleapis.com/maps/api/timezone/json"
HEADERS = {"User-Agent": USER_AGENT}


def get_nominatim_reverse(lat: float, lon: float, attempts: int = 3, timeout: int = 5):
    params = {"lat": lat, "lon": lon, "format": "json", "zoom": 10, "addressdetails": 1}
    return weather.helpers.get_json(f"{NOMINATIM_URL}/reverse", params=params, headers=HEADERS,
                                    attempts=attempts, timeout=timeout, label="Nominatim reverse")


def search_nominatim(city: str, country_code: str = None, attempts: int = 3, timeout: int = 5):
    q = f"{city},{country_code}" if country_code else city
    params = {"q": q, "format": "json", "limit": 1, "addressdetails": 1}
    data_list = weather.helpers.get_json(f"{NOMINATIM_URL}/search", params=params, headers=HEADERS,
                                         attempts=attempts, timeout=timeout, label="Nominatim search")
    if data_list:
        return data_list[0]
    # No results is considered a valid response; return None
    return None


def city_from_address(data, default: str = "Unknown City") -> str:
    address = (data or {}).get("address", {})
    return address.get("city", address.get("town", address.get("village", default)))


def fetch_google_timezone(lat: float, lon: float, timestamp_s: int, api_key: str, attempts: int = 3, timeout: int = 5):
    """
    Look up a coordinate's offsets with the Google Time Zone API.
    Returns a TimezoneOffset built from rawOffset/dstOffset (seconds), or None.
    """
    if not api_key:
        return None

    params = {"location": f"{lat},{lon}", "timestamp": timestamp_s, "key": api_key}
    data = weather.helpers.get_json(GOOGLE_TIMEZONE_URL, params=params,
                                    attempts=attempts, timeout=timeout, label="Google Time Zone")
    if not data:
        return None
    if data.get("status") != "OK":
        logger.warning(f"Google Time Zone lookup returned status {data.get('status')}: {data.get('errorMessage', '')}")
        return None

    try:
        return TimezoneOffset(int(data["rawOffset"]), int(data["dstOffset"]))
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Malformed Google Time Zone response: {e}")
        return None


def resolve_timezone_offset(current: dict, reference_ms: int, api_key: str = "", attempts: int = 3, timeout: int = 5):
    """
    Pick the offset used for a location's clock:
    the Google lookup when a key is configured, then the provider's IANA
    zone name, then the provider's plain UTC offset, otherwise None.
    """
    if not current:
        return None

    lat, lon = current.get("lat"), current.get("lon")
    if api_key and lat is not None and lon is not None:
        offset = fetch_google_timezone(lat, lon, reference_ms // 1000, api_key, attempts=attempts, timeout=timeout)
        if offset is not None:
            return offset
        logger.info("Falling back to the provider's timezone information")

    timezone_name = current.get("timezone")
    if timezone_name:
        try:
            return timezone_offset_for_zone(timezone_name, reference_ms)
        except (ZoneInfoNotFoundError, ValueError) as e:
            logger.warning(f"Unknown timezone '{timezone_name}': {e}")

    utc_offset_seconds = current.get("utc_offset_seconds")
    if utc_offset_seconds is None:
        return None
    try:
        return TimezoneOffset(int(utc_offset_seconds), 0)
    except (TypeError, ValueError) as e:
        logger.warning(f"Ignoring provider UTC offset: {e}")
        return None
