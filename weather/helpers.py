import logging
import requests
import json
import time

logger = logging.getLogger(__name__)

UNIT_SYSTEMS = ("metric", "imperial")


def get_json(url: str, params: dict = None, headers: dict = None, attempts: int = 3, timeout: int = 5, label: str = "HTTP"):
    for attempt in range(attempts):
        try:
            resp = requests.get(url, params=params, headers=headers, timeout=timeout)
            resp.raise_for_status()
            return resp.json()
        except (requests.exceptions.RequestException, json.JSONDecodeError) as e:
            logger.warning(f"{label} call failed (attempt {attempt + 1}/{attempts}): {e}")
            if attempt == attempts - 1:
                return None
            time.sleep(0.5)


def get_weather_condition(weather_code, is_day):
    """
    Map a WMO weather code (Open-Meteo) onto an OpenWeatherMap icon code
    and a short description, so every provider renders the same icon set.
    """
    suffix = "d" if is_day else "n"

    if weather_code == 0: # Clear sky
        icon, text = "01", "clear sky" if is_day else "clear night"
    elif weather_code == 1: # Mainly clear
        icon, text = "02", "mainly clear"
    elif weather_code == 2: # Partly cloudy
        icon, text = "03", "partly cloudy"
    elif weather_code == 3: # Overcast
        icon, text = "04", "overcast clouds"
    elif weather_code in [45, 48]: # Fog and depositing rime fog
        icon, text = "50", "fog"
    elif weather_code in [51, 53, 55]: # Drizzle
        icon, text = "09", "drizzle"
    elif weather_code in [56, 57]: # Freezing Drizzle
        icon, text = "09", "freezing drizzle"
    elif weather_code in [61, 63, 65]: # Rain
        icon, text = "10", "rain"
    elif weather_code in [66, 67]: # Freezing Rain
        icon, text = "13", "freezing rain"
    elif weather_code in [71, 73, 75, 77]: # Snow fall, Snow grains
        icon, text = "13", "snow"
    elif weather_code in [80, 81, 82]: # Rain showers
        icon, text = "09", "rain showers"
    elif weather_code in [85, 86]: # Snow showers
        icon, text = "13", "snow showers"
    elif weather_code in [95, 96, 99]: # Thunderstorm, with or without hail
        icon, text = "11", "thunderstorm"
    else:
        icon, text = "01", "unknown"

    return icon + suffix, text


def icon_url(icon):
    if not icon:
        return None
    return f"http://openweathermap.org/img/wn/{icon}@2x.png"


def c_to_f(c):
    return c * 9.0 / 5.0 + 32.0


def convert_temperature(temp, metric):
    # metric: truthy -> Celsius, falsy -> Fahrenheit
    if not metric:
        return c_to_f(temp)
    else:
        return temp


def kph_to_mps(kph):
    return kph / 3.6


def mps_to_mph(mps):
    return mps * 2.2369362920544


def convert_speed(speed, metric):
    # speed in m/s
    if not metric:
        return mps_to_mph(speed)
    else:
        return speed


def normalize_units(value, default: str = "metric") -> str:
    value = (value or "").strip().lower()
    if value in UNIT_SYSTEMS:
        return value
    return default if default in UNIT_SYSTEMS else "metric"


def unit_labels(units: str) -> dict:
    metric = units == "metric"
    return {
        "temp": "C" if metric else "F",
        "wind": "m/s" if metric else "mph",
        "active": "celsius" if metric else "fahrenheit",
        "inactive": "fahrenheit" if metric else "celsius",
    }


def round_value(value):
    if value is None:
        return None
    return round(value)
