"""
Weather providers. Each one answers the same two questions, "what is it
like now" and "what will the next days be like", for either a coordinate
pair or a city name, and normalizes the answer so the widget never needs to
know which API it talked to.

Current conditions:
    {"temp", "description", "humidity", "wind_speed", "location", "icon",
     "icon_url", "utc_offset_seconds", "timezone", "lat", "lon"}
Forecast (index 0 = the location's today):
    [{"date", "high", "low", "description", "icon", "icon_url"}, ...]

Temperatures follow the requested units (C for metric, F for imperial),
wind speed is m/s for metric and mph for imperial. Upstream failures are
logged and reported as None.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone, timedelta
import logging
import weather.helpers
import weather.geo

logger = logging.getLogger(__name__)


class WeatherProvider(ABC):
    name = None

    def __init__(self, api_key: str = "", attempts: int = 3, timeout: int = 5):
        self.api_key = api_key
        self.attempts = attempts
        self.timeout = timeout

    @staticmethod
    def check_location(lat=None, lon=None, city=None):
        if city:
            return
        if lat is None or lon is None:
            raise ValueError("Either lat/lon or a city name is required.")

    def get_json(self, url, params):
        return weather.helpers.get_json(url, params=params, attempts=self.attempts,
                                        timeout=self.timeout, label=self.name)

    def parse(self, parser, data):
        if data is None:
            return None
        try:
            return parser(data)
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Malformed {self.name} response: {e!r}")
            return None

    @abstractmethod
    def fetch_current(self, lat=None, lon=None, city=None, units="metric"):
        ...

    @abstractmethod
    def fetch_forecast(self, lat=None, lon=None, city=None, units="metric", days=6):
        ...


class OpenWeatherMapProvider(WeatherProvider):
    name = "openweathermap"
    base_url = "https://api.openweathermap.org/data/2.5"

    def _params(self, lat, lon, city, units):
        params = {"appid": self.api_key, "units": units}
        if city:
            params["q"] = city
        else:
            params["lat"] = lat
            params["lon"] = lon
        return params

    def fetch_current(self, lat=None, lon=None, city=None, units="metric"):
        self.check_location(lat, lon, city)
        data = self.get_json(f"{self.base_url}/weather", self._params(lat, lon, city, units))
        return self.parse(self._parse_current, data)

    @staticmethod
    def _parse_current(data):
        condition = data["weather"][0]
        return {
            "temp": data["main"]["temp"],
            "description": condition["description"],
            "humidity": data["main"]["humidity"],
            "wind_speed": data["wind"]["speed"],
            "location": data["name"],
            "icon": condition["icon"],
            "icon_url": weather.helpers.icon_url(condition["icon"]),
            "utc_offset_seconds": data.get("timezone"),
            "timezone": None,
            "lat": data.get("coord", {}).get("lat"),
            "lon": data.get("coord", {}).get("lon"),
        }

    def fetch_forecast(self, lat=None, lon=None, city=None, units="metric", days=6):
        self.check_location(lat, lon, city)
        data = self.get_json(f"{self.base_url}/forecast", self._params(lat, lon, city, units))
        forecast = self.parse(self._parse_forecast, data)
        return forecast[:days] if forecast is not None else None

    @staticmethod
    def _parse_forecast(data):
        # 3-hourly entries, grouped by the location's local date
        shift = timedelta(seconds=data.get("city", {}).get("timezone", 0))
        by_date = {}
        for entry in data["list"]:
            local = datetime.fromtimestamp(entry["dt"], timezone.utc) + shift
            by_date.setdefault(local.date().isoformat(), []).append((local.hour, entry))

        forecast = []
        for date, entries in by_date.items():
            highs = [e["main"]["temp_max"] for _, e in entries]
            lows = [e["main"]["temp_min"] for _, e in entries]
            _, midday = min(entries, key=lambda item: abs(item[0] - 12))
            condition = midday["weather"][0]
            forecast.append({
                "date": date,
                "high": max(highs),
                "low": min(lows),
                "description": condition["description"],
                "icon": condition["icon"],
                "icon_url": weather.helpers.icon_url(condition["icon"]),
            })
        return forecast


class WeatherApiProvider(WeatherProvider):
    name = "weatherapi"
    base_url = "http://api.weatherapi.com/v1"

    def _fetch(self, lat, lon, city, days):
        self.check_location(lat, lon, city)
        params = {
            "key": self.api_key,
            "q": city if city else f"{lat},{lon}",
            "days": days,
            "aqi": "no",
            "alerts": "no",
        }
        return self.get_json(f"{self.base_url}/forecast.json", params)

    def fetch_current(self, lat=None, lon=None, city=None, units="metric"):
        data = self._fetch(lat, lon, city, 1)
        return self.parse(lambda d: self._parse_current(d, units == "metric"), data)

    @staticmethod
    def _parse_current(data, metric):
        current = data["current"]
        location = data["location"]
        icon = current["condition"]["icon"]
        return {
            "temp": current["temp_c"] if metric else current["temp_f"],
            "description": current["condition"]["text"],
            "humidity": current["humidity"],
            "wind_speed": weather.helpers.kph_to_mps(current["wind_kph"]) if metric else current["wind_mph"],
            "location": location["name"],
            "icon": icon,
            "icon_url": f"https:{icon}" if icon.startswith("//") else icon,
            "utc_offset_seconds": None,
            "timezone": location.get("tz_id"),
            "lat": location.get("lat"),
            "lon": location.get("lon"),
        }

    def fetch_forecast(self, lat=None, lon=None, city=None, units="metric", days=6):
        data = self._fetch(lat, lon, city, days)
        return self.parse(lambda d: self._parse_forecast(d, units == "metric"), data)

    @staticmethod
    def _parse_forecast(data, metric):
        forecast = []
        for forecast_day in data["forecast"]["forecastday"]:
            day = forecast_day["day"]
            icon = day["condition"]["icon"]
            forecast.append({
                "date": forecast_day["date"],
                "high": day["maxtemp_c"] if metric else day["maxtemp_f"],
                "low": day["mintemp_c"] if metric else day["mintemp_f"],
                "description": day["condition"]["text"],
                "icon": icon,
                "icon_url": f"https:{icon}" if icon.startswith("//") else icon,
            })
        return forecast


class OpenMeteoProvider(WeatherProvider):
    """Keyless provider. City names are resolved through Nominatim."""
    name = "openmeteo"
    base_url = "https://api.open-meteo.com/v1/forecast"

    def __init__(self, api_key: str = "", attempts: int = 3, timeout: int = 5):
        super().__init__(api_key, attempts=attempts, timeout=timeout)
        # resolved places, shared by the current and forecast calls
        self.places = {}

    def _locate(self, lat, lon, city):
        self.check_location(lat, lon, city)
        key = (city,) if city else (lat, lon)
        if key not in self.places:
            place = self._lookup(lat, lon, city)
            if place is None:
                return None
            self.places[key] = place
        return self.places[key]

    def _lookup(self, lat, lon, city):
        if city:
            place = weather.geo.search_nominatim(city, attempts=self.attempts, timeout=self.timeout)
            if place is None:
                return None
            return float(place["lat"]), float(place["lon"]), weather.geo.city_from_address(place, city)

        place = weather.geo.get_nominatim_reverse(lat, lon, attempts=self.attempts, timeout=self.timeout)
        return lat, lon, weather.geo.city_from_address(place, f"{lat:.2f}, {lon:.2f}")

    def _fetch(self, lat, lon, days):
        params = {
            "latitude": lat,
            "longitude": lon,
            "current": "temperature_2m,relative_humidity_2m,wind_speed_10m,weather_code,is_day",
            "daily": "temperature_2m_max,temperature_2m_min,weather_code",
            "wind_speed_unit": "ms",
            "forecast_days": days,
            "timezone": "auto",
        }
        return self.get_json(self.base_url, params)

    def fetch_current(self, lat=None, lon=None, city=None, units="metric"):
        place = self._locate(lat, lon, city)
        if place is None:
            return None
        lat, lon, name = place
        data = self._fetch(lat, lon, 1)
        return self.parse(lambda d: self._parse_current(d, units == "metric", name, lat, lon), data)

    @staticmethod
    def _parse_current(data, metric, name, lat, lon):
        current = data["current"]
        icon, text = weather.helpers.get_weather_condition(current["weather_code"], bool(current.get("is_day", 1)))
        return {
            "temp": weather.helpers.convert_temperature(current["temperature_2m"], metric),
            "description": text,
            "humidity": current["relative_humidity_2m"],
            "wind_speed": weather.helpers.convert_speed(current["wind_speed_10m"], metric),
            "location": name,
            "icon": icon,
            "icon_url": weather.helpers.icon_url(icon),
            "utc_offset_seconds": data.get("utc_offset_seconds"),
            "timezone": data.get("timezone"),
            "lat": lat,
            "lon": lon,
        }

    def fetch_forecast(self, lat=None, lon=None, city=None, units="metric", days=6):
        place = self._locate(lat, lon, city)
        if place is None:
            return None
        data = self._fetch(place[0], place[1], days)
        return self.parse(lambda d: self._parse_forecast(d, units == "metric"), data)

    @staticmethod
    def _parse_forecast(data, metric):
        daily = data["daily"]
        forecast = []
        for i, date in enumerate(daily["time"]):
            icon, text = weather.helpers.get_weather_condition(daily["weather_code"][i], True)
            forecast.append({
                "date": date,
                "high": weather.helpers.convert_temperature(daily["temperature_2m_max"][i], metric),
                "low": weather.helpers.convert_temperature(daily["temperature_2m_min"][i], metric),
                "description": text,
                "icon": icon,
                "icon_url": weather.helpers.icon_url(icon),
            })
        return forecast


PROVIDERS = {
    provider.name: provider
    for provider in (OpenWeatherMapProvider, WeatherApiProvider, OpenMeteoProvider)
}


def get_provider(name: str, api_keys: dict = None, attempts: int = 3, timeout: int = 5) -> WeatherProvider:
    key = (name or "").strip().lower()
    if key not in PROVIDERS:
        raise ValueError(f"Unknown weather provider '{name}'. Choose one of: {', '.join(PROVIDERS)}")
    return PROVIDERS[key]((api_keys or {}).get(key, ""), attempts=attempts, timeout=timeout)
