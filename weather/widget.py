"""
The widget itself: fetch conditions and forecast for a place, align the
clock and the forecast day names to that place, and write everything to a
render port. All inputs arrive through WidgetContext, including "now", so
one rendering pass sees a single instant.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
import logging
from clock.aligner import DAYS, calendar_date, format_timestamp, resolve_remote_wall_clock, rotate_weekdays
from weather.geo import resolve_timezone_offset
from weather.helpers import normalize_units, round_value, unit_labels
from weather.providers import WeatherProvider
from weather.render import RenderPort

logger = logging.getLogger(__name__)

UNAVAILABLE = "Weather data is currently unavailable."


@dataclass
class WidgetContext:
    provider: WeatherProvider
    renderer: RenderPort
    now_ms: int
    weekdays: tuple = DAYS
    use_12_hour: bool = False
    units: str = "metric"
    default_city: str = "Paris"
    forecast_days: int = 5
    google_api_key: str = ""
    attempts: int = 3
    timeout: int = 5


class WeatherWidget:
    def __init__(self, context: WidgetContext):
        self.context = context
        self.context.units = normalize_units(context.units)
        self.location = None
        self.current = None

    @property
    def renderer(self) -> RenderPort:
        return self.context.renderer

    def show_coordinates(self, lat: float, lon: float) -> bool:
        return self._show({"lat": lat, "lon": lon})

    def show_city(self, city: str) -> bool:
        city = (city or "").strip()
        if not city:
            logger.info(f"Empty city search, showing {self.context.default_city}")
            return self._show({"city": self.context.default_city})
        return self._show({"city": city})

    def toggle_units(self, units: str) -> bool:
        self.context.units = normalize_units(units, self.context.units)
        return self._show(self.location or {"city": self.context.default_city})

    def _show(self, location: dict) -> bool:
        provider = self.context.provider
        units = self.context.units
        default = {"city": self.context.default_city}
        self.renderer.reset()

        current = provider.fetch_current(units=units, **location)
        if current is None and location != default:
            logger.info(f"No weather for {location}, falling back to {self.context.default_city}")
            location = default
            current = provider.fetch_current(units=units, **location)

        forecast = None
        if current is not None:
            self.location = location
            self.render_current(current)
            forecast = provider.fetch_forecast(units=units, days=self.context.forecast_days + 1, **location)
        else:
            self.renderer.set_unavailable(UNAVAILABLE)
        self.current = current

        self.render_units()
        offset = resolve_timezone_offset(current, self.context.now_ms, self.context.google_api_key,
                                         attempts=self.context.attempts, timeout=self.context.timeout)
        self.render_clock(offset)
        self.render_days(offset, forecast)
        return current is not None

    def render_current(self, current: dict):
        self.renderer.write("temperatureValue", round_value(current["temp"]))
        self.renderer.write("description", current["description"])
        self.renderer.write("humidity", current["humidity"])
        self.renderer.write("windSpeed", round_value(current["wind_speed"]))
        self.renderer.write("location", current["location"])
        self.renderer.set_icon(current.get("icon_url"), current["description"])

    def render_units(self):
        labels = unit_labels(self.context.units)
        self.renderer.write("windUnit", labels["wind"])
        self.renderer.set_unit(labels["active"], labels["inactive"])

    def clock_instant(self, offset):
        # Without an offset the server's local clock is shown
        if offset is None:
            return datetime.fromtimestamp(self.context.now_ms / 1000)
        return resolve_remote_wall_clock(self.context.now_ms, offset)

    def render_clock(self, offset):
        instant = self.clock_instant(offset)
        self.renderer.write("dateTime", format_timestamp(instant, self.context.weekdays, self.context.use_12_hour))

    def render_days(self, offset, forecast):
        """
        Name the cards after the days following the location's today and
        fill each one with the forecast entry for that calendar date.
        """
        instant = self.clock_instant(offset)
        names = rotate_weekdays(instant, self.context.weekdays, self.context.forecast_days)
        today = calendar_date(instant)
        by_date = {entry.get("date"): entry for entry in (forecast or [])}

        cards = []
        for i, name in enumerate(names, start=1):
            date = (today + timedelta(days=i)).isoformat()
            entry = by_date.get(date, {})
            cards.append({
                "name": name,
                "date": date,
                "high": round_value(entry.get("high")),
                "low": round_value(entry.get("low")),
                "description": entry.get("description"),
                "icon_url": entry.get("icon_url"),
            })
        self.renderer.write_days(cards)
