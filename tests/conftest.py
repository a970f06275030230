from __future__ import annotations

import pytest

from weather.providers import WeatherProvider

# Wednesday 1970-01-07 10:30 UTC
WEDNESDAY_1030_MS = 6 * 86_400_000 + 10 * 3_600_000 + 30 * 60_000


def make_current(name: str, offset: int | None = 3600, **overrides) -> dict:
    current = {
        "temp": 18.6,
        "description": "scattered clouds",
        "humidity": 64,
        "wind_speed": 4.4,
        "location": name,
        "icon": "03d",
        "icon_url": "http://openweathermap.org/img/wn/03d@2x.png",
        "utc_offset_seconds": offset,
        "timezone": None,
        "lat": 48.85,
        "lon": 2.35,
    }
    current.update(overrides)
    return current


def make_forecast(start_day: int = 7, days: int = 6) -> list[dict]:
    return [
        {
            "date": f"1970-01-{start_day + i:02d}",
            "high": 20.4 + i,
            "low": 10.6 + i,
            "description": "light rain",
            "icon": "10d",
            "icon_url": "http://openweathermap.org/img/wn/10d@2x.png",
        }
        for i in range(days)
    ]


class StubProvider(WeatherProvider):
    """Answers from dicts keyed by city name or (lat, lon); records every call."""

    name = "stub"

    def __init__(self, current: dict | None = None, forecast: dict | None = None) -> None:
        super().__init__()
        self.current = current or {}
        self.forecast = forecast or {}
        self.calls: list[tuple] = []

    @staticmethod
    def _key(lat, lon, city):
        return city if city else (lat, lon)

    def fetch_current(self, lat=None, lon=None, city=None, units="metric"):
        self.calls.append(("current", self._key(lat, lon, city), units))
        return self.current.get(self._key(lat, lon, city))

    def fetch_forecast(self, lat=None, lon=None, city=None, units="metric", days=6):
        self.calls.append(("forecast", self._key(lat, lon, city), units))
        return self.forecast.get(self._key(lat, lon, city))


@pytest.fixture
def stub_provider() -> StubProvider:
    return StubProvider(
        current={
            "Paris": make_current("Paris"),
            "Oslo": make_current("Oslo", temp=-3.2, humidity=80),
            (59.91, 10.75): make_current("Oslo"),
        },
        forecast={
            "Paris": make_forecast(),
            "Oslo": make_forecast(),
            (59.91, 10.75): make_forecast(),
        },
    )
