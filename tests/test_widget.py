from __future__ import annotations

import pytest

from conftest import WEDNESDAY_1030_MS, StubProvider, make_current, make_forecast
from weather.render import PageRenderer
from weather.widget import UNAVAILABLE, WeatherWidget, WidgetContext


def _widget(provider, **overrides):
    renderer = PageRenderer()
    context = WidgetContext(
        provider=provider,
        renderer=renderer,
        now_ms=WEDNESDAY_1030_MS,
        default_city="Paris",
        **overrides,
    )
    return WeatherWidget(context), renderer


def test_show_city_renders_current_conditions(stub_provider):
    widget, renderer = _widget(stub_provider)

    assert widget.show_city("Oslo") is True

    elements = renderer.state()["elements"]
    assert elements["temperature-value"] == -3
    assert elements["description"] == "scattered clouds"
    assert elements["humidity"] == 80
    assert elements["wind-speed"] == 4
    assert elements["location-div"] == "Oslo"
    assert elements["wind-speed-unit"] == "m/s"
    assert renderer.state()["icon"] == {"src": "http://openweathermap.org/img/wn/03d@2x.png", "alt": "scattered clouds"}
    assert renderer.state()["units"] == {"active": "celsius", "inactive": "fahrenheit"}


def test_clock_uses_location_offset(stub_provider):
    widget, renderer = _widget(stub_provider, use_12_hour=True)

    widget.show_city("Oslo")

    # 10:30 UTC at UTC+1
    assert renderer.state()["elements"]["current-date-time"] == "Wednesday 11:30 AM"


def test_forecast_cards_follow_the_location_day(stub_provider):
    widget, renderer = _widget(stub_provider)

    widget.show_city("Oslo")

    days = renderer.state()["days"]
    assert [day["name"] for day in days] == ["Thursday", "Friday", "Saturday", "Sunday", "Monday"]
    assert [day["id"] for day in days][0] == "tomorrow-card"
    assert days[0]["date"] == "1970-01-08"
    assert (days[0]["high"], days[0]["low"]) == (21, 12)
    assert days[4]["date"] == "1970-01-12"


def test_forecast_cards_shift_when_location_is_already_tomorrow():
    # UTC+14 turns Wednesday 10:30 UTC into Thursday 00:30
    provider = StubProvider(
        current={"Kiritimati": make_current("Kiritimati", offset=50400)},
        forecast={"Kiritimati": make_forecast(start_day=8)},
    )
    widget, renderer = _widget(provider)

    widget.show_city("Kiritimati")

    assert renderer.state()["elements"]["current-date-time"] == "Thursday 0:30"
    days = renderer.state()["days"]
    assert days[0]["name"] == "Friday"
    assert days[0]["date"] == "1970-01-09"
    assert days[0]["high"] == 21


def test_missing_forecast_entries_leave_cards_blank():
    provider = StubProvider(current={"Paris": make_current("Paris")}, forecast={"Paris": make_forecast(days=2)})
    widget, renderer = _widget(provider)

    widget.show_city("Paris")

    days = renderer.state()["days"]
    assert days[0]["high"] == 21
    assert days[1]["high"] is None
    assert days[1]["name"] == "Friday"


def test_unknown_city_falls_back_to_default(stub_provider):
    widget, renderer = _widget(stub_provider)

    assert widget.show_city("Atlantis") is True

    assert renderer.state()["elements"]["location-div"] == "Paris"
    assert ("current", "Atlantis", "metric") in stub_provider.calls
    assert ("forecast", "Paris", "metric") in stub_provider.calls


def test_empty_search_shows_default_city(stub_provider):
    widget, renderer = _widget(stub_provider)

    widget.show_city("   ")

    assert stub_provider.calls[0] == ("current", "Paris", "metric")
    assert renderer.state()["elements"]["location-div"] == "Paris"


def test_coordinates_are_passed_through(stub_provider):
    widget, renderer = _widget(stub_provider)

    widget.show_coordinates(59.91, 10.75)

    assert stub_provider.calls[0] == ("current", (59.91, 10.75), "metric")
    assert renderer.state()["elements"]["location-div"] == "Oslo"


def test_everything_unavailable_still_renders_clock_and_days():
    widget, renderer = _widget(StubProvider())

    assert widget.show_city("Atlantis") is False

    state = renderer.state()
    assert state["available"] is False
    assert state["reason"] == UNAVAILABLE
    assert "temperature-value" not in state["elements"]
    assert state["elements"]["current-date-time"]
    assert len(state["days"]) == 5
    assert all(day["high"] is None for day in state["days"])


def test_toggle_units_refetches_current_location(stub_provider):
    widget, renderer = _widget(stub_provider)
    widget.show_city("Oslo")

    widget.toggle_units("imperial")

    assert stub_provider.calls[-2:] == [("current", "Oslo", "imperial"), ("forecast", "Oslo", "imperial")]
    assert renderer.state()["elements"]["wind-speed-unit"] == "mph"
    assert renderer.state()["units"] == {"active": "fahrenheit", "inactive": "celsius"}


def test_toggle_units_before_any_search_uses_default(stub_provider):
    widget, _renderer = _widget(stub_provider)

    widget.toggle_units("bogus")

    assert stub_provider.calls[0] == ("current", "Paris", "metric")


def test_invalid_weekday_table_fails_fast(stub_provider):
    widget, _renderer = _widget(stub_provider, weekdays=("Mon", "Tue"))

    with pytest.raises(ValueError):
        widget.show_city("Oslo")


def test_renderer_rejects_unknown_keys():
    with pytest.raises(KeyError):
        PageRenderer().write("pressure", 1013)


def test_unavailable_notice_clears_once_data_arrives():
    provider = StubProvider()
    widget, renderer = _widget(provider)
    assert widget.show_city("Atlantis") is False

    provider.current["Paris"] = make_current("Paris")
    provider.forecast["Paris"] = make_forecast()

    assert widget.toggle_units("imperial") is True
    state = renderer.state()
    assert state["available"] is True
    assert state["reason"] is None
    assert state["elements"]["location-div"] == "Paris"


def test_stale_conditions_are_not_kept_when_data_disappears(stub_provider):
    widget, renderer = _widget(stub_provider)
    widget.show_city("Oslo")

    stub_provider.current.clear()
    stub_provider.forecast.clear()

    assert widget.toggle_units("imperial") is False
    state = renderer.state()
    assert state["available"] is False
    assert "temperature-value" not in state["elements"]
    assert state["icon"]["src"] is None
    assert all(day["high"] is None for day in state["days"])


def test_renderer_reset_clears_page_state():
    renderer = PageRenderer()
    renderer.write("location", "Oslo")
    renderer.set_icon("http://example.com/a.png", "sun")
    renderer.set_unavailable(UNAVAILABLE)

    renderer.reset()

    assert renderer.state() == {
        "available": True,
        "reason": None,
        "elements": {},
        "icon": {"src": None, "alt": ""},
        "units": {"active": None, "inactive": None},
        "days": [],
    }
