from config import app
from config import WEATHER_PROVIDER, API_KEYS, GOOGLE_API_KEY, DEFAULT_CITY, DEFAULT_UNITS
from config import USE_12_HOUR, FORECAST_CARDS, HTTP_ATTEMPTS, HTTP_TIMEOUT
import weather.geo
import weather.helpers
import weather.providers
from clock.aligner import DAYS, TimezoneOffset, effective_offset_seconds, format_timestamp
from clock.aligner import now_ms, resolve_remote_wall_clock, rotate_weekdays, timezone_offset_for_zone
from weather.render import PageRenderer
from weather.widget import WeatherWidget, WidgetContext
from flask import jsonify, render_template, request
from zoneinfo import ZoneInfoNotFoundError


def parse_coordinates(args):
    lat = args.get("lat")
    lon = args.get("lon")
    if lat in (None, "") or lon in (None, ""):
        return None
    lat, lon = float(lat), float(lon)
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        raise ValueError("Coordinates out of range.")
    return lat, lon


def build_widget(args):
    provider = weather.providers.get_provider(args.get("provider") or WEATHER_PROVIDER, API_KEYS,
                                              attempts=HTTP_ATTEMPTS, timeout=HTTP_TIMEOUT)
    renderer = PageRenderer()
    context = WidgetContext(
        provider=provider,
        renderer=renderer,
        now_ms=now_ms(),
        use_12_hour=USE_12_HOUR,
        units=weather.helpers.normalize_units(args.get("units"), DEFAULT_UNITS),
        default_city=DEFAULT_CITY,
        forecast_days=FORECAST_CARDS,
        google_api_key=GOOGLE_API_KEY,
        attempts=HTTP_ATTEMPTS,
        timeout=HTTP_TIMEOUT,
    )
    return WeatherWidget(context), renderer


def run_widget(args):
    coordinates = parse_coordinates(args)
    widget, renderer = build_widget(args)
    if coordinates is not None:
        widget.show_coordinates(*coordinates)
    else:
        widget.show_city(args.get("city"))
    return widget, renderer


@app.route("/", methods=["GET"])
def index():
    try:
        widget, renderer = run_widget(request.args)
    except ValueError as e:
        app.logger.info(f"Bad widget request: {e}")
        return f"Bad request: {e}", 400

    return render_template(
        "widget.html",
        page=renderer.state(),
        ids=renderer.element_ids,
        units=widget.context.units,
        provider=widget.context.provider.name,
        labels=weather.helpers.unit_labels(widget.context.units),
    )


@app.route("/api/weather", methods=["GET"])
def api_weather():
    try:
        widget, renderer = run_widget(request.args)
    except ValueError as e:
        app.logger.info(f"Bad weather request: {e}")
        return jsonify({"error": str(e)}), 400

    state = renderer.state()
    state["provider"] = widget.context.provider.name
    state["unit_system"] = widget.context.units
    if not state["available"]:
        app.logger.warning(f"Weather unavailable for {dict(request.args)}")
        return jsonify(state), 503
    return jsonify(state)


@app.route("/api/clock", methods=["GET"])
def api_clock():
    """
      - raw=<seconds>&dst=<seconds>   explicit offsets
      - tz=Europe/Athens              IANA zone name
      - lat=..&lon=..                 Google Time Zone lookup (needs GOOGLE_API_KEY)
    """
    reference = now_ms()
    use_12_hour = request.args.get("h12", "1" if USE_12_HOUR else "0") == "1"

    try:
        count = int(request.args.get("days", FORECAST_CARDS))
        if request.args.get("raw") is not None:
            offset = TimezoneOffset(int(request.args["raw"]), int(request.args.get("dst", "0")))
        elif request.args.get("tz"):
            offset = timezone_offset_for_zone(request.args["tz"], reference)
        else:
            coordinates = parse_coordinates(request.args)
            if coordinates is None:
                return jsonify({"error": "Give raw/dst, tz or lat/lon."}), 400
            offset = weather.geo.fetch_google_timezone(*coordinates, reference // 1000, GOOGLE_API_KEY,
                                                       attempts=HTTP_ATTEMPTS, timeout=HTTP_TIMEOUT)
            if offset is None:
                return jsonify({"error": "Timezone data is unavailable."}), 503
        instant = resolve_remote_wall_clock(reference, offset)
        days = rotate_weekdays(instant, DAYS, count)
        text = format_timestamp(instant, DAYS, use_12_hour)
    except (ValueError, ZoneInfoNotFoundError) as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({
        "offset": {"raw": offset.raw_offset_seconds, "dst": offset.dst_offset_seconds},
        "effective_offset_seconds": effective_offset_seconds(offset),
        "instant": instant,
        "text": text,
        "days": days,
    })
