"""
Clock alignment for the widget: formatting an instant for display,
naming the forecast days that follow it, and shifting "now" to the
wall clock of a remote location.

Day numbering is 0=Sunday throughout. An instant is either an int of epoch
milliseconds (fields read in UTC) or a datetime (its own fields are used).
"""
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta
from zoneinfo import ZoneInfo
import time

DAYS = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


# UTC-14 .. UTC+14
MAX_OFFSET_SECONDS = 50_400


@dataclass(frozen=True)
class TimezoneOffset:
    raw_offset_seconds: int
    dst_offset_seconds: int = 0

    def __post_init__(self):
        for name in ("raw_offset_seconds", "dst_offset_seconds"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}.")
            if abs(value) > MAX_OFFSET_SECONDS:
                raise ValueError(f"{name} {value} is outside +/-{MAX_OFFSET_SECONDS} seconds.")


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def validate_weekday_table(weekdays):
    if weekdays is None or isinstance(weekdays, str):
        raise ValueError("Weekday table must be a sequence of 7 day names.")
    if len(weekdays) != 7:
        raise ValueError(f"Weekday table must have exactly 7 entries, got {len(weekdays)}.")


def _fields(instant):
    if isinstance(instant, datetime):
        return instant
    if isinstance(instant, bool) or not isinstance(instant, int):
        raise ValueError(f"Unsupported instant: {instant!r}")
    try:
        return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(milliseconds=instant)
    except OverflowError:
        raise ValueError(f"Instant out of range: {instant}") from None


def day_of_week(instant) -> int:
    # isoweekday: Monday=1 .. Sunday=7
    return _fields(instant).isoweekday() % 7


def calendar_date(instant):
    return _fields(instant).date()


def format_timestamp(instant, weekdays=DAYS, use_12_hour: bool = False) -> str:
    """
    Format an instant as "<Weekday> <hour>:<minute>" with an optional
    " AM"/" PM" suffix.

    Parameters:
        instant: epoch milliseconds (read in UTC) or a datetime (read as-is)
        weekdays: 7 day names, index 0 = Sunday
        use_12_hour: 12-hour clock with AM/PM instead of 24-hour
    """
    validate_weekday_table(weekdays)
    dt = _fields(instant)

    day = weekdays[dt.isoweekday() % 7]
    hour = dt.hour
    minute = f"{dt.minute:02d}"

    if not use_12_hour:
        return f"{day} {hour}:{minute}"

    marker = "AM" if hour < 12 else "PM"
    hour_12 = hour % 12 or 12
    return f"{day} {hour_12}:{minute} {marker}"


def rotate_weekdays(instant, weekdays=DAYS, count: int = 5) -> list:
    """
    Return the `count` day names that follow the instant's own day, in
    calendar order. Position 0 is always the following day; count=7
    names every day once and ends on the instant's own weekday, a week on.
    """
    validate_weekday_table(weekdays)
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValueError(f"Day count must be an integer, got {count!r}.")
    if count < 0:
        raise ValueError(f"Day count must not be negative, got {count}.")

    today = day_of_week(instant)
    return [weekdays[(today + i) % 7] for i in range(1, count + 1)]


def effective_offset_seconds(offset: TimezoneOffset) -> int:
    # A non-zero dst offset is taken to mean DST is in effect. A zone whose
    # raw offset is zero while DST is active cannot be told apart here.
    if offset.dst_offset_seconds != 0:
        return offset.raw_offset_seconds + offset.dst_offset_seconds
    return offset.raw_offset_seconds


def resolve_remote_wall_clock(reference_ms: int, offset: TimezoneOffset) -> int:
    """
    Shift a UTC epoch (ms) by a location's offset. The result must be
    formatted with UTC fields, which format_timestamp does for ints.
    """
    return reference_ms + effective_offset_seconds(offset) * 1000


def timezone_offset_for_zone(timezone_name: str, reference_ms: int = None) -> TimezoneOffset:
    """
    Split the current offset of an IANA zone (e.g. "Europe/Athens") into
    its standard and DST parts at the given instant.
    """
    tz = ZoneInfo(timezone_name)
    if reference_ms is None:
        reference_ms = now_ms()
    dt = datetime.fromtimestamp(reference_ms / 1000, tz)

    current_offset = dt.utcoffset() or timedelta(0)
    dst_offset = dt.dst() or timedelta(0)
    standard_offset = current_offset - dst_offset

    return TimezoneOffset(
        raw_offset_seconds=int(standard_offset.total_seconds()),
        dst_offset_seconds=int(dst_offset.total_seconds()),
    )
