from datetime import date, datetime, timezone


def _tz(tz_name: str | None):
    """Resolve an IANA name to tzinfo. None/'local' -> system local tz."""
    if tz_name and tz_name != "local":
        from zoneinfo import ZoneInfo
        return ZoneInfo(tz_name)
    return datetime.now().astimezone().tzinfo


def to_local_datetime(dt: datetime, tz_name: str | None = None) -> datetime:
    """Convert an aware datetime (assume UTC if naive) to local or given tz.

    - If `tz_name` is 'local' or None: use system local timezone.
    - If `tz_name` is IANA tz name (e.g., 'America/New_York'): use that.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(_tz(tz_name))


def to_utc(dt: datetime, tz_name: str | None = None) -> datetime:
    """Normalize a hike start time to UTC.

    A naive value is what a 'datetime-local' form field sends, so it is read
    as wall-clock time in `tz_name`.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_tz(tz_name))
    return dt.astimezone(timezone.utc)


def today_local(tz_name: str | None = None) -> date:
    return datetime.now(_tz(tz_name)).date()


def day_label(dt: datetime, tz_name: str | None = None) -> str:
    """Heading used to group hikes by day, e.g. 'Saturday, March 14'."""
    local = to_local_datetime(dt, tz_name)
    return f"{local:%A}, {local:%B} {local.day}"


def format_event_time(dt: datetime, tz_name: str | None = None) -> str:
    """Short form for a hike card, e.g. 'Sat, Mar 14, 9:00 AM'."""
    local = to_local_datetime(dt, tz_name)
    hour = local.hour % 12 or 12
    return f"{local:%a}, {local:%b} {local.day}, {hour}:{local.minute:02d} {local:%p}"
