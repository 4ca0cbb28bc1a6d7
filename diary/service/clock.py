from datetime import datetime, time, timezone


def utc_now():
    return datetime.now(timezone.utc)


def utc_now_iso():
    """Current UTC time as an ISO-8601 string (lexically sortable)."""
    return utc_now().isoformat(timespec="microseconds")


def utc_today():
    return utc_now().date()


def utc_day_start_iso(day):
    return datetime.combine(day, time.min, tzinfo=timezone.utc).isoformat(timespec="microseconds")
