from datetime import date, datetime
import pytz

from app.config import settings

LOCAL_TZ = pytz.timezone(settings.TIMEZONE)


def get_local_now():
    """Get current time in the business timezone"""
    return datetime.now(LOCAL_TZ)


def get_local_today() -> date:
    return get_local_now().date()


def to_local_tz(dt):
    """Convert datetime to the business timezone"""
    if dt.tzinfo is None:
        # Naive datetime, assume UTC
        dt = pytz.utc.localize(dt)
    return dt.astimezone(LOCAL_TZ)


def to_local_date(value) -> date:
    """Calendar date of a stored date or timestamp, in local time"""
    if isinstance(value, datetime):
        return to_local_tz(value).date()
    return value


def local_midnight(day: date) -> datetime:
    return LOCAL_TZ.localize(datetime.combine(day, datetime.min.time()))
