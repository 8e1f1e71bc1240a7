# utils.py
from datetime import date, datetime

import pandas as pd

PLACEHOLDER_LABEL = "Select Date to Count"
# picker range; any date inside it is accepted without validation
EARLIEST_DATE = date(1900, 1, 1)
LATEST_DATE = date(2100, 12, 31)
ONE_DAY = pd.Timedelta(days=1)


def to_local_datetime(value) -> datetime:
    """Coerce a date/datetime/Timestamp to a naive local datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    raise TypeError(f"Expected a date or datetime, got {type(value).__name__}")


def to_midnight(value) -> pd.Timestamp:
    return pd.Timestamp(to_local_datetime(value)).normalize()


def calculate_days(start, today=None) -> int:
    # whole local calendar days, symmetric around today
    if today is None:
        today = datetime.now()
    diff = to_midnight(today) - to_midnight(start)
    return abs(int(diff // ONE_DAY))


def serialize_date(value) -> str:
    return to_local_datetime(value).astimezone().isoformat()


def parse_stored_date(text: str) -> datetime:
    text = (text or "").strip()
    if not text:
        raise ValueError("Empty date string")
    ts = pd.Timestamp(text)
    if pd.isna(ts):
        raise ValueError(f"Not a date: {text!r}")
    return to_local_datetime(ts.to_pydatetime())


def format_date_label(value) -> str:
    if value is None:
        return PLACEHOLDER_LABEL
    # matches JS Date.toDateString(): "Mon Jan 01 2024"
    return to_local_datetime(value).strftime("%a %b %d %Y")
