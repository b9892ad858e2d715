# backend/utils/clock.py
from datetime import datetime, timezone, date, time


# Naive UTC timestamps, the form every DateTime column in the app stores
def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)
