"""Date manipulation utilities"""

from datetime import date, timedelta
from typing import List, Union


def parse_iso_date(value: Union[str, date]) -> date:
    """Parse "2024-01-31" or a timestamp like "2024-01-31T00:00:00Z" to a date"""
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.split("T")[0])


def fixed_interval_dates(start: date, count: int, interval_days: int) -> List[date]:
    """start, start + interval, ... (count dates, calendar months ignored)"""
    return [start + timedelta(days=i * interval_days) for i in range(count)]
