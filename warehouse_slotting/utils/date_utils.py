# warehouse_slotting/utils/date_utils.py
from datetime import date, datetime, timedelta
import calendar
import math

def window_days(since: datetime, as_of: datetime) -> int:
    """Number of whole days in an analysis window, never less than one.
    
    Args:
        since: Start of the window
        as_of: End of the window
        
    Returns:
        Window length in days
    """
    seconds = (as_of - since).total_seconds()
    return max(1, math.ceil(seconds / 86400))

def window_start(as_of: datetime, horizon_days: int) -> datetime:
    """Start of a trailing window of horizon_days ending at as_of."""
    return as_of - timedelta(days=horizon_days)

def add_months(value: date, months: int) -> date:
    """Add calendar months to a date, clamping the day to the target month length.
    
    Args:
        value: Start date
        months: Number of months to add (may be negative)
        
    Returns:
        Shifted date
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
