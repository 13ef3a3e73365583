from .date_utils import window_days, window_start, add_months
from .math_utils import clamp, safe_divide, percentage
from .cancellation import CancellationToken

__all__ = [
    'window_days',
    'window_start',
    'add_months',
    'clamp',
    'safe_divide',
    'percentage',
    'CancellationToken'
]
