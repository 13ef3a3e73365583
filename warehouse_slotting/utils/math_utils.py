# warehouse_slotting/utils/math_utils.py
import math
from typing import Optional

def clamp(value: float, lower: float = 0.0, upper: float = 100.0) -> float:
    """Clamp a value into a closed range.
    
    Args:
        value: Value to clamp
        lower: Lower bound
        upper: Upper bound
        
    Returns:
        Clamped value
    """
    if math.isnan(value):
        return lower
    return max(lower, min(upper, value))

def safe_divide(numerator: float, denominator: float, default: Optional[float] = 0.0) -> Optional[float]:
    """Divide two numbers, returning a default when the denominator is not positive.
    
    Args:
        numerator: Numerator
        denominator: Denominator
        default: Value returned instead of dividing by zero
        
    Returns:
        Quotient or default
    """
    if denominator is None or denominator <= 0:
        return default
    return numerator / denominator

def percentage(part: float, whole: float) -> float:
    """Express part as a percentage of whole (0 when whole is empty)."""
    return safe_divide(part, whole, 0.0) * 100.0
