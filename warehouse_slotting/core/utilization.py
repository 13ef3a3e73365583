# warehouse_slotting/core/utilization.py
from typing import Iterable, List, Tuple
import numpy as np

from warehouse_slotting.models.slotting import StorageLocation, ZoneUtilization

OVER_UTILIZED_RATE = 90.0
UNDER_UTILIZED_RATE = 50.0

OVER_UTILIZED_ADVICE = 'Zone is over-utilized - consider expansion'
UNDER_UTILIZED_ADVICE = 'Zone is under-utilized - consider consolidation'

def cube_totals(locations: Iterable[StorageLocation]) -> Tuple[float, float]:
    """Total and used cube across locations.

    Args:
        locations: Locations to sum

    Returns:
        Tuple of (total capacity, used cube)
    """
    locations = list(locations)
    if not locations:
        return 0.0, 0.0
    capacity = np.array([loc.capacity for loc in locations], dtype=float)
    occupancy = np.array([loc.current_occupancy for loc in locations], dtype=float)
    return float(capacity.sum()), float((capacity * occupancy / 100.0).sum())

def zone_advice(utilization_rate: float) -> Tuple[str, ...]:
    if utilization_rate > OVER_UTILIZED_RATE:
        return (OVER_UTILIZED_ADVICE,)
    if utilization_rate < UNDER_UTILIZED_RATE:
        return (UNDER_UTILIZED_ADVICE,)
    return ()

def calculate_zone_utilization(locations: Iterable[StorageLocation]) -> List[ZoneUtilization]:
    """Capacity, used cube and advisory text per zone, sorted by zone name.

    Locations are de-duplicated by id. Zones without capacity report a 0%
    utilization rate.
    """
    unique = {}
    for location in locations:
        unique.setdefault(location.id, location)

    by_zone = {}
    for location in unique.values():
        by_zone.setdefault(location.zone, []).append(location)

    results = []
    for zone in sorted(by_zone):
        capacity, utilized = cube_totals(by_zone[zone])
        rate = utilized / capacity * 100.0 if capacity > 0 else 0.0
        results.append(ZoneUtilization(
            zone=zone,
            capacity=capacity,
            utilized=utilized,
            utilization_rate=rate,
            recommendations=zone_advice(rate),
        ))
    return results
