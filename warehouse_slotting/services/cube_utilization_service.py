# warehouse_slotting/services/cube_utilization_service.py
from collections import defaultdict
from datetime import datetime
from typing import List, Optional

from warehouse_slotting.core.parameters import SlottingParameters
from warehouse_slotting.core.utilization import cube_totals
from warehouse_slotting.exceptions import DataUnavailableError
from warehouse_slotting.logging_setup import get_logger
from warehouse_slotting.models.analyzers import CubeAction, CubeUtilizationResult
from warehouse_slotting.models.slotting import (
    ErgonomicLevel, LocationType, StorageLocation, Velocity
)
from warehouse_slotting.services.ports import SlottingDataSource
from warehouse_slotting.services.slotting_service import SlottingService, known_locations
from warehouse_slotting.utils.date_utils import window_start

# Set up logging
logger = get_logger(__name__)

CONSOLIDATE_ACTION = 'Consolidate partial pallets in reserve locations'
SLOW_MOVER_ACTION = 'Move slow movers to higher levels'
DOUBLE_DEEP_ACTION = 'Implement double-deep racking for bulk items'

STORAGE_TYPES = (LocationType.RESERVE, LocationType.BULK, LocationType.OVERSTOCK)

def location_range(locations: List[StorageLocation]) -> str:
    codes = sorted(loc.code for loc in locations)
    if len(codes) == 1:
        return codes[0]
    return f"{codes[0]} to {codes[-1]}"

def consolidate_partials(partials: List[StorageLocation]) -> List[StorageLocation]:
    """First-fit decreasing packing of partial locations into as few as possible.

    Contents are packed largest first into the largest locations; every
    location that ends up unused is freed.

    Args:
        partials: Partially filled locations of one zone

    Returns:
        Locations that can be emptied (empty when packing does not help)
    """
    bins = sorted(partials, key=lambda loc: (-loc.capacity, loc.code))
    opened = set()
    remaining = []

    for location in sorted(partials, key=lambda loc: (-loc.used_cube, loc.code)):
        item = location.used_cube
        for index, space in enumerate(remaining):
            if space >= item:
                remaining[index] -= item
                break
        else:
            candidates = [b for b in bins if b.id not in opened and b.capacity >= item]
            if not candidates:
                return []
            opened.add(candidates[0].id)
            remaining.append(candidates[0].capacity - item)

    return [loc for loc in partials if loc.id not in opened]


class CubeUtilizationService:
    """Finds space that can be recovered through consolidation and re-racking."""

    def __init__(
        self,
        data_source: SlottingDataSource,
        parameters: Optional[SlottingParameters] = None,
        tenant_id: str = 'default'
    ):
        self.parameters = parameters or SlottingParameters.from_config()
        self.slotting_service = SlottingService(data_source, parameters=self.parameters, tenant_id=tenant_id)

    def cube_utilization_optimization(
        self,
        warehouse_id: str,
        as_of: Optional[datetime] = None
    ) -> CubeUtilizationResult:
        """Current cube utilization and the actions that would raise it.

        Args:
            warehouse_id: Warehouse to analyze
            as_of: End of the classification window (defaults to now)

        Returns:
            CubeUtilizationResult with figures rounded to 2 places

        Raises:
            DataUnavailableError: the snapshot could not be loaded or has no capacity
        """
        settings = self.parameters.analyzers
        as_of = as_of or datetime.now()
        since = window_start(as_of, self.parameters.default_options.analysis_horizon_days)

        products, current_locations, available_locations = self.slotting_service.load_snapshot(warehouse_id, since)
        locations = known_locations(current_locations, available_locations)

        total_cube, used_cube = cube_totals(locations)
        if total_cube <= 0:
            raise DataUnavailableError(
                f"Warehouse {warehouse_id} has no storage capacity", code='NO_CAPACITY'
            )

        actions = []

        # Consolidation, zone by zone
        partials_by_zone = defaultdict(list)
        for location in locations:
            if (location.location_type in STORAGE_TYPES
                    and 0 < location.current_occupancy < settings.consolidation_threshold):
                partials_by_zone[location.zone].append(location)

        for zone in sorted(partials_by_zone):
            freed = consolidate_partials(partials_by_zone[zone])
            if freed:
                actions.append(CubeAction(
                    action=CONSOLIDATE_ACTION,
                    location_range=location_range(freed),
                    impacted_products=len(freed),
                    cube_gain=round(sum(loc.capacity for loc in freed), 2),
                ))

        # Slow movers holding accessible levels
        velocity_by_product = {p.id: p.velocity for p in products}
        slow_locations = [
            loc for pid, loc in current_locations.items()
            if velocity_by_product.get(pid) in (Velocity.LOW, Velocity.DEAD)
            and loc.ergonomic_level in (ErgonomicLevel.GOLDEN, ErgonomicLevel.STANDARD)
        ]
        if slow_locations:
            actions.append(CubeAction(
                action=SLOW_MOVER_ACTION,
                location_range=location_range(slow_locations),
                impacted_products=len(slow_locations),
                cube_gain=round(sum(loc.used_cube for loc in slow_locations), 2),
            ))

        # Full bulk locations
        full_bulk = [
            loc for loc in locations
            if loc.location_type == LocationType.BULK
            and loc.current_occupancy >= settings.double_deep_threshold
        ]
        if full_bulk:
            actions.append(CubeAction(
                action=DOUBLE_DEEP_ACTION,
                location_range=location_range(full_bulk),
                impacted_products=len(full_bulk),
                cube_gain=round(sum(loc.capacity for loc in full_bulk) * settings.double_deep_gain_factor, 2),
            ))

        total_gain = sum(action.cube_gain for action in actions)
        current_utilization = used_cube / total_cube * 100
        optimized_utilization = min(100.0, (used_cube + total_gain) / total_cube * 100)

        logger.info(
            f"Cube utilization for warehouse {warehouse_id}: {current_utilization:.2f}% now, "
            f"{optimized_utilization:.2f}% after {len(actions)} actions"
        )

        return CubeUtilizationResult(
            current_utilization=round(current_utilization, 2),
            optimized_utilization=round(optimized_utilization, 2),
            improvement=round(optimized_utilization - current_utilization, 2),
            recommendations=actions,
        )
