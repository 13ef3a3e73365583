# warehouse_slotting/services/golden_zone_service.py
from dataclasses import replace
from datetime import datetime
from typing import Optional

from warehouse_slotting.core.parameters import SlottingParameters
from warehouse_slotting.logging_setup import get_logger
from warehouse_slotting.models.analyzers import GoldenZoneAllocation, GoldenZoneResult
from warehouse_slotting.models.slotting import ErgonomicLevel, Velocity
from warehouse_slotting.services.ports import SlottingDataSource
from warehouse_slotting.services.slotting_service import (
    SlottingService, known_locations, recommendation_sort_key
)
from warehouse_slotting.utils.date_utils import window_start

# Set up logging
logger = get_logger(__name__)

MOVE_OUT_REASON = 'Low velocity product in golden zone - should be replaced with high velocity'
MOVE_IN_REASON = 'High velocity product belongs in golden zone'

class GoldenZoneService:
    """Keeps the ergonomically best locations for the fastest movers."""

    def __init__(
        self,
        data_source: SlottingDataSource,
        parameters: Optional[SlottingParameters] = None,
        tenant_id: str = 'default'
    ):
        self.parameters = parameters or SlottingParameters.from_config()
        self.slotting_service = SlottingService(data_source, parameters=self.parameters, tenant_id=tenant_id)
        self.recommender = self.slotting_service.recommender

    def generate_golden_zone_optimization(
        self,
        warehouse_id: str,
        as_of: Optional[datetime] = None
    ) -> GoldenZoneResult:
        """Compare golden-zone occupants with the top high-velocity products.

        The optimal set is the N high-velocity products with the highest pick
        frequency, N being the number of golden locations. Occupants that are
        neither high velocity nor in that set are moved out to the best
        compatible non-golden location; optimal products outside the golden
        zone are moved into free or vacated golden locations.

        Args:
            warehouse_id: Warehouse to analyze
            as_of: End of the classification window (defaults to now)

        Returns:
            GoldenZoneResult

        Raises:
            DataUnavailableError: the snapshot could not be loaded
        """
        as_of = as_of or datetime.now()
        since = window_start(as_of, self.parameters.default_options.analysis_horizon_days)
        products, current_locations, available_locations = self.slotting_service.load_snapshot(warehouse_id, since)

        catalog = {p.id: p for p in products}
        occupant_by_location = {loc.id: pid for pid, loc in current_locations.items()}

        golden_locations = sorted(
            [loc for loc in known_locations(current_locations, available_locations)
             if loc.ergonomic_level == ErgonomicLevel.GOLDEN],
            key=lambda loc: (loc.distance_from_dock, loc.code)
        )

        current_allocation = []
        golden_by_product = {}
        for location in golden_locations:
            product_id = occupant_by_location.get(location.id) or location.current_product
            if product_id and product_id in catalog:
                current_allocation.append(
                    GoldenZoneAllocation(product_id, catalog[product_id].velocity, location.code)
                )
                golden_by_product[product_id] = location

        high_velocity = sorted(
            [p for p in products if p.velocity == Velocity.HIGH],
            key=lambda p: (-p.pick_frequency, -p.average_daily_demand, p.id)
        )
        optimal_products = high_velocity[:len(golden_locations)]
        optimal_ids = {p.id for p in optimal_products}

        misaligned = [
            a for a in current_allocation
            if a.velocity != Velocity.HIGH and a.product_id not in optimal_ids
        ]

        priority = self.parameters.analyzers.golden_zone_priority
        reserved = set()
        corrections = []
        vacated = []

        non_golden = [loc for loc in available_locations if loc.ergonomic_level != ErgonomicLevel.GOLDEN]
        for allocation in misaligned:
            product = catalog[allocation.product_id]
            current = golden_by_product[allocation.product_id]
            found = self.recommender.find_optimal_location(product, non_golden, exclude=reserved)
            if found is None:
                logger.debug(f"No non-golden location available for {product.sku}")
                continue

            target, _ = found
            reserved.add(target.id)
            vacated.append(replace(current, current_product=None, current_occupancy=0.0))
            corrections.append(self.recommender.build_recommendation(
                product, current, target, priority=priority, reason=MOVE_OUT_REASON
            ))

        free_golden = [
            loc for loc in golden_locations
            if occupant_by_location.get(loc.id) is None and loc.current_product is None
        ] + vacated

        optimal_allocation = []
        for product in optimal_products:
            if product.id in golden_by_product:
                optimal_allocation.append(
                    GoldenZoneAllocation(product.id, product.velocity, golden_by_product[product.id].code)
                )
                continue

            found = self.recommender.find_optimal_location(product, free_golden, exclude=reserved)
            if found is None:
                logger.debug(f"No free golden location for {product.sku}")
                optimal_allocation.append(GoldenZoneAllocation(product.id, product.velocity))
                continue

            target, _ = found
            reserved.add(target.id)
            optimal_allocation.append(GoldenZoneAllocation(product.id, product.velocity, target.code))
            corrections.append(self.recommender.build_recommendation(
                product, current_locations.get(product.id), target, priority=priority, reason=MOVE_IN_REASON
            ))

        corrections.sort(key=recommendation_sort_key)

        logger.info(
            f"Golden zone for warehouse {warehouse_id}: {len(golden_locations)} locations, "
            f"{len(misaligned)} misalignments, {len(corrections)} corrections"
        )

        return GoldenZoneResult(
            golden_zone_locations=golden_locations,
            current_allocation=current_allocation,
            optimal_allocation=optimal_allocation,
            misalignments=len(misaligned),
            correction_priority=corrections,
        )
