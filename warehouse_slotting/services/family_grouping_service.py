# warehouse_slotting/services/family_grouping_service.py
from collections import Counter, defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple

from warehouse_slotting.core.parameters import SlottingParameters
from warehouse_slotting.exceptions import DataUnavailableError
from warehouse_slotting.logging_setup import get_logger
from warehouse_slotting.models.analyzers import FamilyGrouping, FamilyGroupingResult, ProductFamily
from warehouse_slotting.models.slotting import MovementRecord, MovementType, StorageLocation
from warehouse_slotting.services.ports import SlottingDataSource
from warehouse_slotting.services.slotting_service import SlottingService, recommendation_sort_key
from warehouse_slotting.utils.date_utils import window_start
from warehouse_slotting.utils.math_utils import percentage

# Set up logging
logger = get_logger(__name__)

def group_orders(movements: List[MovementRecord], product_ids: Set[str]) -> Dict[str, Set[str]]:
    """Products picked per order reference, limited to known products."""
    orders = defaultdict(set)
    for movement in movements:
        if movement.movement_type != MovementType.OUT or not movement.reference:
            continue
        if movement.product_id in product_ids:
            orders[movement.reference].add(movement.product_id)
    return dict(orders)

def count_pairs(orders: Dict[str, Set[str]]) -> Counter:
    """Number of orders each product pair appears in together."""
    pair_counts = Counter()
    for products in orders.values():
        products_list = sorted(products)
        for i in range(len(products_list)):
            for j in range(i + 1, len(products_list)):
                pair_counts[(products_list[i], products_list[j])] += 1
    return pair_counts

def find_families(pair_counts: Counter, min_co_occurrence: int) -> List[Tuple[str, ...]]:
    """Connected groups of products linked by frequent co-picking.

    Args:
        pair_counts: Co-occurrence count per product pair
        min_co_occurrence: Minimum count for a pair to be linked

    Returns:
        Sorted member tuples, ordered by their first member
    """
    adjacency = defaultdict(set)
    for (a, b), count in pair_counts.items():
        if count >= min_co_occurrence:
            adjacency[a].add(b)
            adjacency[b].add(a)

    families = []
    visited = set()
    for start in sorted(adjacency):
        if start in visited:
            continue
        stack = [start]
        members = set()
        while stack:
            product_id = stack.pop()
            if product_id in members:
                continue
            members.add(product_id)
            stack.extend(adjacency[product_id] - members)
        visited |= members
        if len(members) > 1:
            families.append(tuple(sorted(members)))
    return families


class FamilyGroupingService:
    """Co-locates products that are usually picked on the same order."""

    def __init__(
        self,
        data_source: SlottingDataSource,
        parameters: Optional[SlottingParameters] = None,
        tenant_id: str = 'default'
    ):
        self.data_source = data_source
        self.parameters = parameters or SlottingParameters.from_config()
        self.slotting_service = SlottingService(data_source, parameters=self.parameters, tenant_id=tenant_id)
        self.recommender = self.slotting_service.recommender

    def family_grouping_optimization(
        self,
        warehouse_id: str,
        as_of: Optional[datetime] = None
    ) -> FamilyGroupingResult:
        """Detect product families from order co-occurrence and recommend co-location.

        Args:
            warehouse_id: Warehouse to analyze
            as_of: End of the movement window (defaults to now)

        Returns:
            FamilyGroupingResult

        Raises:
            DataUnavailableError: the snapshot or movement history could not be loaded
        """
        settings = self.parameters.analyzers
        as_of = as_of or datetime.now()
        since = window_start(as_of, self.parameters.default_options.analysis_horizon_days)

        products, current_locations, available_locations = self.slotting_service.load_snapshot(warehouse_id, since)
        catalog = {p.id: p for p in products}

        try:
            movements = self.data_source.fetch_movements(warehouse_id, since, MovementType.OUT)
        except Exception as e:
            raise DataUnavailableError(
                f"Error fetching movement history for warehouse {warehouse_id}: {str(e)}",
                code='FETCH_FAILED',
                details={'warehouse_id': warehouse_id}
            ) from e

        movements = [m for m in (movements or []) if m.timestamp >= since]
        orders = group_orders(movements, set(catalog))
        members_list = find_families(count_pairs(orders), settings.family_min_co_occurrence)

        picks_by_product = Counter(
            m.product_id for m in movements if m.movement_type == MovementType.OUT
        )

        families = []
        groupings = []
        family_orders = 0
        multi_zone_orders = 0
        reserved = set()

        for index, members in enumerate(members_list, start=1):
            family_id = f"FAMILY-{index:03d}"
            member_set = set(members)

            orders_with_member = [items & member_set for items in orders.values() if items & member_set]
            co_picked = [items for items in orders_with_member if len(items) > 1]
            co_picking_frequency = round(percentage(len(co_picked), len(orders_with_member)), 2)

            family_orders += len(co_picked)
            for items in co_picked:
                zones = {current_locations[pid].zone for pid in items if pid in current_locations}
                if len(zones) > 1:
                    multi_zone_orders += 1

            categories = Counter(catalog[pid].category for pid in members)
            family = ProductFamily(
                family_id=family_id,
                family_name=f"{categories.most_common(1)[0][0]} family",
                product_ids=members,
                product_count=len(members),
                total_picks=sum(picks_by_product[pid] for pid in members),
                co_picking_frequency=co_picking_frequency,
            )
            families.append(family)

            zone = self.select_zone_for_family(members, current_locations)
            grouping = FamilyGrouping(
                family_id=family_id,
                products=list(members),
                recommended_zone=zone,
                benefit=f"{co_picking_frequency:.0f}% co-picking rate - reduce multi-zone picks",
            )

            if zone is not None:
                zone_locations = [loc for loc in available_locations if loc.zone == zone]
                for product_id in members:
                    current = current_locations.get(product_id)
                    if current is not None and current.zone == zone:
                        continue

                    product = catalog[product_id]
                    found = self.recommender.find_optimal_location(product, zone_locations, exclude=reserved)
                    if found is None:
                        logger.debug(f"No compatible location in zone {zone} for {product.sku}")
                        continue

                    target, _ = found
                    reserved.add(target.id)
                    grouping.recommendations.append(self.recommender.build_recommendation(
                        product, current, target,
                        reason=f"Co-locate with {family_id} in zone {zone}"
                    ))

                grouping.recommendations.sort(key=recommendation_sort_key)

            groupings.append(grouping)

        multi_zone_share = multi_zone_orders / family_orders if family_orders else 0.0

        logger.info(
            f"Family grouping for warehouse {warehouse_id}: {len(families)} families, "
            f"{multi_zone_orders} of {family_orders} family orders span several zones"
        )

        return FamilyGroupingResult(
            product_families=families,
            grouping_recommendations=groupings,
            pick_time_reduction=round(settings.family_max_pick_time_reduction * multi_zone_share, 2),
            walk_time_reduction=round(settings.family_max_walk_time_reduction * multi_zone_share, 2),
        )

    def select_zone_for_family(
        self,
        members: Tuple[str, ...],
        current_locations: Dict[str, StorageLocation]
    ) -> Optional[str]:
        """Zone already holding most family members; ties go to the zone closer to the dock."""
        by_zone = defaultdict(list)
        for product_id in members:
            location = current_locations.get(product_id)
            if location is not None:
                by_zone[location.zone].append(location.distance_from_dock)

        if not by_zone:
            return None

        return min(
            by_zone,
            key=lambda zone: (-len(by_zone[zone]), sum(by_zone[zone]) / len(by_zone[zone]), zone)
        )
