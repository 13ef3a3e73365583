# warehouse_slotting/services/recommender.py
from typing import Iterable, List, Optional, Tuple

from warehouse_slotting.core.compatibility import incompatibility_reason, is_compatible
from warehouse_slotting.core.parameters import CostParameters
from warehouse_slotting.core.roi import calculate_move_economics, calculate_priority
from warehouse_slotting.core.scoring import ScoringEngine
from warehouse_slotting.logging_setup import get_logger
from warehouse_slotting.models.slotting import (
    ABCClass, ErgonomicLevel, LocationType, Product, RecommendationEffort,
    RecommendationImpact, SlottingRecommendation, StorageLocation, Velocity
)
from warehouse_slotting.utils.math_utils import clamp, percentage

# Set up logging
logger = get_logger(__name__)

REQUIRED_MOVE_RESOURCES = ('1 Forklift', '2 Workers')
GOLDEN_ZONE_ERGONOMIC_IMPROVEMENT = 10.0
HIGH_PICK_FREQUENCY = 15.0
DEFAULT_REASON = 'Better overall slotting fit'

class AssignmentRecommender:
    """Greedy best-fit placement of one product at a time."""

    def __init__(
        self,
        scoring_engine: Optional[ScoringEngine] = None,
        costs: Optional[CostParameters] = None
    ):
        """Initialize the recommender.

        Args:
            scoring_engine: Engine used to rank candidate locations
            costs: Cost parameters for the ROI model
        """
        self.scoring_engine = scoring_engine or ScoringEngine()
        self.costs = costs or CostParameters()

    def find_optimal_location(
        self,
        product: Product,
        locations: Iterable[StorageLocation],
        exclude: Iterable[str] = ()
    ) -> Optional[Tuple[StorageLocation, float]]:
        """Highest-scoring compatible location for a product.

        The first location reaching the best score wins, so the result only
        depends on the order of the input.

        Args:
            product: Product to place
            locations: Candidate locations
            exclude: Location ids that must not be used

        Returns:
            Tuple of (location, score), or None when nothing is compatible
        """
        excluded = set(exclude)
        best_location = None
        best_score = -1.0

        for location in locations:
            if location.id in excluded:
                continue

            reason = incompatibility_reason(product, location)
            if reason:
                logger.debug(f"Skipping {location.code} for {product.sku}: {reason}")
                continue

            score = self.scoring_engine.score(product, location)
            if score > best_score:
                best_score = score
                best_location = location

        if best_location is None:
            return None
        return best_location, best_score

    def recommend(
        self,
        product: Product,
        current_location: Optional[StorageLocation],
        available_locations: List[StorageLocation],
        exclude: Iterable[str] = (),
        priority: Optional[int] = None,
        reason: Optional[str] = None
    ) -> Optional[SlottingRecommendation]:
        """Recommend a move for a product, or None when no better slot exists.

        A compatible current location is only abandoned for a strictly
        higher-scoring one.
        """
        found = self.find_optimal_location(product, available_locations, exclude)
        if found is None:
            logger.debug(f"No compatible location for {product.sku}")
            return None

        target, target_score = found

        if current_location is not None:
            if target.code == current_location.code:
                logger.debug(f"{product.sku} is already in its best location {target.code}")
                return None

            if is_compatible(product, current_location):
                current_score = self.scoring_engine.score(product, current_location)
                if target_score <= current_score:
                    logger.debug(
                        f"No improvement for {product.sku}: {target.code} scores {target_score:.2f} "
                        f"vs current {current_score:.2f}"
                    )
                    return None

        return self.build_recommendation(product, current_location, target, priority, reason)

    def build_recommendation(
        self,
        product: Product,
        current_location: Optional[StorageLocation],
        target: StorageLocation,
        priority: Optional[int] = None,
        reason: Optional[str] = None
    ) -> SlottingRecommendation:
        """Package a move with its impact, effort and ROI estimates.

        Args:
            product: Product to move
            current_location: Where the product is now, if anywhere
            target: Recommended location
            priority: Fixed priority; computed from the ROI heuristic when None
            reason: Fixed reason; generated from the fit drivers when None

        Returns:
            SlottingRecommendation
        """
        if current_location is not None:
            travel_delta = current_location.distance_from_dock - target.distance_from_dock
            move_distance = abs(travel_delta)
        else:
            travel_delta = 0.0
            move_distance = target.distance_from_dock

        economics = calculate_move_economics(
            product.average_daily_demand, travel_delta, move_distance, self.costs
        )

        if priority is None:
            priority = calculate_priority(
                product.velocity, product.abc_class,
                economics.net_benefit, economics.payback_period, self.costs
            )

        ergonomic_improvement = 0.0
        if (current_location is not None
                and current_location.ergonomic_level != ErgonomicLevel.GOLDEN
                and target.ergonomic_level == ErgonomicLevel.GOLDEN):
            ergonomic_improvement = GOLDEN_ZONE_ERGONOMIC_IMPROVEMENT

        target_fill = percentage(product.cube, target.capacity)
        current_fill = percentage(product.cube, current_location.capacity) if current_location else 0.0

        return SlottingRecommendation(
            product_id=product.id,
            product_sku=product.sku,
            current_location=current_location.code if current_location else None,
            recommended_location=target.code,
            reason=reason or self.build_reason(product, current_location, target),
            priority=int(clamp(priority)),
            impact=RecommendationImpact(
                pick_time_reduction=economics.pick_time_savings,
                travel_distance_reduction=abs(travel_delta),
                ergonomic_improvement=clamp(ergonomic_improvement),
                space_utilization_improvement=clamp(target_fill - current_fill),
            ),
            effort=RecommendationEffort(
                move_quantity=self.costs.default_move_quantity,
                move_distance=move_distance,
                estimated_time=economics.move_time,
                required_resources=REQUIRED_MOVE_RESOURCES,
            ),
            roi=economics.to_roi(),
        )

    def build_reason(
        self,
        product: Product,
        current_location: Optional[StorageLocation],
        target: StorageLocation
    ) -> str:
        reasons = []

        if product.velocity == Velocity.HIGH and target.location_type == LocationType.PICK_FACE:
            reasons.append('High velocity product should be in pick face')

        if product.abc_class == ABCClass.A and target.ergonomic_level == ErgonomicLevel.GOLDEN:
            reasons.append('A-class product deserves golden zone placement')

        if current_location is not None and current_location.distance_from_dock > target.distance_from_dock:
            savings = current_location.distance_from_dock - target.distance_from_dock
            reasons.append(f"Reduce travel distance by {savings:.1f}m")

        if product.pick_frequency > HIGH_PICK_FREQUENCY:
            reasons.append(f"High pick frequency ({product.pick_frequency:.1f}/day) warrants optimal placement")

        return '; '.join(reasons) or DEFAULT_REASON
