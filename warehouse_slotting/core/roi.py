# warehouse_slotting/core/roi.py
from dataclasses import dataclass
from typing import Optional
import math

from warehouse_slotting.core.parameters import CostParameters
from warehouse_slotting.models.slotting import ABCClass, RecommendationROI, Velocity
from warehouse_slotting.utils.math_utils import clamp, safe_divide

DAYS_PER_YEAR = 365
BASE_PRIORITY = 50
HIGH_VELOCITY_PRIORITY = 30
A_CLASS_PRIORITY = 20
NET_BENEFIT_PRIORITY = 10
FAST_PAYBACK_PRIORITY = 10

DEFAULT_COSTS = CostParameters()


@dataclass(frozen=True)
class MoveEconomics:
    """Intermediate figures of the move cost/benefit model."""
    pick_time_savings: float      # minutes saved per pick
    annual_time_savings: float    # minutes per year
    annual_cost_savings: float
    move_time: int                # minutes
    move_cost: float
    net_benefit: float
    payback_period: Optional[float]

    def to_roi(self) -> RecommendationROI:
        return RecommendationROI(
            cost_to_move=self.move_cost,
            annual_savings=self.annual_cost_savings,
            payback_period=self.payback_period,
            net_benefit=self.net_benefit,
        )


def calculate_payback_period(move_cost: float, annual_cost_savings: float) -> Optional[float]:
    """Days needed to recoup a move.

    Args:
        move_cost: One-time cost of the move
        annual_cost_savings: Savings per year

    Returns:
        Payback period in days, or None when the move never pays back
    """
    daily_savings = annual_cost_savings / DAYS_PER_YEAR
    return safe_divide(move_cost, daily_savings, default=None)

def calculate_move_time(move_distance: float, costs: CostParameters = DEFAULT_COSTS) -> int:
    """Minutes to relocate one pallet over move_distance metres."""
    return int(math.ceil(move_distance * costs.move_minutes_per_meter + costs.move_setup_minutes))

def calculate_move_cost(move_time: float, costs: CostParameters = DEFAULT_COSTS) -> float:
    """Forklift time plus the fixed per-pallet handling cost."""
    return (move_time / 60.0) * costs.forklift_hourly_rate + costs.move_cost_per_pallet

def calculate_move_economics(
    average_daily_demand: float,
    travel_delta: float,
    move_distance: float,
    costs: CostParameters = DEFAULT_COSTS
) -> MoveEconomics:
    """Annual savings and one-time cost of moving a product.

    Args:
        average_daily_demand: Picks per day driving the savings
        travel_delta: Change in dock distance, in metres (sign ignored)
        move_distance: Distance the pallet travels during the move
        costs: Cost parameters

    Returns:
        MoveEconomics with payback guarded against zero savings
    """
    pick_time_savings = abs(travel_delta) * costs.pick_minutes_per_meter
    annual_picks = max(0.0, average_daily_demand) * DAYS_PER_YEAR
    annual_time_savings = annual_picks * pick_time_savings
    annual_cost_savings = (annual_time_savings / 60.0) * costs.picker_hourly_rate

    move_time = calculate_move_time(move_distance, costs)
    move_cost = calculate_move_cost(move_time, costs)

    return MoveEconomics(
        pick_time_savings=pick_time_savings,
        annual_time_savings=annual_time_savings,
        annual_cost_savings=annual_cost_savings,
        move_time=move_time,
        move_cost=move_cost,
        net_benefit=annual_cost_savings - move_cost,
        payback_period=calculate_payback_period(move_cost, annual_cost_savings),
    )

def calculate_priority(
    velocity: Velocity,
    abc_class: ABCClass,
    net_benefit: float,
    payback_period: Optional[float],
    costs: CostParameters = DEFAULT_COSTS
) -> int:
    """Additive priority heuristic capped to 0-100."""
    priority = BASE_PRIORITY
    if velocity == Velocity.HIGH:
        priority += HIGH_VELOCITY_PRIORITY
    if abc_class == ABCClass.A:
        priority += A_CLASS_PRIORITY
    if net_benefit > costs.net_benefit_priority_threshold:
        priority += NET_BENEFIT_PRIORITY
    if payback_period is not None and payback_period < costs.payback_priority_days:
        priority += FAST_PAYBACK_PRIORITY
    return int(clamp(priority, 0, 100))
