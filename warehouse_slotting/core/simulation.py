# warehouse_slotting/core/simulation.py
from typing import List, Tuple
import math

from warehouse_slotting.core.parameters import SimulationParameters
from warehouse_slotting.exceptions import InvalidStrategyError
from warehouse_slotting.models.simulation import (
    ExpectedImprovements, ImplementationPhase, ImplementationPlan, SimulationImprovements,
    SlottingStrategy, WarehouseKPIs
)
from warehouse_slotting.utils.math_utils import clamp, percentage

# Share of moves and of benefit delivered by each rollout phase
PHASE_SHARES = (0.6, 0.3, 0.1)

DEFAULT_RESOURCES = ('2 Forklifts', '4 Workers', '1 Supervisor')

def validate_strategy(strategy: SlottingStrategy) -> None:
    """Reject strategies that cannot be projected.

    Raises:
        InvalidStrategyError: missing name or improvements, rule weight
            outside 0-1, or improvement percentage outside 0-100
    """
    if strategy is None:
        raise InvalidStrategyError("Strategy is required", code='MISSING_STRATEGY')

    if not strategy.name or not strategy.name.strip():
        raise InvalidStrategyError("Strategy name is required", code='MISSING_NAME')

    improvements = strategy.expected_improvements
    if improvements is None:
        raise InvalidStrategyError(
            f"Strategy '{strategy.name}' has no expected improvements", code='MISSING_IMPROVEMENTS'
        )

    for name in ('pick_time_reduction', 'travel_reduction', 'productivity_gain', 'space_utilization_gain'):
        value = getattr(improvements, name)
        if value is None and name == 'space_utilization_gain':
            continue
        if value is None or not 0.0 <= value <= 100.0:
            raise InvalidStrategyError(
                f"Expected improvement '{name}' must be within 0-100, got {value}",
                code='IMPROVEMENT_RANGE',
                details={'strategy': strategy.name, 'field': name}
            )

    for rule in strategy.rules:
        if rule.weight is None or not 0.0 <= rule.weight <= 1.0:
            raise InvalidStrategyError(
                f"Rule weight must be within 0-1, got {rule.weight}",
                code='RULE_WEIGHT_RANGE',
                details={'strategy': strategy.name, 'rule_type': str(rule.rule_type)}
            )

def project_state(
    current: WarehouseKPIs,
    improvements: ExpectedImprovements,
    default_space_gain: float = 15.0
) -> WarehouseKPIs:
    """Apply expected improvement percentages to a KPI snapshot.

    The space utilization gain falls back to default_space_gain when the
    strategy does not set one.
    """
    space_gain = improvements.space_utilization_gain
    if space_gain is None:
        space_gain = default_space_gain

    return WarehouseKPIs(
        average_pick_time=current.average_pick_time * (1 - improvements.pick_time_reduction / 100),
        average_travel_distance=current.average_travel_distance * (1 - improvements.travel_reduction / 100),
        space_utilization=clamp(current.space_utilization * (1 + space_gain / 100)),
        productivity_rate=current.productivity_rate * (1 + improvements.productivity_gain / 100),
    )

def calculate_improvements(
    current: WarehouseKPIs,
    projected: WarehouseKPIs,
    params: SimulationParameters
) -> SimulationImprovements:
    """Relative KPI changes and the annual labour saving of the pick-time delta."""
    pick_time_delta = current.average_pick_time - projected.average_pick_time
    time_savings_hours = params.annual_picks * pick_time_delta / 60

    return SimulationImprovements(
        pick_time_reduction=percentage(pick_time_delta, current.average_pick_time),
        travel_reduction=percentage(
            current.average_travel_distance - projected.average_travel_distance,
            current.average_travel_distance
        ),
        productivity_gain=percentage(
            projected.productivity_rate - current.productivity_rate,
            current.productivity_rate
        ),
        annual_cost_savings=time_savings_hours * params.picker_hourly_rate,
    )

def split_moves(total_moves: int) -> List[int]:
    """Split moves 60/30/10 across the phases; the last phase takes the remainder."""
    counts = [int(round(total_moves * share)) for share in PHASE_SHARES[:-1]]
    counts.append(max(0, total_moves - sum(counts)))
    return counts

def build_implementation_plan(
    total_moves: int,
    annual_cost_savings: float,
    moves_per_day: int,
    required_resources: Tuple[str, ...] = DEFAULT_RESOURCES
) -> ImplementationPlan:
    """Three-phase rollout plan with per-phase duration and benefit share."""
    moves_per_day = max(1, moves_per_day)
    total_moves = max(0, total_moves)

    phases = []
    for index, (moves, share) in enumerate(zip(split_moves(total_moves), PHASE_SHARES), start=1):
        phases.append(ImplementationPhase(
            phase=index,
            moves_count=moves,
            estimated_days=int(math.ceil(moves / moves_per_day)),
            expected_benefit=annual_cost_savings * share,
        ))

    return ImplementationPlan(
        total_moves=total_moves,
        estimated_duration=int(math.ceil(total_moves / moves_per_day)),
        required_resources=tuple(required_resources),
        phased_approach=phases,
    )
