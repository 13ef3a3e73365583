# warehouse_slotting/models/simulation.py
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import enum


class RuleType(enum.Enum):
    VELOCITY_BASED = 'velocity_based'
    ABC_BASED = 'abc_based'
    FAMILY_GROUPING = 'family_grouping'
    CUBE_UTILIZATION = 'cube_utilization'
    ERGONOMIC = 'ergonomic'

    def __str__(self):
        return self.value


class ConstraintType(enum.Enum):
    TEMPERATURE = 'temperature'
    HAZMAT = 'hazmat'
    WEIGHT = 'weight'
    HEIGHT = 'height'
    COMPATIBILITY = 'compatibility'

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class SlottingRule:
    rule_type: RuleType
    priority: int
    condition: str
    action: str
    weight: float  # 0-1


@dataclass(frozen=True)
class SlottingConstraint:
    constraint_type: ConstraintType
    description: str
    enforced: bool = True


@dataclass(frozen=True)
class ExpectedImprovements:
    """Improvement percentages (0-100) a strategy is expected to deliver."""
    pick_time_reduction: float = 0.0
    travel_reduction: float = 0.0
    productivity_gain: float = 0.0
    space_utilization_gain: Optional[float] = None  # None: use the configured default


@dataclass(frozen=True)
class SlottingStrategy:
    name: str
    expected_improvements: ExpectedImprovements
    description: str = ''
    objectives: Tuple[str, ...] = ()
    rules: Tuple[SlottingRule, ...] = ()
    constraints: Tuple[SlottingConstraint, ...] = ()


@dataclass(frozen=True)
class WarehouseKPIs:
    average_pick_time: float        # minutes per line
    average_travel_distance: float  # metres per pick
    space_utilization: float        # percentage
    productivity_rate: float        # lines per hour


@dataclass(frozen=True)
class SimulationImprovements:
    pick_time_reduction: float
    travel_reduction: float
    productivity_gain: float
    annual_cost_savings: float


@dataclass(frozen=True)
class ImplementationPhase:
    phase: int
    moves_count: int
    estimated_days: int
    expected_benefit: float


@dataclass(frozen=True)
class ImplementationPlan:
    total_moves: int
    estimated_duration: int  # days
    required_resources: Tuple[str, ...]
    phased_approach: List[ImplementationPhase] = field(default_factory=list)


@dataclass(frozen=True)
class SlottingSimulation:
    strategy: SlottingStrategy
    current_state: WarehouseKPIs
    projected_state: WarehouseKPIs
    improvements: SimulationImprovements
    implementation_plan: ImplementationPlan
