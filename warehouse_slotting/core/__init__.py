from .parameters import (
    ScoringWeights, CostParameters, ClassificationThresholds,
    SimulationParameters, AnalyzerParameters, SlottingParameters
)
from .classifier import (
    classify_velocity, classify_abc, classify_abc_pareto,
    classify_product, classify_catalog
)
from .compatibility import is_compatible, incompatibility_reason
from .scoring import ScoringEngine
from .roi import (
    calculate_move_economics, calculate_payback_period, calculate_priority,
    calculate_move_time, calculate_move_cost
)
from .utilization import calculate_zone_utilization, cube_totals
from .simulation import (
    validate_strategy, project_state, calculate_improvements, build_implementation_plan
)

__all__ = [
    'ScoringWeights',
    'CostParameters',
    'ClassificationThresholds',
    'SimulationParameters',
    'AnalyzerParameters',
    'SlottingParameters',
    'classify_velocity',
    'classify_abc',
    'classify_abc_pareto',
    'classify_product',
    'classify_catalog',
    'is_compatible',
    'incompatibility_reason',
    'ScoringEngine',
    'calculate_move_economics',
    'calculate_payback_period',
    'calculate_priority',
    'calculate_move_time',
    'calculate_move_cost',
    'calculate_zone_utilization',
    'cube_totals',
    'validate_strategy',
    'project_state',
    'calculate_improvements',
    'build_implementation_plan'
]
