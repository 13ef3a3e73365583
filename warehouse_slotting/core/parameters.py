# warehouse_slotting/core/parameters.py
from dataclasses import dataclass, fields
from typing import Dict, Optional

from warehouse_slotting.exceptions import ConfigError
from warehouse_slotting.models.slotting import AnalysisOptions

WEIGHT_SUM_TOLERANCE = 1e-6


def _known_fields(cls, values: Dict) -> Dict:
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in values.items() if key in names}


@dataclass(frozen=True)
class ScoringWeights:
    """Relative weight of each sub-score. Must sum to 1.0."""
    velocity: float = 0.40
    abc_class: float = 0.25
    pick_frequency: float = 0.20
    space_efficiency: float = 0.10
    ergonomics: float = 0.05

    def __post_init__(self):
        values = [getattr(self, f.name) for f in fields(self)]
        for f, value in zip(fields(self), values):
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"Scoring weight '{f.name}' must be within 0-1, got {value}", code='WEIGHT_RANGE')
        if abs(sum(values) - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ConfigError(f"Scoring weights must sum to 1.0, got {sum(values):.4f}", code='WEIGHT_SUM')

    @classmethod
    def from_config(cls, cfg=None) -> 'ScoringWeights':
        if cfg is None:
            from warehouse_slotting.config import config as cfg
        return cls(**_known_fields(cls, cfg.scoring_weights))


@dataclass(frozen=True)
class CostParameters:
    """Labour, equipment and move-time constants for the ROI model."""
    picker_hourly_rate: float = 50.0
    forklift_hourly_rate: float = 75.0
    move_cost_per_pallet: float = 25.0
    pick_minutes_per_meter: float = 0.02
    move_minutes_per_meter: float = 0.5
    move_setup_minutes: float = 15.0
    default_move_quantity: int = 100
    net_benefit_priority_threshold: float = 5000.0
    payback_priority_days: float = 30.0

    def __post_init__(self):
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ConfigError(f"Cost parameter '{f.name}' must not be negative", code='COST_RANGE')

    @classmethod
    def from_config(cls, cfg=None) -> 'CostParameters':
        if cfg is None:
            from warehouse_slotting.config import config as cfg
        return cls(**_known_fields(cls, cfg.cost_parameters))


@dataclass(frozen=True)
class ClassificationThresholds:
    """Daily demand cut points shared by velocity tiers and threshold ABC."""
    high_velocity_demand: float = 20.0
    medium_velocity_demand: float = 5.0
    abc_method: str = 'threshold'

    def __post_init__(self):
        if self.medium_velocity_demand < 0 or self.high_velocity_demand < self.medium_velocity_demand:
            raise ConfigError("Velocity thresholds must satisfy 0 <= medium <= high", code='THRESHOLD_ORDER')
        if self.abc_method not in ('threshold', 'pareto'):
            raise ConfigError(f"Unknown ABC method: {self.abc_method}", code='ABC_METHOD')

    @classmethod
    def from_config(cls, cfg=None) -> 'ClassificationThresholds':
        if cfg is None:
            from warehouse_slotting.config import config as cfg
        return cls(**_known_fields(cls, cfg.analysis_config))


@dataclass(frozen=True)
class SimulationParameters:
    average_pick_time: float = 2.5
    average_travel_distance: float = 45.0
    space_utilization: float = 72.0
    productivity_rate: float = 85.0
    annual_picks: int = 500000
    total_moves: int = 250
    moves_per_day: int = 50
    space_utilization_gain: float = 15.0
    picker_hourly_rate: float = 50.0

    @classmethod
    def from_config(cls, cfg=None) -> 'SimulationParameters':
        if cfg is None:
            from warehouse_slotting.config import config as cfg
        values = _known_fields(cls, cfg.simulation_config)
        values['picker_hourly_rate'] = cfg.cost_parameters['picker_hourly_rate']
        return cls(**values)


@dataclass(frozen=True)
class AnalyzerParameters:
    golden_zone_priority: int = 95
    seasonal_priority: int = 75
    seasonal_lead_days: int = 7
    seasonal_revert_months: int = 3
    seasonal_min_index: float = 1.2
    seasonal_history_days: int = 365
    family_min_co_occurrence: int = 2
    family_max_pick_time_reduction: float = 12.0
    family_max_walk_time_reduction: float = 25.0
    consolidation_threshold: float = 50.0
    double_deep_threshold: float = 90.0
    double_deep_gain_factor: float = 0.5

    @classmethod
    def from_config(cls, cfg=None) -> 'AnalyzerParameters':
        if cfg is None:
            from warehouse_slotting.config import config as cfg
        return cls(**_known_fields(cls, cfg.analyzer_config))


@dataclass(frozen=True)
class SlottingParameters:
    """Everything a slotting run needs, resolved once and passed down."""
    weights: ScoringWeights = ScoringWeights()
    costs: CostParameters = CostParameters()
    thresholds: ClassificationThresholds = ClassificationThresholds()
    simulation: SimulationParameters = SimulationParameters()
    analyzers: AnalyzerParameters = AnalyzerParameters()
    default_options: AnalysisOptions = AnalysisOptions()
    max_workers: int = 4
    timeout_seconds: Optional[float] = None

    @classmethod
    def from_config(cls, cfg=None) -> 'SlottingParameters':
        if cfg is None:
            from warehouse_slotting.config import config as cfg
        analysis = cfg.analysis_config
        return cls(
            weights=ScoringWeights.from_config(cfg),
            costs=CostParameters.from_config(cfg),
            thresholds=ClassificationThresholds.from_config(cfg),
            simulation=SimulationParameters.from_config(cfg),
            analyzers=AnalyzerParameters.from_config(cfg),
            default_options=AnalysisOptions(
                include_dead_stock=analysis['include_dead_stock'],
                min_velocity_threshold=analysis['min_velocity_threshold'],
                analysis_horizon_days=analysis['analysis_horizon_days'],
            ),
            max_workers=max(1, analysis['max_workers'] or 1),
            timeout_seconds=analysis['timeout_seconds'] or None,
        )
