# warehouse_slotting/models/slotting.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple
import enum

from warehouse_slotting.exceptions import ValidationError


class Velocity(enum.Enum):
    """Demand-rate tier of a product.

    Values:
        HIGH ('high'): more than 20 units per day
        MEDIUM ('medium'): more than 5 units per day
        LOW ('low'): any demand up to 5 units per day
        DEAD ('dead'): no demand in the analysis window
    """
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'
    DEAD = 'dead'

    def __str__(self):
        """Return the string value of the enum."""
        return self.value

    @property
    def rank(self) -> int:
        """Ordinal rank, higher is faster moving."""
        return {'dead': 0, 'low': 1, 'medium': 2, 'high': 3}[self.value]

    @classmethod
    def from_string(cls, value: str) -> 'Velocity':
        try:
            return cls(value.lower())
        except (ValueError, AttributeError):
            raise ValueError(f"Invalid velocity: {value}. Valid values are: high, medium, low, dead")


class ABCClass(enum.Enum):
    A = 'A'
    B = 'B'
    C = 'C'

    def __str__(self):
        return self.value


class LocationType(enum.Enum):
    PICK_FACE = 'pick_face'
    RESERVE = 'reserve'
    BULK = 'bulk'
    FORWARD = 'forward'
    OVERSTOCK = 'overstock'

    def __str__(self):
        return self.value

    @classmethod
    def from_string(cls, value: str) -> 'LocationType':
        try:
            return cls(value.lower())
        except (ValueError, AttributeError):
            raise ValueError(
                f"Invalid location type: {value}. "
                "Valid values are: pick_face, reserve, bulk, forward, overstock"
            )


class ErgonomicLevel(enum.Enum):
    GOLDEN = 'golden'        # Waist to shoulder height
    STANDARD = 'standard'
    DIFFICULT = 'difficult'  # Floor level or above reach

    def __str__(self):
        return self.value


class Accessibility(enum.Enum):
    HIGH = 'high'
    MEDIUM = 'medium'
    LOW = 'low'

    def __str__(self):
        return self.value


class TemperatureClass(enum.Enum):
    AMBIENT = 'ambient'
    REFRIGERATED = 'refrigerated'
    FROZEN = 'frozen'

    def __str__(self):
        return self.value


class MovementType(enum.Enum):
    IN = 'IN'
    OUT = 'OUT'
    TRANSFER = 'TRANSFER'
    ADJUSTMENT = 'ADJUSTMENT'

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Dimensions:
    """Product dimensions in centimetres and weight in kilograms."""
    length: float = 0.0
    width: float = 0.0
    height: float = 0.0
    weight: float = 0.0

    @property
    def cube(self) -> float:
        """Volume in cubic metres."""
        return (self.length * self.width * self.height) / 1000000


@dataclass(frozen=True)
class Seasonality:
    peak_months: Tuple[int, ...] = ()
    seasonality_index: float = 1.0


@dataclass(frozen=True)
class StorageRequirements:
    temperature: Optional[TemperatureClass] = None
    hazmat: bool = False
    fragile: bool = False
    stackable: bool = True
    max_stack_height: Optional[int] = None


@dataclass(frozen=True)
class Product:
    """A product as seen by one analysis run.

    Velocity, ABC class, demand and pick frequency are filled in by the
    classifier; everything downstream treats the record as read-only.
    """
    id: str
    sku: str
    name: str = ''
    category: str = 'Unknown'
    dimensions: Dimensions = field(default_factory=Dimensions)
    average_daily_demand: float = 0.0
    pick_frequency: float = 0.0
    velocity: Velocity = Velocity.DEAD
    abc_class: ABCClass = ABCClass.C
    seasonality: Optional[Seasonality] = None
    storage_requirements: Optional[StorageRequirements] = None

    @property
    def cube(self) -> float:
        return self.dimensions.cube

    @property
    def weight(self) -> float:
        return self.dimensions.weight

    @property
    def is_hazmat(self) -> bool:
        return bool(self.storage_requirements and self.storage_requirements.hazmat)

    @property
    def temperature(self) -> Optional[TemperatureClass]:
        if self.storage_requirements is None:
            return None
        return self.storage_requirements.temperature


@dataclass(frozen=True)
class Coordinates:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class LocationDimensions:
    length: float = 0.0
    width: float = 0.0
    height: float = 0.0
    capacity: float = 0.0  # cubic metres


@dataclass(frozen=True)
class LocationCharacteristics:
    accessibility: Accessibility = Accessibility.MEDIUM
    pickability: float = 50.0
    distance_from_dock: float = 0.0
    distance_from_packing: float = 0.0
    ergonomic_level: ErgonomicLevel = ErgonomicLevel.STANDARD


@dataclass(frozen=True)
class LocationRestrictions:
    temperature: Optional[TemperatureClass] = None
    hazmat_only: bool = False
    max_weight: Optional[float] = None


@dataclass(frozen=True)
class StorageLocation:
    """Point-in-time snapshot of a storage slot.

    ``current_product`` is a back-reference to the occupying product id,
    not ownership.
    """
    id: str
    code: str
    zone: str
    location_type: LocationType
    aisle: str = ''
    bay: str = ''
    level: str = ''
    position: str = ''
    coordinates: Coordinates = field(default_factory=Coordinates)
    dimensions: LocationDimensions = field(default_factory=LocationDimensions)
    characteristics: LocationCharacteristics = field(default_factory=LocationCharacteristics)
    restrictions: Optional[LocationRestrictions] = None
    current_occupancy: float = 0.0
    current_product: Optional[str] = None

    def __post_init__(self):
        if not 0.0 <= self.current_occupancy <= 100.0:
            raise ValidationError(
                f"Occupancy of location {self.code} must be within 0-100, got {self.current_occupancy}",
                code='OCCUPANCY_RANGE'
            )

    @property
    def capacity(self) -> float:
        return self.dimensions.capacity

    @property
    def distance_from_dock(self) -> float:
        return self.characteristics.distance_from_dock

    @property
    def ergonomic_level(self) -> ErgonomicLevel:
        return self.characteristics.ergonomic_level

    @property
    def used_cube(self) -> float:
        return self.dimensions.capacity * self.current_occupancy / 100


@dataclass(frozen=True)
class MovementRecord:
    product_id: str
    quantity: float
    movement_type: MovementType
    timestamp: datetime
    reference: Optional[str] = None


@dataclass(frozen=True)
class RecommendationImpact:
    pick_time_reduction: float = 0.0          # minutes per pick
    travel_distance_reduction: float = 0.0    # metres per pick
    ergonomic_improvement: float = 0.0        # percentage
    space_utilization_improvement: float = 0.0  # percentage


@dataclass(frozen=True)
class RecommendationEffort:
    move_quantity: int = 0
    move_distance: float = 0.0
    estimated_time: float = 0.0  # minutes
    required_resources: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RecommendationROI:
    cost_to_move: float
    annual_savings: float
    payback_period: Optional[float]  # days; None means the move never pays back
    net_benefit: float

    @property
    def has_payback(self) -> bool:
        return self.payback_period is not None

    @property
    def roi_ratio(self) -> float:
        if self.cost_to_move <= 0:
            return 0.0
        return self.annual_savings / self.cost_to_move


@dataclass(frozen=True)
class SlottingRecommendation:
    product_id: str
    product_sku: str
    current_location: Optional[str]
    recommended_location: str
    reason: str
    priority: int
    impact: RecommendationImpact
    effort: RecommendationEffort
    roi: RecommendationROI

    def __post_init__(self):
        if not 0 <= self.priority <= 100:
            raise ValidationError(f"Priority must be within 0-100, got {self.priority}", code='PRIORITY_RANGE')
        for name in ('ergonomic_improvement', 'space_utilization_improvement'):
            value = getattr(self.impact, name)
            if not 0.0 <= value <= 100.0:
                raise ValidationError(f"{name} must be within 0-100, got {value}", code='PERCENT_RANGE')
        if self.current_location is not None and self.current_location == self.recommended_location:
            raise ValidationError(
                f"Recommendation for {self.product_sku} does not change its location",
                code='SAME_LOCATION'
            )

    @property
    def is_informational(self) -> bool:
        """Moves that cost more than they save are reported but ranked last."""
        return self.roi.net_benefit < 0


@dataclass(frozen=True)
class AnalysisOptions:
    include_dead_stock: bool = False
    min_velocity_threshold: float = 0.0
    analysis_horizon_days: int = 90


@dataclass(frozen=True)
class PrioritySummary:
    high_priority: int = 0
    medium_priority: int = 0
    low_priority: int = 0
    total_potential_savings: float = 0.0
    total_implementation_cost: float = 0.0
    average_roi: float = 0.0


@dataclass(frozen=True)
class VelocityBucket:
    count: int = 0
    percentage: float = 0.0


@dataclass(frozen=True)
class ZoneUtilization:
    zone: str
    capacity: float
    utilized: float
    utilization_rate: float
    recommendations: Tuple[str, ...] = ()


@dataclass
class SlottingAnalysis:
    warehouse_id: str
    analysis_date: datetime
    total_products: int
    products_analyzed: int
    recommendations: List[SlottingRecommendation]
    summary: PrioritySummary
    velocity_distribution: Dict[Velocity, VelocityBucket]
    zone_utilization: List[ZoneUtilization]


@dataclass(frozen=True)
class ImplementationResult:
    success: bool
    product_id: str
    from_location: Optional[str]
    to_location: str
    move_task_id: str
    estimated_completion_time: datetime
