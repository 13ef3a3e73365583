# warehouse_slotting/models/analyzers.py
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from .slotting import SlottingRecommendation, StorageLocation, Velocity


@dataclass(frozen=True)
class GoldenZoneAllocation:
    product_id: str
    velocity: Velocity
    location_code: Optional[str] = None


@dataclass
class GoldenZoneResult:
    golden_zone_locations: List[StorageLocation]
    current_allocation: List[GoldenZoneAllocation]
    optimal_allocation: List[GoldenZoneAllocation]
    misalignments: int
    correction_priority: List[SlottingRecommendation] = field(default_factory=list)


@dataclass(frozen=True)
class SeasonalProduct:
    product_id: str
    product_sku: str
    current_velocity: Velocity
    projected_velocity: Velocity
    current_zone: Optional[str]
    recommended_zone: Optional[str]
    seasonality_index: float
    peak_month: int


@dataclass
class SeasonalAdjustment:
    seasonal_products: List[SeasonalProduct]
    adjustment_recommendations: List[SlottingRecommendation]
    implement_by: date
    revert_by: date


@dataclass(frozen=True)
class ProductFamily:
    family_id: str
    family_name: str
    product_ids: Tuple[str, ...]
    product_count: int
    total_picks: int
    co_picking_frequency: float  # percentage of family orders with 2+ members


@dataclass
class FamilyGrouping:
    family_id: str
    products: List[str]
    recommended_zone: Optional[str]
    benefit: str
    recommendations: List[SlottingRecommendation] = field(default_factory=list)


@dataclass
class FamilyGroupingResult:
    product_families: List[ProductFamily]
    grouping_recommendations: List[FamilyGrouping]
    pick_time_reduction: float
    walk_time_reduction: float


@dataclass(frozen=True)
class CubeAction:
    action: str
    location_range: str
    impacted_products: int
    cube_gain: float


@dataclass
class CubeUtilizationResult:
    current_utilization: float
    optimized_utilization: float
    improvement: float
    recommendations: List[CubeAction]
