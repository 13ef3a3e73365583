from .base import Base
from .inventory import StockCard, Inventory, InventoryMovement, WarehouseLocation
from .slotting import (
    Velocity, ABCClass, LocationType, ErgonomicLevel, Accessibility, TemperatureClass,
    MovementType, Dimensions, Seasonality, StorageRequirements, Product, Coordinates,
    LocationDimensions, LocationCharacteristics, LocationRestrictions, StorageLocation,
    MovementRecord, RecommendationImpact, RecommendationEffort, RecommendationROI,
    SlottingRecommendation, AnalysisOptions, PrioritySummary, VelocityBucket,
    ZoneUtilization, SlottingAnalysis, ImplementationResult
)
from .simulation import (
    RuleType, ConstraintType, SlottingRule, SlottingConstraint, ExpectedImprovements,
    SlottingStrategy, WarehouseKPIs, SimulationImprovements, ImplementationPhase,
    ImplementationPlan, SlottingSimulation
)
from .analyzers import (
    GoldenZoneAllocation, GoldenZoneResult, SeasonalProduct, SeasonalAdjustment,
    ProductFamily, FamilyGrouping, FamilyGroupingResult, CubeAction, CubeUtilizationResult
)
