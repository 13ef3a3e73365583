from .ports import (
    SlottingDataSource, EventPublisher, MoveTaskGateway, KpiSource, LoggingEventPublisher
)
from .recommender import AssignmentRecommender
from .slotting_service import SlottingService
from .simulation_service import SimulationService
from .golden_zone_service import GoldenZoneService
from .seasonal_service import SeasonalService
from .family_grouping_service import FamilyGroupingService
from .cube_utilization_service import CubeUtilizationService

__all__ = [
    'SlottingDataSource',
    'EventPublisher',
    'MoveTaskGateway',
    'KpiSource',
    'LoggingEventPublisher',
    'AssignmentRecommender',
    'SlottingService',
    'SimulationService',
    'GoldenZoneService',
    'SeasonalService',
    'FamilyGroupingService',
    'CubeUtilizationService'
]
