from .config import config
from .logging_setup import logger, get_logger
from .exceptions import (
    SlottingError, ConfigError, DatabaseError, ValidationError, DataUnavailableError,
    InvalidStrategyError, AnalysisCancelledError, MoveTaskError
)
from .services import (
    SlottingService, SimulationService, GoldenZoneService, SeasonalService,
    FamilyGroupingService, CubeUtilizationService
)
from .db import db, SqlAlchemySlottingRepository, open_repository

__all__ = [
    'config',
    'logger',
    'get_logger',
    'SlottingError',
    'ConfigError',
    'DatabaseError',
    'ValidationError',
    'DataUnavailableError',
    'InvalidStrategyError',
    'AnalysisCancelledError',
    'MoveTaskError',
    'SlottingService',
    'SimulationService',
    'GoldenZoneService',
    'SeasonalService',
    'FamilyGroupingService',
    'CubeUtilizationService',
    'db',
    'open_repository',
    'SqlAlchemySlottingRepository'
]
