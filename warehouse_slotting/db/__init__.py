from .connection import Database, db
from .repository import SqlAlchemySlottingRepository, open_repository

__all__ = [
    'Database',
    'db',
    'SqlAlchemySlottingRepository',
    'open_repository'
]
