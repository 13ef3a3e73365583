# warehouse_slotting/services/ports.py
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from warehouse_slotting.logging_setup import get_logger
from warehouse_slotting.models.slotting import (
    MovementRecord, MovementType, Product, SlottingRecommendation, StorageLocation
)
from warehouse_slotting.models.simulation import WarehouseKPIs

# Set up logging
logger = get_logger(__name__)

class SlottingDataSource(ABC):
    """Read-only access to the product catalog and location inventory of a warehouse."""

    @abstractmethod
    def fetch_products_with_velocity(self, tenant_id: str, warehouse_id: str, since: datetime) -> List[Product]:
        """Products stocked in the warehouse, classified over the window starting at since."""
        pass

    @abstractmethod
    def fetch_current_location_assignments(self, warehouse_id: str) -> Dict[str, StorageLocation]:
        """Occupied locations keyed by the product id they hold."""
        pass

    @abstractmethod
    def fetch_available_locations(self, warehouse_id: str) -> List[StorageLocation]:
        """Locations that can take a product."""
        pass

    @abstractmethod
    def fetch_movements(
        self,
        warehouse_id: str,
        since: datetime,
        movement_type: Optional[MovementType] = None
    ) -> List[MovementRecord]:
        """Movement history of the warehouse since the given date."""
        pass


class EventPublisher(ABC):
    """Fire-and-forget notification channel."""

    @abstractmethod
    def emit(self, name: str, payload: Dict[str, Any]) -> None:
        pass


class MoveTaskGateway(ABC):
    """Task-execution system that physically carries out accepted moves."""

    @abstractmethod
    def create_move_task(self, recommendation: SlottingRecommendation) -> str:
        """Create a move task and return its id."""
        pass


class KpiSource(ABC):
    """Provider of current warehouse performance figures."""

    @abstractmethod
    def fetch_current_kpis(self, warehouse_id: str) -> WarehouseKPIs:
        pass


class LoggingEventPublisher(EventPublisher):
    """Event publisher that only writes events to the log."""

    def emit(self, name: str, payload: Dict[str, Any]) -> None:
        logger.info(f"Event {name}: {payload}")
