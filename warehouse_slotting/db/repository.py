# warehouse_slotting/db/repository.py
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from warehouse_slotting.core.classifier import classify_catalog
from warehouse_slotting.core.parameters import ClassificationThresholds
from warehouse_slotting.db.connection import Database, db
from warehouse_slotting.exceptions import DatabaseError, DataUnavailableError, ValidationError
from warehouse_slotting.logging_setup import get_logger
from warehouse_slotting.models import (
    Accessibility, Coordinates, Dimensions, ErgonomicLevel, Inventory, InventoryMovement,
    LocationCharacteristics, LocationDimensions, LocationRestrictions, LocationType,
    MovementRecord, MovementType, Product, StockCard, StorageLocation, StorageRequirements,
    TemperatureClass, WarehouseLocation
)
from warehouse_slotting.services.ports import SlottingDataSource

# Set up logging
logger = get_logger(__name__)

def _temperature(value: Optional[str]) -> Optional[TemperatureClass]:
    if not value:
        return None
    return TemperatureClass(value.lower())

def stock_card_to_product(card: StockCard) -> Product:
    """Unclassified Product from a stock card row."""
    return Product(
        id=card.id,
        sku=card.sku,
        name=card.product_name or '',
        category=card.category or 'Unknown',
        dimensions=Dimensions(
            length=card.length or 0.0,
            width=card.width or 0.0,
            height=card.height or 0.0,
            weight=card.weight or 0.0,
        ),
        storage_requirements=StorageRequirements(
            temperature=_temperature(card.temperature),
            hazmat=bool(card.hazmat),
            fragile=bool(card.fragile),
            stackable=card.stackable if card.stackable is not None else True,
            max_stack_height=card.max_stack_height,
        ),
    )

def location_to_storage_location(row: WarehouseLocation) -> StorageLocation:
    """StorageLocation snapshot from a warehouse location row."""
    restrictions = None
    if row.temperature or row.hazmat_only or row.max_weight is not None:
        restrictions = LocationRestrictions(
            temperature=_temperature(row.temperature),
            hazmat_only=bool(row.hazmat_only),
            max_weight=row.max_weight,
        )

    return StorageLocation(
        id=row.id,
        code=row.location_code,
        zone=row.zone,
        location_type=LocationType.from_string(row.location_type),
        aisle=row.aisle or '',
        bay=row.rack or '',
        level=row.shelf or '',
        position=row.bin or '',
        coordinates=Coordinates(x=row.x or 0.0, y=row.y or 0.0, z=row.z or 0.0),
        dimensions=LocationDimensions(
            length=row.length or 0.0,
            width=row.width or 0.0,
            height=row.height or 0.0,
            capacity=row.capacity or 0.0,
        ),
        characteristics=LocationCharacteristics(
            accessibility=Accessibility((row.accessibility or 'medium').lower()),
            pickability=row.pickability if row.pickability is not None else 50.0,
            distance_from_dock=row.distance_from_dock or 0.0,
            distance_from_packing=row.distance_from_packing or 0.0,
            ergonomic_level=ErgonomicLevel((row.ergonomic_level or 'standard').lower()),
        ),
        restrictions=restrictions,
        current_occupancy=row.current_occupancy or 0.0,
        current_product=row.item_id,
    )


class SqlAlchemySlottingRepository(SlottingDataSource):
    """Read-only slotting data source over the inventory and location tables."""

    def __init__(
        self,
        session: Session,
        thresholds: Optional[ClassificationThresholds] = None,
        as_of: Optional[datetime] = None
    ):
        """Initialize the repository.

        Args:
            session: Database session
            thresholds: Classification cut points (read from config when omitted)
            as_of: End of the classification window (defaults to now at each fetch)
        """
        self.session = session
        self.thresholds = thresholds or ClassificationThresholds.from_config()
        self.as_of = as_of

    def fetch_products_with_velocity(self, tenant_id: str, warehouse_id: str, since: datetime) -> List[Product]:
        try:
            cards = (
                self.session.query(StockCard)
                .join(Inventory, Inventory.product_id == StockCard.id)
                .filter(StockCard.tenant_id == tenant_id, Inventory.warehouse_id == warehouse_id)
                .order_by(StockCard.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error loading products for warehouse {warehouse_id}: {str(e)}") from e

        try:
            products = [stock_card_to_product(card) for card in cards]
        except ValueError as e:
            raise DataUnavailableError(
                f"Invalid product record in warehouse {warehouse_id}: {str(e)}", code='INVALID_RECORD'
            ) from e

        movements = self.fetch_movements(warehouse_id, since)
        return classify_catalog(products, movements, since, self.as_of or datetime.now(), self.thresholds)

    def fetch_current_location_assignments(self, warehouse_id: str) -> Dict[str, StorageLocation]:
        rows = self._query_locations(warehouse_id, occupied=True)

        assignments = {}
        for row in rows:
            if row.item_id in assignments:
                logger.warning(
                    f"Product {row.item_id} occupies several locations; keeping {assignments[row.item_id].code}"
                )
                continue
            assignments[row.item_id] = self._convert_location(row)
        return assignments

    def fetch_available_locations(self, warehouse_id: str) -> List[StorageLocation]:
        return [self._convert_location(row) for row in self._query_locations(warehouse_id, occupied=False)]

    def fetch_movements(
        self,
        warehouse_id: str,
        since: datetime,
        movement_type: Optional[MovementType] = None
    ) -> List[MovementRecord]:
        try:
            query = self.session.query(InventoryMovement).filter(
                InventoryMovement.warehouse_id == warehouse_id,
                InventoryMovement.created_at >= since
            )
            if movement_type is not None:
                query = query.filter(func.upper(InventoryMovement.movement_type) == movement_type.value)
            rows = query.order_by(InventoryMovement.created_at, InventoryMovement.id).all()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error loading movements for warehouse {warehouse_id}: {str(e)}") from e

        movements = []
        for row in rows:
            try:
                kind = MovementType(row.movement_type.upper())
            except ValueError:
                logger.warning(f"Skipping movement {row.id} with unknown type {row.movement_type}")
                continue
            movements.append(MovementRecord(
                product_id=row.product_id,
                quantity=row.quantity or 0.0,
                movement_type=kind,
                timestamp=row.created_at,
                reference=row.reference,
            ))
        return movements

    def _query_locations(self, warehouse_id: str, occupied: bool) -> List[WarehouseLocation]:
        try:
            query = self.session.query(WarehouseLocation).filter(WarehouseLocation.warehouse_id == warehouse_id)
            if occupied:
                query = query.filter(WarehouseLocation.item_id.isnot(None))
            else:
                query = query.filter(WarehouseLocation.item_id.is_(None))
            return query.order_by(WarehouseLocation.location_code).all()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error loading locations for warehouse {warehouse_id}: {str(e)}") from e

    def _convert_location(self, row: WarehouseLocation) -> StorageLocation:
        try:
            return location_to_storage_location(row)
        except (ValueError, ValidationError) as e:
            raise DataUnavailableError(
                f"Invalid location record {row.location_code}: {str(e)}", code='INVALID_RECORD'
            ) from e


@contextmanager
def open_repository(
    database: Optional[Database] = None,
    thresholds: Optional[ClassificationThresholds] = None,
    as_of: Optional[datetime] = None
):
    """Repository bound to a transactional session of the configured database.

    The session is committed when the block exits normally and rolled back
    when it raises.

    Args:
        database: Database to read from (the global instance when omitted)
        thresholds: Classification cut points (read from config when omitted)
        as_of: End of the classification window

    Yields:
        SqlAlchemySlottingRepository
    """
    database = database or db
    with database.session_scope() as session:
        yield SqlAlchemySlottingRepository(session, thresholds=thresholds, as_of=as_of)
