# warehouse_slotting/models/inventory.py
from sqlalchemy import Column, Integer, String, Float, DateTime, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base

class StockCard(Base):
    """Product master record. Dimensions are stored in centimetres, weight in kilograms."""
    __tablename__ = 'stock_cards'

    id = Column(String(64), primary_key=True)
    tenant_id = Column(String(64), nullable=False)
    sku = Column(String(64), nullable=False)
    product_name = Column(String(255), nullable=False)
    category = Column(String(100))

    length = Column(Float, default=0.0)
    width = Column(Float, default=0.0)
    height = Column(Float, default=0.0)
    weight = Column(Float, default=0.0)

    # Storage requirements
    temperature = Column(String(20))  # ambient, refrigerated, frozen
    hazmat = Column(Boolean, default=False)
    fragile = Column(Boolean, default=False)
    stackable = Column(Boolean, default=True)
    max_stack_height = Column(Integer)

    inventory = relationship("Inventory", back_populates="stock_card")
    movements = relationship("InventoryMovement", back_populates="stock_card")

    __table_args__ = (
        Index('idx_stock_card_tenant_sku', 'tenant_id', 'sku', unique=True),
    )


class Inventory(Base):
    """On-hand stock of a product in a warehouse."""
    __tablename__ = 'inventory'

    id = Column(Integer, primary_key=True)
    warehouse_id = Column(String(64), nullable=False)
    product_id = Column(String(64), ForeignKey('stock_cards.id'), nullable=False)
    quantity = Column(Float, default=0.0)

    stock_card = relationship("StockCard", back_populates="inventory")

    __table_args__ = (
        Index('idx_inventory_warehouse_product', 'warehouse_id', 'product_id', unique=True),
    )


class InventoryMovement(Base):
    """A single stock movement. OUT movements are picks."""
    __tablename__ = 'inventory_movements'

    id = Column(Integer, primary_key=True)
    warehouse_id = Column(String(64), nullable=False)
    product_id = Column(String(64), ForeignKey('stock_cards.id'), nullable=False)
    quantity = Column(Float, nullable=False, default=0.0)
    movement_type = Column(String(20), nullable=False)  # IN, OUT, TRANSFER, ADJUSTMENT
    reference = Column(String(64))  # Order or document number
    created_at = Column(DateTime, default=func.now(), nullable=False)

    stock_card = relationship("StockCard", back_populates="movements")

    __table_args__ = (
        Index('idx_movement_warehouse_date', 'warehouse_id', 'created_at'),
        Index('idx_movement_product', 'product_id'),
    )


class WarehouseLocation(Base):
    """Storage slot snapshot. Capacity is volumetric, in cubic metres."""
    __tablename__ = 'warehouse_locations'

    id = Column(String(64), primary_key=True)
    warehouse_id = Column(String(64), nullable=False)
    location_code = Column(String(32), nullable=False)

    # Hierarchy
    zone = Column(String(20), nullable=False)
    aisle = Column(String(20))
    rack = Column(String(20))
    shelf = Column(String(20))
    bin = Column(String(20))

    # Spatial data
    x = Column(Float, default=0.0)
    y = Column(Float, default=0.0)
    z = Column(Float, default=0.0)
    length = Column(Float, default=0.0)
    width = Column(Float, default=0.0)
    height = Column(Float, default=0.0)
    capacity = Column(Float, nullable=False, default=0.0)

    location_type = Column(String(20), nullable=False, default='pick_face')

    # Characteristics
    accessibility = Column(String(10), default='medium')
    pickability = Column(Float, default=50.0)
    distance_from_dock = Column(Float, default=0.0)
    distance_from_packing = Column(Float, default=0.0)
    ergonomic_level = Column(String(20), default='standard')

    # Restrictions
    temperature = Column(String(20))
    hazmat_only = Column(Boolean, default=False)
    max_weight = Column(Float)

    # Occupancy
    current_occupancy = Column(Float, default=0.0)  # Percentage 0-100
    item_id = Column(String(64), ForeignKey('stock_cards.id'))

    __table_args__ = (
        Index('idx_location_warehouse_code', 'warehouse_id', 'location_code', unique=True),
        Index('idx_location_zone', 'warehouse_id', 'zone'),
    )
