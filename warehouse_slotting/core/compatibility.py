# warehouse_slotting/core/compatibility.py
from typing import Optional

from warehouse_slotting.models.slotting import Product, StorageLocation

def incompatibility_reason(product: Product, location: StorageLocation) -> Optional[str]:
    """Return the first rule a location breaks for a product, or None.

    Args:
        product: Product to place
        location: Candidate location

    Returns:
        Short description of the failed rule, None when compatible
    """
    restrictions = location.restrictions

    # Temperature only matters when both sides declare one
    if product.temperature is not None and restrictions is not None and restrictions.temperature is not None:
        if product.temperature != restrictions.temperature:
            return f"temperature {product.temperature} does not match {restrictions.temperature}"

    if product.is_hazmat and not (restrictions is not None and restrictions.hazmat_only):
        return "hazmat product needs a hazmat location"

    if restrictions is not None and restrictions.max_weight is not None:
        if product.weight > restrictions.max_weight:
            return f"weight {product.weight} exceeds limit {restrictions.max_weight}"

    if product.cube > location.capacity:
        return f"cube {product.cube:.4f} exceeds capacity {location.capacity:.4f}"

    if location.current_product is not None and location.current_product != product.id:
        return f"occupied by {location.current_product}"

    return None

def is_compatible(product: Product, location: StorageLocation) -> bool:
    """Check whether a product may legally occupy a location."""
    return incompatibility_reason(product, location) is None
