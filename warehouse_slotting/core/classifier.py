# warehouse_slotting/core/classifier.py
from dataclasses import replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional
import numpy as np

from warehouse_slotting.core.parameters import ClassificationThresholds
from warehouse_slotting.models.slotting import (
    ABCClass, MovementRecord, MovementType, Product, Velocity
)
from warehouse_slotting.utils.date_utils import window_days

DEFAULT_THRESHOLDS = ClassificationThresholds()

# Cumulative demand share bands for value-based ABC
PARETO_A_LIMIT = 80.0
PARETO_B_LIMIT = 95.0

def classify_velocity(
    average_daily_demand: float,
    thresholds: ClassificationThresholds = DEFAULT_THRESHOLDS
) -> Velocity:
    """Classify a daily demand rate into a velocity tier.

    Cut points are strict: demand exactly on a threshold falls into the
    lower tier.

    Args:
        average_daily_demand: Average units per day
        thresholds: Demand cut points

    Returns:
        Velocity tier
    """
    if average_daily_demand > thresholds.high_velocity_demand:
        return Velocity.HIGH
    if average_daily_demand > thresholds.medium_velocity_demand:
        return Velocity.MEDIUM
    if average_daily_demand > 0:
        return Velocity.LOW
    return Velocity.DEAD

def classify_abc(
    average_daily_demand: float,
    thresholds: ClassificationThresholds = DEFAULT_THRESHOLDS
) -> ABCClass:
    """Threshold-based ABC class using the velocity cut points."""
    if average_daily_demand > thresholds.high_velocity_demand:
        return ABCClass.A
    if average_daily_demand > thresholds.medium_velocity_demand:
        return ABCClass.B
    return ABCClass.C

def classify_abc_pareto(demand_by_product: Dict[str, float]) -> Dict[str, ABCClass]:
    """Pareto ABC classification over a catalog.

    Products are ranked by demand; A covers the first 80% of cumulative
    demand, B the next 15% and C the rest. Ties are broken by product id.

    Args:
        demand_by_product: Demand per product id

    Returns:
        ABC class per product id
    """
    if not demand_by_product:
        return {}

    ranked = sorted(demand_by_product.items(), key=lambda x: (-x[1], x[0]))
    demand = np.array([max(0.0, value) for _, value in ranked], dtype=float)
    total = demand.sum()

    if total <= 0:
        return {pid: ABCClass.C for pid, _ in ranked}

    cumulative_pct = np.cumsum(demand) / total * 100.0

    classes = {}
    for (pid, value), pct in zip(ranked, cumulative_pct):
        if value <= 0:
            classes[pid] = ABCClass.C
        elif pct <= PARETO_A_LIMIT:
            classes[pid] = ABCClass.A
        elif pct <= PARETO_B_LIMIT:
            classes[pid] = ABCClass.B
        else:
            classes[pid] = ABCClass.C
    return classes

def classify_product(
    product: Product,
    movements: Iterable[MovementRecord],
    since: datetime,
    as_of: Optional[datetime] = None,
    thresholds: ClassificationThresholds = DEFAULT_THRESHOLDS
) -> Product:
    """Derive demand, pick frequency, velocity and ABC class from movement history.

    Only movements of this product at or after ``since`` are counted. A
    product without movements comes back as dead / C with zero demand.
    Quantities are summed by absolute value: outbound picks are often stored
    as negative quantities, and a negative adjustment is still stock handled.

    Args:
        product: Product to classify
        movements: Movement records (may include other products)
        since: Start of the trailing window
        as_of: End of the window (defaults to now)
        thresholds: Demand cut points

    Returns:
        A new Product with the classification fields filled in
    """
    as_of = as_of or datetime.now()
    days = window_days(since, as_of)

    total_quantity = 0.0
    picks = 0
    for movement in movements:
        if movement.product_id != product.id or movement.timestamp < since:
            continue
        total_quantity += abs(movement.quantity or 0.0)
        if movement.movement_type == MovementType.OUT:
            picks += 1

    average_daily_demand = total_quantity / days
    pick_frequency = picks / days

    return replace(
        product,
        average_daily_demand=average_daily_demand,
        pick_frequency=pick_frequency,
        velocity=classify_velocity(average_daily_demand, thresholds),
        abc_class=classify_abc(average_daily_demand, thresholds),
    )

def classify_catalog(
    products: Iterable[Product],
    movements: Iterable[MovementRecord],
    since: datetime,
    as_of: Optional[datetime] = None,
    thresholds: ClassificationThresholds = DEFAULT_THRESHOLDS
) -> List[Product]:
    """Classify every product of a catalog against one movement history.

    With ``thresholds.abc_method == 'pareto'`` the ABC class is re-derived
    from each product's share of total catalog demand.
    """
    as_of = as_of or datetime.now()

    by_product: Dict[str, List[MovementRecord]] = {}
    for movement in movements:
        by_product.setdefault(movement.product_id, []).append(movement)

    classified = [
        classify_product(product, by_product.get(product.id, []), since, as_of, thresholds)
        for product in products
    ]

    if thresholds.abc_method == 'pareto':
        pareto = classify_abc_pareto({p.id: p.average_daily_demand for p in classified})
        classified = [replace(p, abc_class=pareto[p.id]) for p in classified]

    return classified
