# warehouse_slotting/services/seasonal_service.py
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Dict, List, Optional
import numpy as np

from warehouse_slotting.core.classifier import classify_abc, classify_velocity
from warehouse_slotting.core.parameters import SlottingParameters
from warehouse_slotting.exceptions import DataUnavailableError, ValidationError
from warehouse_slotting.logging_setup import get_logger
from warehouse_slotting.models.analyzers import SeasonalAdjustment, SeasonalProduct
from warehouse_slotting.models.slotting import MovementRecord, MovementType, Seasonality
from warehouse_slotting.services.ports import SlottingDataSource
from warehouse_slotting.services.slotting_service import SlottingService, recommendation_sort_key
from warehouse_slotting.utils.date_utils import add_months, window_start

# Set up logging
logger = get_logger(__name__)

DAYS_PER_MONTH = 30

def monthly_totals(movements: List[MovementRecord], since: datetime) -> Dict[str, np.ndarray]:
    """Outbound quantity per product and calendar month (index 0 = January).

    Args:
        movements: Movement history
        since: Movements before this are ignored

    Returns:
        Dictionary of product id to a 12-element array
    """
    totals = {}
    for movement in movements:
        if movement.movement_type != MovementType.OUT or movement.timestamp < since:
            continue
        months = totals.setdefault(movement.product_id, np.zeros(12))
        months[movement.timestamp.month - 1] += abs(movement.quantity or 0.0)
    return totals


class SeasonalService:
    """Time-boxed re-slotting ahead of seasonal demand peaks."""

    def __init__(
        self,
        data_source: SlottingDataSource,
        parameters: Optional[SlottingParameters] = None,
        tenant_id: str = 'default'
    ):
        self.data_source = data_source
        self.parameters = parameters or SlottingParameters.from_config()
        self.slotting_service = SlottingService(data_source, parameters=self.parameters, tenant_id=tenant_id)
        self.recommender = self.slotting_service.recommender

    def seasonal_slotting_adjustment(
        self,
        warehouse_id: str,
        upcoming_months: List[int],
        as_of: Optional[datetime] = None
    ) -> SeasonalAdjustment:
        """Recommend temporary moves for products about to peak.

        A product qualifies when its busiest upcoming month, spread over 30
        days, lands in a faster velocity tier than its current one and its
        seasonality index (peak month / average month) reaches the configured
        minimum.

        Args:
            warehouse_id: Warehouse to analyze
            upcoming_months: Calendar months (1-12) to prepare for
            as_of: Reference date (defaults to now)

        Returns:
            SeasonalAdjustment with implement-by and revert-by dates

        Raises:
            ValidationError: months missing or outside 1-12
            DataUnavailableError: the snapshot or history could not be loaded
        """
        if not upcoming_months or any(not 1 <= m <= 12 for m in upcoming_months):
            raise ValidationError(
                f"Upcoming months must be within 1-12, got {upcoming_months}", code='INVALID_MONTHS'
            )

        settings = self.parameters.analyzers
        thresholds = self.parameters.thresholds
        as_of = as_of or datetime.now()
        since = window_start(as_of, self.parameters.default_options.analysis_horizon_days)

        products, current_locations, available_locations = self.slotting_service.load_snapshot(warehouse_id, since)

        history_since = window_start(as_of, settings.seasonal_history_days)
        try:
            movements = self.data_source.fetch_movements(warehouse_id, history_since, MovementType.OUT)
        except Exception as e:
            raise DataUnavailableError(
                f"Error fetching movement history for warehouse {warehouse_id}: {str(e)}",
                code='FETCH_FAILED',
                details={'warehouse_id': warehouse_id}
            ) from e

        totals_by_product = monthly_totals(movements or [], history_since)
        months = sorted(set(upcoming_months))

        seasonal_products = []
        recommendations = []
        reserved = set()

        for product in products:
            totals = totals_by_product.get(product.id)
            if totals is None or totals.sum() <= 0:
                continue

            upcoming = np.array([totals[m - 1] for m in months])
            peak_month = months[int(np.argmax(upcoming))]
            peak_quantity = float(upcoming.max())
            average_month = float(totals.mean())
            seasonality_index = peak_quantity / average_month

            projected_demand = peak_quantity / DAYS_PER_MONTH
            projected_velocity = classify_velocity(projected_demand, thresholds)

            if projected_velocity.rank <= product.velocity.rank:
                continue
            if seasonality_index < settings.seasonal_min_index:
                logger.debug(f"{product.sku} seasonality index {seasonality_index:.2f} below minimum")
                continue

            projected = replace(
                product,
                average_daily_demand=projected_demand,
                velocity=projected_velocity,
                abc_class=classify_abc(projected_demand, thresholds),
                seasonality=Seasonality(
                    peak_months=tuple(i + 1 for i in range(12) if totals[i] > average_month),
                    seasonality_index=seasonality_index,
                ),
            )

            current = current_locations.get(product.id)
            recommendation = self.recommender.recommend(
                projected, current, available_locations,
                exclude=reserved,
                priority=settings.seasonal_priority,
                reason=f"Seasonal velocity increase from {product.velocity} to {projected_velocity}"
            )

            recommended_zone = None
            if recommendation is not None:
                target = next(loc for loc in available_locations if loc.code == recommendation.recommended_location)
                reserved.add(target.id)
                recommended_zone = target.zone
                recommendations.append(recommendation)

            seasonal_products.append(SeasonalProduct(
                product_id=product.id,
                product_sku=product.sku,
                current_velocity=product.velocity,
                projected_velocity=projected_velocity,
                current_zone=current.zone if current else None,
                recommended_zone=recommended_zone,
                seasonality_index=round(seasonality_index, 2),
                peak_month=peak_month,
            ))

        recommendations.sort(key=recommendation_sort_key)

        implement_by = as_of.date() + timedelta(days=settings.seasonal_lead_days)
        revert_by = add_months(as_of.date(), settings.seasonal_revert_months)

        logger.info(
            f"Seasonal adjustment for warehouse {warehouse_id}, months {months}: "
            f"{len(seasonal_products)} seasonal products, {len(recommendations)} recommendations"
        )

        return SeasonalAdjustment(
            seasonal_products=seasonal_products,
            adjustment_recommendations=recommendations,
            implement_by=implement_by,
            revert_by=revert_by,
        )
