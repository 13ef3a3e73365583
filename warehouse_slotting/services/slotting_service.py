# warehouse_slotting/services/slotting_service.py
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
import logging

from warehouse_slotting.core.parameters import SlottingParameters
from warehouse_slotting.core.scoring import ScoringEngine
from warehouse_slotting.core.utilization import calculate_zone_utilization
from warehouse_slotting.exceptions import DataUnavailableError, MoveTaskError, SlottingError
from warehouse_slotting.logging_setup import get_logger, logger as run_logger, log_exception
from warehouse_slotting.models.slotting import (
    AnalysisOptions, ImplementationResult, PrioritySummary, Product, SlottingAnalysis,
    SlottingRecommendation, StorageLocation, Velocity, VelocityBucket, ZoneUtilization
)
from warehouse_slotting.services.ports import (
    EventPublisher, LoggingEventPublisher, MoveTaskGateway, SlottingDataSource
)
from warehouse_slotting.services.recommender import AssignmentRecommender
from warehouse_slotting.utils.cancellation import CancellationToken
from warehouse_slotting.utils.date_utils import window_start
from warehouse_slotting.utils.math_utils import percentage

# Set up logging
logger = get_logger(__name__)

HIGH_PRIORITY = 80
MEDIUM_PRIORITY = 50

ANALYSIS_COMPLETED_EVENT = 'slotting.analysis.completed'
RECOMMENDATION_IMPLEMENTED_EVENT = 'slotting.recommendation.implemented'

def recommendation_sort_key(recommendation: SlottingRecommendation) -> Tuple:
    """Informational moves last, then priority and net benefit descending, product id as tie-break."""
    return (
        recommendation.is_informational,
        -recommendation.priority,
        -recommendation.roi.net_benefit,
        recommendation.product_id,
    )

def summarize_recommendations(recommendations: List[SlottingRecommendation]) -> PrioritySummary:
    """Priority-band counts, totals and average ROI of a recommendation list."""
    if not recommendations:
        return PrioritySummary()

    return PrioritySummary(
        high_priority=sum(1 for r in recommendations if r.priority >= HIGH_PRIORITY),
        medium_priority=sum(1 for r in recommendations if MEDIUM_PRIORITY <= r.priority < HIGH_PRIORITY),
        low_priority=sum(1 for r in recommendations if r.priority < MEDIUM_PRIORITY),
        total_potential_savings=sum(r.roi.annual_savings for r in recommendations),
        total_implementation_cost=sum(r.roi.cost_to_move for r in recommendations),
        average_roi=sum(r.roi.roi_ratio for r in recommendations) / len(recommendations),
    )

def known_locations(
    current_locations: Dict[str, StorageLocation],
    available_locations: List[StorageLocation]
) -> List[StorageLocation]:
    """Every location of a snapshot once, current assignments first."""
    seen = set()
    locations = []
    for location in list(current_locations.values()) + list(available_locations):
        if location.id not in seen:
            seen.add(location.id)
            locations.append(location)
    return locations

def velocity_distribution(products: List[Product]) -> Dict[Velocity, VelocityBucket]:
    """Count and share of products per velocity tier."""
    total = len(products)
    distribution = {}
    for velocity in Velocity:
        count = sum(1 for p in products if p.velocity == velocity)
        distribution[velocity] = VelocityBucket(count=count, percentage=percentage(count, total))
    return distribution


class SlottingService:
    """Runs slotting analyses for a warehouse and hands accepted moves to the task system."""

    def __init__(
        self,
        data_source: SlottingDataSource,
        event_publisher: Optional[EventPublisher] = None,
        move_task_gateway: Optional[MoveTaskGateway] = None,
        parameters: Optional[SlottingParameters] = None,
        tenant_id: str = 'default'
    ):
        """Initialize the slotting service.

        Args:
            data_source: Product and location inventory collaborator
            event_publisher: Notification collaborator
            move_task_gateway: Task-execution collaborator used by implement_slotting_recommendation
            parameters: Scoring, cost and run parameters (read from config when omitted)
            tenant_id: Tenant whose catalog is analyzed
        """
        self.data_source = data_source
        self.event_publisher = event_publisher or LoggingEventPublisher()
        self.move_task_gateway = move_task_gateway
        self.parameters = parameters or SlottingParameters.from_config()
        self.tenant_id = tenant_id
        self.recommender = AssignmentRecommender(
            ScoringEngine(self.parameters.weights), self.parameters.costs
        )

    def analyze_slotting(
        self,
        warehouse_id: str,
        options: Optional[AnalysisOptions] = None,
        cancellation_token: Optional[CancellationToken] = None,
        as_of: Optional[datetime] = None
    ) -> SlottingAnalysis:
        """Analyze current slotting and rank recommended moves.

        Args:
            warehouse_id: Warehouse to analyze
            options: Dead-stock, minimum demand and horizon options
            cancellation_token: Token checked between products
            as_of: End of the analysis window (defaults to now)

        Returns:
            SlottingAnalysis, with an empty recommendation list when no move helps

        Raises:
            DataUnavailableError: a fetch failed or the snapshot is unusable
            AnalysisCancelledError: the token fired or the deadline passed
        """
        options = options or self.parameters.default_options
        as_of = as_of or datetime.now()
        since = window_start(as_of, options.analysis_horizon_days)

        log_info = run_logger.run_start_log(
            'slotting analysis',
            {'warehouse_id': warehouse_id, 'horizon_days': options.analysis_horizon_days}
        )

        try:
            products, current_locations, available_locations = self.load_snapshot(warehouse_id, since)

            candidates = [
                p for p in products
                if (options.include_dead_stock or p.velocity != Velocity.DEAD)
                and p.average_daily_demand >= options.min_velocity_threshold
            ]
            logger.info(f"Analyzing {len(candidates)} of {len(products)} products in warehouse {warehouse_id}")

            recommendations = self._recommend_all(
                candidates, current_locations, available_locations, cancellation_token
            )
            recommendations.sort(key=recommendation_sort_key)

            all_locations = known_locations(current_locations, available_locations)
            summary = summarize_recommendations(recommendations)

            analysis = SlottingAnalysis(
                warehouse_id=warehouse_id,
                analysis_date=as_of,
                total_products=len(products),
                products_analyzed=len(candidates),
                recommendations=recommendations,
                summary=summary,
                velocity_distribution=velocity_distribution(products),
                zone_utilization=self.calculate_zone_utilization(all_locations),
            )
        except SlottingError:
            run_logger.run_end_log(log_info, success=False)
            raise

        self._emit(ANALYSIS_COMPLETED_EVENT, {
            'warehouse_id': warehouse_id,
            'recommendations_count': len(recommendations),
            'potential_savings': summary.total_potential_savings,
        })

        run_logger.run_end_log(log_info, success=True, result_info={
            'recommendations': len(recommendations),
            'potential_savings': f"{summary.total_potential_savings:.2f}/year",
        })
        return analysis

    def load_snapshot(
        self,
        warehouse_id: str,
        since: datetime
    ) -> Tuple[List[Product], Dict[str, StorageLocation], List[StorageLocation]]:
        """Fetch and sanity-check the products and locations of one run.

        Raises:
            DataUnavailableError: a fetch failed, or the data is empty or inconsistent
        """
        try:
            products = self.data_source.fetch_products_with_velocity(self.tenant_id, warehouse_id, since)
            current_locations = self.data_source.fetch_current_location_assignments(warehouse_id)
            available_locations = self.data_source.fetch_available_locations(warehouse_id)
        except DataUnavailableError:
            raise
        except Exception as e:
            raise DataUnavailableError(
                f"Error fetching slotting data for warehouse {warehouse_id}: {str(e)}",
                code='FETCH_FAILED',
                details={'warehouse_id': warehouse_id}
            ) from e

        if products is None or current_locations is None or available_locations is None:
            raise DataUnavailableError(
                f"Incomplete slotting data for warehouse {warehouse_id}", code='INCOMPLETE_DATA'
            )

        if not current_locations and not available_locations:
            raise DataUnavailableError(
                f"Warehouse {warehouse_id} has no storage locations", code='NO_LOCATIONS'
            )

        for product_id, location in current_locations.items():
            if location.current_product is not None and location.current_product != product_id:
                raise DataUnavailableError(
                    f"Location {location.code} is assigned to {product_id} but holds {location.current_product}",
                    code='INCONSISTENT_ASSIGNMENT',
                    details={'location': location.code}
                )

        known_products = {p.id for p in products}
        for location in available_locations:
            if location.current_product is not None and location.current_product not in known_products:
                logger.warning(f"Location {location.code} references unknown product {location.current_product}")

        return list(products), dict(current_locations), list(available_locations)

    def _recommend_all(
        self,
        products: List[Product],
        current_locations: Dict[str, StorageLocation],
        available_locations: List[StorageLocation],
        cancellation_token: Optional[CancellationToken]
    ) -> List[SlottingRecommendation]:
        token = cancellation_token or CancellationToken(self.parameters.timeout_seconds)
        total = len(products)

        def work(index: int, product: Product) -> Optional[SlottingRecommendation]:
            token.raise_if_cancelled(details={'products_scored': index, 'products_total': total})
            return self.recommender.recommend(product, current_locations.get(product.id), available_locations)

        max_workers = min(self.parameters.max_workers, total)
        if max_workers <= 1:
            results = [work(index, product) for index, product in enumerate(products)]
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = [executor.submit(work, index, product) for index, product in enumerate(products)]
                results = []
                try:
                    for future in futures:
                        results.append(future.result())
                except Exception:
                    for future in futures:
                        future.cancel()
                    raise

        return [r for r in results if r is not None]

    def calculate_zone_utilization(self, locations: List[StorageLocation]) -> List[ZoneUtilization]:
        """Per-zone capacity use with over/under-utilization advice."""
        return calculate_zone_utilization(locations)

    def implement_slotting_recommendation(
        self,
        recommendation: SlottingRecommendation,
        implemented_by: str
    ) -> ImplementationResult:
        """Hand an accepted recommendation to the task-execution system.

        Args:
            recommendation: Recommendation the caller accepted
            implemented_by: User or process accepting it

        Returns:
            ImplementationResult with the created move task id

        Raises:
            MoveTaskError: no gateway configured or task creation failed
        """
        if self.move_task_gateway is None:
            raise MoveTaskError("No move task gateway configured", code='NO_GATEWAY')

        logger.info(
            f"Implementing slotting recommendation for {recommendation.product_sku}: "
            f"{recommendation.current_location} -> {recommendation.recommended_location}"
        )

        try:
            move_task_id = self.move_task_gateway.create_move_task(recommendation)
        except MoveTaskError:
            raise
        except Exception as e:
            raise MoveTaskError(
                f"Error creating move task for {recommendation.product_sku}: {str(e)}",
                details={'product_id': recommendation.product_id}
            ) from e

        estimated_completion_time = datetime.now() + timedelta(minutes=recommendation.effort.estimated_time)

        self._emit(RECOMMENDATION_IMPLEMENTED_EVENT, {
            'product_id': recommendation.product_id,
            'from_location': recommendation.current_location,
            'to_location': recommendation.recommended_location,
            'move_task_id': move_task_id,
            'implemented_by': implemented_by,
        })

        return ImplementationResult(
            success=True,
            product_id=recommendation.product_id,
            from_location=recommendation.current_location,
            to_location=recommendation.recommended_location,
            move_task_id=move_task_id,
            estimated_completion_time=estimated_completion_time,
        )

    def _emit(self, name: str, payload: Dict[str, Any]) -> None:
        try:
            self.event_publisher.emit(name, payload)
        except Exception as e:
            log_exception(__name__, e, f"Failed to emit {name}", level=logging.WARNING)
