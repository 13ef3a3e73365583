# warehouse_slotting/services/simulation_service.py
from typing import Optional

from warehouse_slotting.core.parameters import SimulationParameters
from warehouse_slotting.core.simulation import (
    build_implementation_plan, calculate_improvements, project_state, validate_strategy
)
from warehouse_slotting.exceptions import DataUnavailableError, InvalidStrategyError
from warehouse_slotting.logging_setup import get_logger
from warehouse_slotting.models.simulation import SlottingSimulation, SlottingStrategy, WarehouseKPIs
from warehouse_slotting.models.slotting import SlottingAnalysis
from warehouse_slotting.services.ports import KpiSource

# Set up logging
logger = get_logger(__name__)

class SimulationService:
    """What-if projection of a slotting strategy against current warehouse KPIs."""

    def __init__(
        self,
        kpi_source: Optional[KpiSource] = None,
        parameters: Optional[SimulationParameters] = None
    ):
        """Initialize the simulation service.

        Args:
            kpi_source: Provider of current KPIs; configured baseline used when None
            parameters: Baseline KPIs, pick volume and move planning constants
        """
        self.kpi_source = kpi_source
        self.parameters = parameters or SimulationParameters.from_config()

    def baseline_kpis(self) -> WarehouseKPIs:
        """Configured fallback KPI snapshot."""
        return WarehouseKPIs(
            average_pick_time=self.parameters.average_pick_time,
            average_travel_distance=self.parameters.average_travel_distance,
            space_utilization=self.parameters.space_utilization,
            productivity_rate=self.parameters.productivity_rate,
        )

    def get_current_state(self, warehouse_id: str) -> WarehouseKPIs:
        """Current KPIs from the KPI source, or the configured baseline.

        Raises:
            DataUnavailableError: the KPI source failed
        """
        if self.kpi_source is None:
            return self.baseline_kpis()

        try:
            kpis = self.kpi_source.fetch_current_kpis(warehouse_id)
        except Exception as e:
            raise DataUnavailableError(
                f"Error fetching KPIs for warehouse {warehouse_id}: {str(e)}",
                code='KPI_FETCH_FAILED',
                details={'warehouse_id': warehouse_id}
            ) from e

        if kpis is None:
            logger.warning(f"No KPIs reported for warehouse {warehouse_id}, using configured baseline")
            return self.baseline_kpis()
        return kpis

    def run_slotting_simulation(
        self,
        warehouse_id: str,
        strategy: SlottingStrategy,
        current_state: Optional[WarehouseKPIs] = None,
        total_moves: Optional[int] = None,
        analysis: Optional[SlottingAnalysis] = None
    ) -> SlottingSimulation:
        """Project the effect of a strategy and plan its rollout.

        Args:
            warehouse_id: Warehouse to simulate
            strategy: Strategy with expected improvement percentages
            current_state: Explicit baseline KPIs (overrides the KPI source)
            total_moves: Number of moves to plan; taken from the analysis or config when None
            analysis: Analysis whose recommendation count sizes the plan

        Returns:
            SlottingSimulation

        Raises:
            InvalidStrategyError: the strategy fails validation
        """
        try:
            validate_strategy(strategy)
        except InvalidStrategyError as e:
            logger.error(f"Rejected slotting strategy for warehouse {warehouse_id}: {str(e)}")
            raise

        current = current_state or self.get_current_state(warehouse_id)
        projected = project_state(
            current, strategy.expected_improvements, self.parameters.space_utilization_gain
        )
        improvements = calculate_improvements(current, projected, self.parameters)

        if total_moves is None:
            if analysis is not None:
                total_moves = len(analysis.recommendations)
            else:
                total_moves = self.parameters.total_moves

        plan = build_implementation_plan(
            total_moves, improvements.annual_cost_savings, self.parameters.moves_per_day
        )

        logger.info(
            f"Simulated strategy '{strategy.name}' for warehouse {warehouse_id}: "
            f"pick time {current.average_pick_time:.2f} -> {projected.average_pick_time:.2f} min, "
            f"annual savings {improvements.annual_cost_savings:.2f}, {plan.total_moves} moves"
        )

        return SlottingSimulation(
            strategy=strategy,
            current_state=current,
            projected_state=projected,
            improvements=improvements,
            implementation_plan=plan,
        )
