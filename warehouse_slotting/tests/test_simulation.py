"""
Tests for the slotting strategy simulation.
"""
import unittest
from unittest.mock import MagicMock

import pytest

from warehouse_slotting.core.parameters import SimulationParameters
from warehouse_slotting.core.simulation import build_implementation_plan, split_moves, validate_strategy
from warehouse_slotting.exceptions import DataUnavailableError, InvalidStrategyError
from warehouse_slotting.models import (
    ExpectedImprovements, RuleType, SlottingRule, SlottingStrategy, WarehouseKPIs
)
from warehouse_slotting.services.ports import KpiSource
from warehouse_slotting.services.simulation_service import SimulationService


def velocity_strategy(**improvements):
    improvements.setdefault('pick_time_reduction', 20)
    improvements.setdefault('travel_reduction', 30)
    improvements.setdefault('productivity_gain', 25)
    return SlottingStrategy(
        name='Velocity based',
        expected_improvements=ExpectedImprovements(**improvements),
        rules=(SlottingRule(RuleType.VELOCITY_BASED, 1, 'velocity == high', 'pick_face', 0.8),),
    )


class TestSimulationService(unittest.TestCase):

    def setUp(self):
        self.parameters = SimulationParameters()
        self.service = SimulationService(parameters=self.parameters)

    def test_pick_time_projection(self):
        """A 20% pick-time reduction on a 2.5 minute baseline gives 2.0 minutes."""
        simulation = self.service.run_slotting_simulation('WH1', velocity_strategy())

        self.assertAlmostEqual(simulation.current_state.average_pick_time, 2.5)
        self.assertAlmostEqual(simulation.projected_state.average_pick_time, 2.0)
        self.assertAlmostEqual(simulation.improvements.pick_time_reduction, 20.0)

    def test_other_kpis_projected(self):
        simulation = self.service.run_slotting_simulation('WH1', velocity_strategy())
        projected = simulation.projected_state

        self.assertAlmostEqual(projected.average_travel_distance, 45 * 0.7)
        self.assertAlmostEqual(projected.productivity_rate, 85 * 1.25)
        self.assertAlmostEqual(projected.space_utilization, 72 * 1.15)
        self.assertAlmostEqual(simulation.improvements.travel_reduction, 30.0)
        self.assertAlmostEqual(simulation.improvements.productivity_gain, 25.0)

    def test_space_utilization_capped(self):
        current = WarehouseKPIs(2.5, 45, 95, 85)
        simulation = self.service.run_slotting_simulation('WH1', velocity_strategy(), current_state=current)
        self.assertEqual(simulation.projected_state.space_utilization, 100.0)

    def test_configured_space_gain(self):
        """Without a strategy-level gain the configured default applies."""
        cfg = MagicMock()
        cfg.simulation_config = {'space_utilization_gain': 20.0, 'moves_per_day': 50}
        cfg.cost_parameters = {'picker_hourly_rate': 50.0}
        parameters = SimulationParameters.from_config(cfg)
        service = SimulationService(parameters=parameters)

        simulation = service.run_slotting_simulation('WH1', velocity_strategy())

        self.assertEqual(parameters.space_utilization_gain, 20.0)
        self.assertAlmostEqual(simulation.projected_state.space_utilization, 72 * 1.2)

    def test_strategy_space_gain_wins(self):
        service = SimulationService(parameters=SimulationParameters(space_utilization_gain=40.0))

        simulation = service.run_slotting_simulation('WH1', velocity_strategy(space_utilization_gain=5))

        self.assertAlmostEqual(simulation.projected_state.space_utilization, 72 * 1.05)

    def test_annual_cost_savings(self):
        simulation = self.service.run_slotting_simulation('WH1', velocity_strategy())

        # 500,000 picks x 0.5 min = 4,166.67 h at 50/h
        self.assertAlmostEqual(simulation.improvements.annual_cost_savings, 500000 * 0.5 / 60 * 50, places=4)

    def test_implementation_plan(self):
        simulation = self.service.run_slotting_simulation('WH1', velocity_strategy())
        plan = simulation.implementation_plan

        self.assertEqual(plan.total_moves, 250)
        self.assertEqual([p.moves_count for p in plan.phased_approach], [150, 75, 25])
        self.assertEqual([p.estimated_days for p in plan.phased_approach], [3, 2, 1])
        self.assertEqual(plan.estimated_duration, 5)
        savings = simulation.improvements.annual_cost_savings
        self.assertAlmostEqual(plan.phased_approach[0].expected_benefit, savings * 0.6)
        self.assertAlmostEqual(sum(p.expected_benefit for p in plan.phased_approach), savings)

    def test_total_moves_override(self):
        simulation = self.service.run_slotting_simulation('WH1', velocity_strategy(), total_moves=7)
        self.assertEqual(sum(p.moves_count for p in simulation.implementation_plan.phased_approach), 7)

    def test_kpi_source_used(self):
        kpi_source = MagicMock(spec=KpiSource)
        kpi_source.fetch_current_kpis.return_value = WarehouseKPIs(3.0, 60, 80, 70)
        service = SimulationService(kpi_source=kpi_source, parameters=self.parameters)

        simulation = service.run_slotting_simulation('WH1', velocity_strategy())

        kpi_source.fetch_current_kpis.assert_called_once_with('WH1')
        self.assertAlmostEqual(simulation.projected_state.average_pick_time, 2.4)

    def test_kpi_source_failure(self):
        kpi_source = MagicMock(spec=KpiSource)
        kpi_source.fetch_current_kpis.side_effect = RuntimeError("metrics store down")
        service = SimulationService(kpi_source=kpi_source, parameters=self.parameters)

        with pytest.raises(DataUnavailableError):
            service.run_slotting_simulation('WH1', velocity_strategy())


class TestStrategyValidation(unittest.TestCase):

    def test_percentage_out_of_range(self):
        with pytest.raises(InvalidStrategyError):
            validate_strategy(velocity_strategy(pick_time_reduction=120))

    def test_negative_percentage(self):
        with pytest.raises(InvalidStrategyError):
            validate_strategy(velocity_strategy(travel_reduction=-5))

    def test_space_gain_out_of_range(self):
        with pytest.raises(InvalidStrategyError):
            validate_strategy(velocity_strategy(space_utilization_gain=150))

    def test_rule_weight_out_of_range(self):
        strategy = SlottingStrategy(
            name='Heavy rule',
            expected_improvements=ExpectedImprovements(pick_time_reduction=10),
            rules=(SlottingRule(RuleType.ABC_BASED, 1, 'abc == A', 'golden', 1.5),),
        )
        with pytest.raises(InvalidStrategyError) as exc_info:
            validate_strategy(strategy)
        self.assertEqual(exc_info.value.code, 'RULE_WEIGHT_RANGE')

    def test_missing_name(self):
        with pytest.raises(InvalidStrategyError):
            validate_strategy(SlottingStrategy(name=' ', expected_improvements=ExpectedImprovements()))

    def test_missing_improvements(self):
        with pytest.raises(InvalidStrategyError):
            validate_strategy(SlottingStrategy(name='Empty', expected_improvements=None))

    def test_rejected_before_projection(self):
        kpi_source = MagicMock(spec=KpiSource)
        service = SimulationService(kpi_source=kpi_source, parameters=SimulationParameters())

        with pytest.raises(InvalidStrategyError):
            service.run_slotting_simulation('WH1', velocity_strategy(productivity_gain=101))

        kpi_source.fetch_current_kpis.assert_not_called()


class TestImplementationPlan(unittest.TestCase):

    def test_split_keeps_every_move(self):
        self.assertEqual(split_moves(10), [6, 3, 1])
        self.assertEqual(split_moves(1), [1, 0, 0])
        self.assertEqual(split_moves(0), [0, 0, 0])

    def test_zero_moves(self):
        plan = build_implementation_plan(0, 1000, 50)
        self.assertEqual(plan.estimated_duration, 0)
        self.assertEqual([p.estimated_days for p in plan.phased_approach], [0, 0, 0])


if __name__ == '__main__':
    unittest.main()
