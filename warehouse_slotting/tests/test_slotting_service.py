"""
Tests for the slotting analysis orchestrator.
"""
import itertools
import unittest
from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest

from warehouse_slotting.core.parameters import SlottingParameters
from warehouse_slotting.core.utilization import (
    OVER_UTILIZED_ADVICE, UNDER_UTILIZED_ADVICE, calculate_zone_utilization
)
from warehouse_slotting.exceptions import (
    AnalysisCancelledError, DataUnavailableError, MoveTaskError
)
from warehouse_slotting.models import AnalysisOptions, LocationType, Velocity
from warehouse_slotting.services.ports import EventPublisher, MoveTaskGateway, SlottingDataSource
from warehouse_slotting.services.slotting_service import (
    ANALYSIS_COMPLETED_EVENT, RECOMMENDATION_IMPLEMENTED_EVENT, SlottingService
)
from warehouse_slotting.tests.factories import make_location, make_product
from warehouse_slotting.utils.cancellation import CancellationToken


class TestSlottingService(unittest.TestCase):

    def setUp(self):
        """Set up a three-product snapshot: one fast mover, one medium mover, one dead item."""
        self.as_of = datetime(2026, 6, 30, 8, 0)

        self.products = [
            make_product('P1', 25, 12),
            make_product('P2', 10, 6),
            make_product('P3', 0, 0),
        ]
        self.current = {
            'P1': make_location('R1', LocationType.RESERVE, 80, zone='B', current_product='P1', current_occupancy=30),
            'P2': make_location('R2', LocationType.RESERVE, 60, zone='B', current_product='P2', current_occupancy=20),
        }
        self.available = [
            make_location('PF1', LocationType.PICK_FACE, 10),
            make_location('FW1', LocationType.FORWARD, 15),
        ]

        self.data_source = MagicMock(spec=SlottingDataSource)
        self.data_source.fetch_products_with_velocity.return_value = self.products
        self.data_source.fetch_current_location_assignments.return_value = self.current
        self.data_source.fetch_available_locations.return_value = self.available

        self.publisher = MagicMock(spec=EventPublisher)
        self.gateway = MagicMock(spec=MoveTaskGateway)
        self.parameters = SlottingParameters()

        self.service = SlottingService(
            self.data_source,
            event_publisher=self.publisher,
            move_task_gateway=self.gateway,
            parameters=self.parameters
        )

    def test_analysis_ranks_recommendations(self):
        analysis = self.service.analyze_slotting('WH1', as_of=self.as_of)

        self.assertEqual([r.product_id for r in analysis.recommendations], ['P1', 'P2'])
        self.assertEqual(analysis.recommendations[0].recommended_location, 'PF1')
        self.assertEqual(analysis.recommendations[1].recommended_location, 'FW1')
        self.assertEqual(analysis.total_products, 3)
        self.assertEqual(analysis.products_analyzed, 2)
        self.assertEqual(analysis.analysis_date, self.as_of)

    def test_window_passed_to_data_source(self):
        self.service.analyze_slotting('WH1', AnalysisOptions(analysis_horizon_days=30), as_of=self.as_of)

        self.data_source.fetch_products_with_velocity.assert_called_once_with(
            'default', 'WH1', self.as_of - timedelta(days=30)
        )

    def test_summary(self):
        analysis = self.service.analyze_slotting('WH1', as_of=self.as_of)
        summary = analysis.summary

        self.assertEqual(summary.high_priority, 1)
        self.assertEqual(summary.medium_priority, 1)
        self.assertEqual(summary.low_priority, 0)
        self.assertAlmostEqual(summary.total_potential_savings, 10645.833333 + 2737.5, places=3)
        self.assertAlmostEqual(summary.total_implementation_cost, 87.5 + 72.5)
        expected_roi = (10645.833333 / 87.5 + 2737.5 / 72.5) / 2
        self.assertAlmostEqual(summary.average_roi, expected_roi, places=3)

    def test_velocity_distribution_counts_every_product(self):
        analysis = self.service.analyze_slotting('WH1', as_of=self.as_of)
        distribution = analysis.velocity_distribution

        self.assertEqual(distribution[Velocity.HIGH].count, 1)
        self.assertEqual(distribution[Velocity.MEDIUM].count, 1)
        self.assertEqual(distribution[Velocity.LOW].count, 0)
        self.assertEqual(distribution[Velocity.DEAD].count, 1)
        self.assertAlmostEqual(distribution[Velocity.DEAD].percentage, 100 / 3)

    def test_zone_utilization_covers_all_locations(self):
        analysis = self.service.analyze_slotting('WH1', as_of=self.as_of)
        zones = {z.zone: z for z in analysis.zone_utilization}

        self.assertEqual(sorted(zones), ['A', 'B'])
        self.assertAlmostEqual(zones['B'].utilized, 0.5)
        self.assertAlmostEqual(zones['B'].utilization_rate, 25.0)
        self.assertIn(UNDER_UTILIZED_ADVICE, zones['B'].recommendations)

    def test_dead_stock_included_on_request(self):
        """Dead stock placements save nothing and rank last."""
        options = AnalysisOptions(include_dead_stock=True)

        analysis = self.service.analyze_slotting('WH1', options, as_of=self.as_of)

        self.assertEqual(analysis.products_analyzed, 3)
        self.assertEqual(analysis.recommendations[-1].product_id, 'P3')
        self.assertTrue(analysis.recommendations[-1].is_informational)

    def test_min_velocity_threshold(self):
        options = AnalysisOptions(min_velocity_threshold=15)

        analysis = self.service.analyze_slotting('WH1', options, as_of=self.as_of)

        self.assertEqual([r.product_id for r in analysis.recommendations], ['P1'])
        self.assertEqual(analysis.products_analyzed, 1)

    def test_analysis_is_idempotent(self):
        first = self.service.analyze_slotting('WH1', as_of=self.as_of)
        second = self.service.analyze_slotting('WH1', as_of=self.as_of)

        self.assertEqual(first.recommendations, second.recommendations)

    def test_parallel_and_sequential_agree(self):
        sequential = SlottingService(
            self.data_source,
            event_publisher=self.publisher,
            parameters=SlottingParameters(max_workers=1)
        )

        expected = sequential.analyze_slotting('WH1', as_of=self.as_of).recommendations
        actual = self.service.analyze_slotting('WH1', as_of=self.as_of).recommendations

        self.assertEqual(actual, expected)

    def test_analysis_does_not_mutate_snapshot(self):
        self.service.analyze_slotting('WH1', as_of=self.as_of)

        self.assertEqual(self.current['P1'].current_product, 'P1')
        self.assertIsNone(self.available[0].current_product)
        self.gateway.create_move_task.assert_not_called()

    def test_completion_event(self):
        analysis = self.service.analyze_slotting('WH1', as_of=self.as_of)

        self.publisher.emit.assert_called_once_with(ANALYSIS_COMPLETED_EVENT, {
            'warehouse_id': 'WH1',
            'recommendations_count': 2,
            'potential_savings': analysis.summary.total_potential_savings,
        })

    def test_event_failure_does_not_fail_analysis(self):
        self.publisher.emit.side_effect = RuntimeError("broker down")

        with self.assertLogs('warehouse_slotting.services.slotting_service', level='WARNING') as logs:
            analysis = self.service.analyze_slotting('WH1', as_of=self.as_of)

        self.assertEqual(len(analysis.recommendations), 2)
        self.assertIn('broker down', logs.output[0])

    def test_empty_catalog_gives_empty_analysis(self):
        self.data_source.fetch_products_with_velocity.return_value = []

        analysis = self.service.analyze_slotting('WH1', as_of=self.as_of)

        self.assertEqual(analysis.recommendations, [])
        self.assertEqual(analysis.total_products, 0)
        self.assertEqual(analysis.summary.average_roi, 0.0)
        self.assertEqual(analysis.velocity_distribution[Velocity.HIGH].percentage, 0.0)

    def test_fetch_failure_raises_data_unavailable(self):
        self.data_source.fetch_available_locations.side_effect = ConnectionError("timeout")

        with pytest.raises(DataUnavailableError) as exc_info:
            self.service.analyze_slotting('WH1', as_of=self.as_of)

        self.assertEqual(exc_info.value.code, 'FETCH_FAILED')
        self.publisher.emit.assert_not_called()

    def test_no_locations_raises_data_unavailable(self):
        self.data_source.fetch_current_location_assignments.return_value = {}
        self.data_source.fetch_available_locations.return_value = []

        with pytest.raises(DataUnavailableError) as exc_info:
            self.service.analyze_slotting('WH1', as_of=self.as_of)

        self.assertEqual(exc_info.value.code, 'NO_LOCATIONS')

    def test_inconsistent_assignment_raises_data_unavailable(self):
        self.current['P2'] = make_location('R2', LocationType.RESERVE, 60, zone='B', current_product='P9')

        with pytest.raises(DataUnavailableError) as exc_info:
            self.service.analyze_slotting('WH1', as_of=self.as_of)

        self.assertEqual(exc_info.value.code, 'INCONSISTENT_ASSIGNMENT')

    def test_cancelled_token_aborts(self):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(AnalysisCancelledError) as exc_info:
            self.service.analyze_slotting('WH1', cancellation_token=token, as_of=self.as_of)

        self.assertEqual(exc_info.value.code, 'CANCELLED')
        self.assertEqual(exc_info.value.details['products_total'], 2)
        self.publisher.emit.assert_not_called()

    def test_cancellation_checked_between_products(self):
        token = MagicMock(spec=CancellationToken)
        token.raise_if_cancelled.side_effect = [None, AnalysisCancelledError(code='CANCELLED')]
        service = SlottingService(
            self.data_source, event_publisher=self.publisher, parameters=SlottingParameters(max_workers=1)
        )

        with pytest.raises(AnalysisCancelledError):
            service.analyze_slotting('WH1', cancellation_token=token, as_of=self.as_of)

        self.assertEqual(token.raise_if_cancelled.call_count, 2)

    @patch('warehouse_slotting.utils.cancellation.time.monotonic', side_effect=itertools.count(100, 10))
    def test_configured_deadline_aborts(self, _monotonic):
        """A run that outlives timeout_seconds stops before scoring the next product."""
        service = SlottingService(
            self.data_source,
            event_publisher=self.publisher,
            parameters=SlottingParameters(max_workers=1, timeout_seconds=5)
        )

        with pytest.raises(AnalysisCancelledError) as exc_info:
            service.analyze_slotting('WH1', as_of=self.as_of)

        self.assertEqual(exc_info.value.code, 'DEADLINE_EXCEEDED')
        self.assertEqual(exc_info.value.details['products_scored'], 0)
        self.publisher.emit.assert_not_called()

    def test_expired_token_aborts(self):
        with patch('warehouse_slotting.utils.cancellation.time.monotonic', return_value=100.0):
            token = CancellationToken(timeout_seconds=5)

        with patch('warehouse_slotting.utils.cancellation.time.monotonic', return_value=106.0):
            self.assertTrue(token.deadline_exceeded)
            with pytest.raises(AnalysisCancelledError) as exc_info:
                self.service.analyze_slotting('WH1', cancellation_token=token, as_of=self.as_of)

        self.assertEqual(exc_info.value.code, 'DEADLINE_EXCEEDED')
        self.publisher.emit.assert_not_called()


class TestImplementRecommendation(unittest.TestCase):

    def setUp(self):
        self.publisher = MagicMock(spec=EventPublisher)
        self.gateway = MagicMock(spec=MoveTaskGateway)
        self.gateway.create_move_task.return_value = 'MT-001'

        self.data_source = MagicMock(spec=SlottingDataSource)
        self.service = SlottingService(
            self.data_source,
            event_publisher=self.publisher,
            move_task_gateway=self.gateway,
            parameters=SlottingParameters()
        )

        current = make_location('R1', LocationType.RESERVE, 80, current_product='P1')
        target = make_location('PF1', LocationType.PICK_FACE, 10)
        self.recommendation = self.service.recommender.recommend(make_product('P1', 25, 12), current, [target])

    def test_creates_move_task(self):
        before = datetime.now()

        result = self.service.implement_slotting_recommendation(self.recommendation, 'planner')

        self.assertTrue(result.success)
        self.assertEqual(result.move_task_id, 'MT-001')
        self.assertEqual(result.from_location, 'R1')
        self.assertEqual(result.to_location, 'PF1')
        self.assertGreaterEqual(result.estimated_completion_time, before + timedelta(minutes=50))
        self.gateway.create_move_task.assert_called_once_with(self.recommendation)

        name, payload = self.publisher.emit.call_args[0]
        self.assertEqual(name, RECOMMENDATION_IMPLEMENTED_EVENT)
        self.assertEqual(payload['implemented_by'], 'planner')

    def test_missing_gateway(self):
        service = SlottingService(self.data_source, parameters=SlottingParameters())

        with pytest.raises(MoveTaskError):
            service.implement_slotting_recommendation(self.recommendation, 'planner')

    def test_gateway_failure(self):
        self.gateway.create_move_task.side_effect = RuntimeError("task system unavailable")

        with pytest.raises(MoveTaskError):
            self.service.implement_slotting_recommendation(self.recommendation, 'planner')

        self.publisher.emit.assert_not_called()


class TestZoneUtilization(unittest.TestCase):

    def test_over_utilized_zone(self):
        """1000 m3 zone holding 950 m3."""
        locations = [
            make_location('L1', zone='C', capacity=600, current_occupancy=95),
            make_location('L2', zone='C', capacity=400, current_occupancy=95),
        ]

        zones = calculate_zone_utilization(locations)

        self.assertEqual(len(zones), 1)
        self.assertAlmostEqual(zones[0].capacity, 1000.0)
        self.assertAlmostEqual(zones[0].utilized, 950.0)
        self.assertAlmostEqual(zones[0].utilization_rate, 95.0)
        self.assertIn(OVER_UTILIZED_ADVICE, zones[0].recommendations)
        self.assertIn('over-utilized', zones[0].recommendations[0])

    def test_balanced_zone_has_no_advice(self):
        zones = calculate_zone_utilization([make_location('L1', capacity=100, current_occupancy=70)])
        self.assertEqual(zones[0].recommendations, ())

    def test_zero_capacity_zone(self):
        zones = calculate_zone_utilization([make_location('L1', capacity=0)])
        self.assertEqual(zones[0].utilization_rate, 0.0)

    def test_duplicate_locations_counted_once(self):
        location = make_location('L1', capacity=100, current_occupancy=95)
        zones = calculate_zone_utilization([location, location])
        self.assertAlmostEqual(zones[0].capacity, 100.0)


if __name__ == '__main__':
    unittest.main()
