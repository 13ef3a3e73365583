"""
Tests for move cost, savings, payback and priority calculations.
"""
import math
import unittest

from warehouse_slotting.core.parameters import CostParameters
from warehouse_slotting.core.roi import (
    calculate_move_cost, calculate_move_economics, calculate_move_time,
    calculate_payback_period, calculate_priority
)
from warehouse_slotting.models import ABCClass, Velocity


class TestMoveEconomics(unittest.TestCase):

    def test_move_time_and_cost(self):
        self.assertEqual(calculate_move_time(70), 50)
        self.assertEqual(calculate_move_time(1), 16)  # 15.5 rounded up
        self.assertAlmostEqual(calculate_move_cost(50), 87.5)

    def test_high_velocity_move(self):
        economics = calculate_move_economics(25, 70, 70)

        self.assertAlmostEqual(economics.pick_time_savings, 1.4)
        self.assertAlmostEqual(economics.annual_cost_savings, 10645.833333, places=4)
        self.assertAlmostEqual(economics.move_cost, 87.5)
        self.assertAlmostEqual(economics.net_benefit, 10558.333333, places=4)
        self.assertAlmostEqual(economics.payback_period, 3.0)

    def test_travel_delta_sign_ignored(self):
        a = calculate_move_economics(10, 30, 30)
        b = calculate_move_economics(10, -30, 30)
        self.assertEqual(a.annual_cost_savings, b.annual_cost_savings)

    def test_custom_costs(self):
        costs = CostParameters(picker_hourly_rate=60, forklift_hourly_rate=0, move_cost_per_pallet=10)
        economics = calculate_move_economics(1, 10, 10, costs)

        self.assertAlmostEqual(economics.move_cost, 10.0)
        self.assertAlmostEqual(economics.annual_cost_savings, 365 * 0.2)


class TestPaybackGuard(unittest.TestCase):

    def test_zero_savings_has_no_payback(self):
        """A move that saves nothing reports no payback instead of failing."""
        economics = calculate_move_economics(0, 70, 70)

        self.assertEqual(economics.annual_cost_savings, 0.0)
        self.assertIsNone(economics.payback_period)
        self.assertFalse(economics.to_roi().has_payback)
        self.assertLess(economics.net_benefit, 0)

    def test_negative_savings_has_no_payback(self):
        self.assertIsNone(calculate_payback_period(100, -50))

    def test_payback_is_finite(self):
        payback = calculate_payback_period(100, 365)
        self.assertTrue(math.isfinite(payback))
        self.assertAlmostEqual(payback, 100.0)


class TestPriority(unittest.TestCase):

    def test_priority_capped_at_100(self):
        self.assertEqual(calculate_priority(Velocity.HIGH, ABCClass.A, 10000, 3), 100)

    def test_base_priority(self):
        self.assertEqual(calculate_priority(Velocity.LOW, ABCClass.C, 0, None), 50)

    def test_payback_bonus(self):
        self.assertEqual(calculate_priority(Velocity.MEDIUM, ABCClass.B, 100, 10), 60)
        self.assertEqual(calculate_priority(Velocity.MEDIUM, ABCClass.B, 100, 45), 50)


if __name__ == '__main__':
    unittest.main()
