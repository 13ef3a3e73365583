"""
Tests for the weighted location scoring engine.
"""
import unittest

import pytest

from warehouse_slotting.core.parameters import ScoringWeights
from warehouse_slotting.core.scoring import ScoringEngine
from warehouse_slotting.exceptions import ConfigError
from warehouse_slotting.models import ErgonomicLevel, LocationType
from warehouse_slotting.tests.factories import make_location, make_product


class TestScoringEngine(unittest.TestCase):

    def setUp(self):
        self.engine = ScoringEngine()
        self.product = make_product('P1', 25, 12)

    def test_pick_face_beats_reserve_for_high_velocity(self):
        pick_face = make_location('L1', LocationType.PICK_FACE, 10)
        reserve = make_location('L2', LocationType.RESERVE, 80)

        self.assertGreater(self.engine.score(self.product, pick_face), self.engine.score(self.product, reserve))

    def test_score_components(self):
        location = make_location('L1', LocationType.PICK_FACE, 10, ergonomic_level=ErgonomicLevel.GOLDEN)

        components = self.engine.score_components(self.product, location)

        self.assertAlmostEqual(components['velocity'], 40 * 0.40)
        self.assertAlmostEqual(components['abc_class'], 25 * 0.25)
        self.assertAlmostEqual(components['pick_frequency'], (12 / 30) * 90 * 0.20)
        self.assertEqual(components['space_efficiency'], 0.0)
        self.assertAlmostEqual(components['ergonomics'], 5 * 0.05)

    def test_space_efficiency_band(self):
        # 0.06 m3 in 0.08 m3 is a 75% fill
        location = make_location('L1', capacity=0.08)
        self.assertAlmostEqual(self.engine.space_efficiency_score(self.product, location), 10 * 0.10)

    def test_distance_beyond_ceiling_scores_zero(self):
        location = make_location('L1', LocationType.BULK, 150)
        self.assertEqual(self.engine.pick_frequency_score(self.product, location), 0.0)

    def test_score_is_deterministic(self):
        location = make_location('L1', LocationType.FORWARD, 33.3)
        scores = {self.engine.score(self.product, location) for _ in range(5)}
        self.assertEqual(len(scores), 1)

    def test_custom_weights(self):
        engine = ScoringEngine(ScoringWeights(velocity=1.0, abc_class=0, pick_frequency=0,
                                              space_efficiency=0, ergonomics=0))
        location = make_location('L1', LocationType.PICK_FACE, 10)
        self.assertAlmostEqual(engine.score(self.product, location), 40.0)


class TestScoringWeights(unittest.TestCase):

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ConfigError):
            ScoringWeights(velocity=0.5)

    def test_weights_must_be_in_range(self):
        with pytest.raises(ConfigError):
            ScoringWeights(velocity=1.2, abc_class=-0.2, pick_frequency=0, space_efficiency=0, ergonomics=0)


if __name__ == '__main__':
    unittest.main()
