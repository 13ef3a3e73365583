"""
Tests for the product/location compatibility rules.
"""
import unittest

from warehouse_slotting.core.compatibility import incompatibility_reason, is_compatible
from warehouse_slotting.models import (
    Dimensions, LocationRestrictions, StorageRequirements, TemperatureClass
)
from warehouse_slotting.tests.factories import (
    make_hazmat_location, make_hazmat_product, make_location, make_product
)


class TestCompatibility(unittest.TestCase):

    def setUp(self):
        self.product = make_product('P1', 10, 5)
        self.location = make_location('L1')

    def test_plain_pair_is_compatible(self):
        self.assertTrue(is_compatible(self.product, self.location))
        self.assertIsNone(incompatibility_reason(self.product, self.location))

    def test_temperature_mismatch(self):
        product = make_product(
            'P1', 10, 5, storage_requirements=StorageRequirements(temperature=TemperatureClass.FROZEN)
        )
        location = make_location('L1', restrictions=LocationRestrictions(temperature=TemperatureClass.AMBIENT))

        self.assertFalse(is_compatible(product, location))

    def test_temperature_ignored_when_location_has_none(self):
        product = make_product(
            'P1', 10, 5, storage_requirements=StorageRequirements(temperature=TemperatureClass.FROZEN)
        )
        self.assertTrue(is_compatible(product, self.location))

    def test_hazmat_needs_hazmat_location(self):
        product = make_hazmat_product('P2', 10, 5)

        self.assertFalse(is_compatible(product, self.location))
        self.assertTrue(is_compatible(product, make_hazmat_location('L2')))

    def test_non_hazmat_product_may_use_hazmat_location(self):
        self.assertTrue(is_compatible(self.product, make_hazmat_location('L2')))

    def test_weight_limit(self):
        location = make_location('L1', restrictions=LocationRestrictions(max_weight=5))
        self.assertFalse(is_compatible(self.product, location))

    def test_cube_exceeds_capacity(self):
        product = make_product('P1', 10, 5, dimensions=Dimensions(200, 100, 100, 10))  # 2 m3
        self.assertFalse(is_compatible(product, self.location))

    def test_occupied_by_other_product(self):
        location = make_location('L1', current_product='P9', current_occupancy=40)

        self.assertFalse(is_compatible(self.product, location))
        self.assertIn('P9', incompatibility_reason(self.product, location))

    def test_own_location_is_compatible(self):
        location = make_location('L1', current_product='P1', current_occupancy=40)
        self.assertTrue(is_compatible(self.product, location))

    def test_single_failing_rule_rejects(self):
        """Every other rule passing does not rescue one failure."""
        location = make_hazmat_location('L1', current_product='P9')
        self.assertFalse(is_compatible(make_hazmat_product('P2', 10, 5), location))


if __name__ == '__main__':
    unittest.main()
