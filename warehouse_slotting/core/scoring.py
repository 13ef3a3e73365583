# warehouse_slotting/core/scoring.py
from typing import Dict, Optional

from warehouse_slotting.core.parameters import ScoringWeights
from warehouse_slotting.models.slotting import (
    ABCClass, ErgonomicLevel, LocationType, Product, StorageLocation, Velocity
)
from warehouse_slotting.utils.math_utils import percentage

# Raw bonus for a velocity tier stored in its matching location type
VELOCITY_MATCH_BONUS = {
    Velocity.HIGH: (LocationType.PICK_FACE, 40.0),
    Velocity.MEDIUM: (LocationType.FORWARD, 30.0),
    Velocity.LOW: (LocationType.RESERVE, 25.0),
}

# Raw bonus for an ABC class stored at its matching ergonomic level
ABC_MATCH_BONUS = {
    ABCClass.A: (ErgonomicLevel.GOLDEN, 25.0),
    ABCClass.B: (ErgonomicLevel.STANDARD, 20.0),
}

PICK_FREQUENCY_NORMALIZER = 30.0
DOCK_DISTANCE_CEILING = 100.0

SPACE_FILL_LOWER = 60.0
SPACE_FILL_UPPER = 90.0
SPACE_EFFICIENCY_BONUS = 10.0

ERGONOMIC_PICK_FREQUENCY = 10.0
ERGONOMIC_BONUS = 5.0


class ScoringEngine:
    """Weighted fit score of a product in a location.

    The score is a plain sum of weighted sub-scores, so it is monotonic in
    each of them and identical inputs always give identical scores.
    """

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or ScoringWeights()

    def velocity_score(self, product: Product, location: StorageLocation) -> float:
        match = VELOCITY_MATCH_BONUS.get(product.velocity)
        if match and location.location_type == match[0]:
            return match[1] * self.weights.velocity
        return 0.0

    def abc_score(self, product: Product, location: StorageLocation) -> float:
        match = ABC_MATCH_BONUS.get(product.abc_class)
        if match and location.ergonomic_level == match[0]:
            return match[1] * self.weights.abc_class
        return 0.0

    def pick_frequency_score(self, product: Product, location: StorageLocation) -> float:
        distance_score = max(0.0, DOCK_DISTANCE_CEILING - location.distance_from_dock)
        return (product.pick_frequency / PICK_FREQUENCY_NORMALIZER) * distance_score * self.weights.pick_frequency

    def space_efficiency_score(self, product: Product, location: StorageLocation) -> float:
        fill = percentage(product.cube, location.capacity)
        if SPACE_FILL_LOWER < fill < SPACE_FILL_UPPER:
            return SPACE_EFFICIENCY_BONUS * self.weights.space_efficiency
        return 0.0

    def ergonomics_score(self, product: Product, location: StorageLocation) -> float:
        if product.pick_frequency > ERGONOMIC_PICK_FREQUENCY and location.ergonomic_level == ErgonomicLevel.GOLDEN:
            return ERGONOMIC_BONUS * self.weights.ergonomics
        return 0.0

    def score_components(self, product: Product, location: StorageLocation) -> Dict[str, float]:
        """Weighted sub-scores keyed by name."""
        return {
            'velocity': self.velocity_score(product, location),
            'abc_class': self.abc_score(product, location),
            'pick_frequency': self.pick_frequency_score(product, location),
            'space_efficiency': self.space_efficiency_score(product, location),
            'ergonomics': self.ergonomics_score(product, location),
        }

    def score(self, product: Product, location: StorageLocation) -> float:
        """Total fit score, never negative."""
        components = self.score_components(product, location)
        return max(0.0, sum(components[key] for key in sorted(components)))
