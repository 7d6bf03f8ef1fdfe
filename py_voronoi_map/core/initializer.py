"""
Run initialization: target areas and random seed placement.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, List, Sequence, Tuple

import numpy as np
import structlog

from ..exceptions import ConfigurationError
from .alea_prng import AleaPRNG
from .geometry import bounding_box, polygon_contains

logger = structlog.get_logger()


@dataclass
class Site:
    """Working record of one item during a fitting run.

    Position and weight change at every iteration; the targeted area is
    fixed at initialization.
    """

    index: int
    x: float
    y: float
    weight: float  # power weight, not the item's value
    targeted_area: float
    item: Any

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y


def clamped_weights(items: Sequence, weight: Callable[[Any], float],
                    min_weight_ratio: float) -> np.ndarray:
    """
    Read item weights and floor them to a share of the maximum weight.

    Zero or negative weights would otherwise get no area at all.

    Raises:
        ConfigurationError: on a non-finite weight, or when no weight is positive
    """
    values = []
    for i, item in enumerate(items):
        value = float(weight(item))
        if not math.isfinite(value):
            raise ConfigurationError(f"Item {i} has a non-finite weight ({value})")
        values.append(value)

    values = np.array(values, dtype=float)
    max_weight = values.max()
    if max_weight <= 0:
        raise ConfigurationError("At least one item needs a positive weight")

    min_allowed_weight = max_weight * min_weight_ratio
    return np.maximum(values, min_allowed_weight)


def targeted_areas(weights: np.ndarray, total_area: float) -> np.ndarray:
    """Split the total area proportionally to the weights."""
    return total_area * weights / weights.sum()


def random_point_in(clip: np.ndarray, prng: AleaPRNG, max_attempts: int) -> Tuple[float, float]:
    """
    Draw a point uniformly inside the clip region by rejection sampling.

    Raises:
        ConfigurationError: if no draw lands inside the clip region
    """
    min_x, min_y, max_x, max_y = bounding_box(clip)
    for _ in range(max_attempts):
        x = prng.uniform(min_x, max_x)
        y = prng.uniform(min_y, max_y)
        if polygon_contains(clip, (x, y)):
            return x, y
    raise ConfigurationError(
        f"No point found inside the clip region after {max_attempts} draws"
    )


def initialize_sites(items: Sequence, weight: Callable[[Any], float], min_weight_ratio: float,
                     clip: np.ndarray, total_area: float, prng: AleaPRNG,
                     max_seed_attempts: int = 10000) -> List[Site]:
    """
    Create one site per item, randomly placed inside the clip region.

    Args:
        items: Input items, in order
        weight: Accessor returning an item's weight
        min_weight_ratio: Smallest weight as a share of the largest one
        clip: Convex clip region
        total_area: Area of the clip region
        prng: Generator used for placement
        max_seed_attempts: Rejection sampling bound per site

    Returns:
        List of sites, indexed like the items
    """
    weights = clamped_weights(items, weight, min_weight_ratio)
    areas = targeted_areas(weights, total_area)
    # uniform starting power weight, half of the average cell area
    default_weight = (total_area / len(items)) / 2

    sites = []
    for index, item in enumerate(items):
        x, y = random_point_in(clip, prng, max_seed_attempts)
        sites.append(Site(index=index, x=x, y=y, weight=default_weight,
                          targeted_area=float(areas[index]), item=item))

    logger.debug("Sites initialized", sites=len(sites), default_weight=default_weight,
                 min_targeted_area=float(areas.min()), max_targeted_area=float(areas.max()))
    return sites
