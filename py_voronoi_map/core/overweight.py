"""
Overweight correction.

In a power diagram, site i keeps some area next to site j only if
dist(i, j)^2 >= w_i - w_j. A site whose weight exceeds a neighbour's by more
than their squared distance swallows that neighbour's cell. The correction
scans site pairs and fixes offending weights until no pair violates the
condition.
"""

from enum import Enum
from typing import Sequence

import numpy as np
import structlog

from ..exceptions import InternalConsistencyError

logger = structlog.get_logger()


class OverweightVariant(str, Enum):
    """Heuristics available to fix an overweighted pair."""

    LOWER_HEAVY = "lower-heavy"  # lower the heavier weight
    RAISE_LIGHT = "raise-light"  # raise the lighter weight


def squared_distances(xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Pairwise squared euclidean distances."""
    dx = xs[:, None] - xs[None, :]
    dy = ys[:, None] - ys[None, :]
    return dx ** 2 + dy ** 2


def find_overweighted_pair(sq_dist: np.ndarray, weights: np.ndarray):
    """
    Find the first pair (i < j) whose weight gap exceeds its squared distance.

    Pairs are visited row by row, i.e. in the order of a nested i, j scan.

    Returns:
        (i, j) tuple, or None when every pair is valid
    """
    gaps = np.abs(weights[:, None] - weights[None, :])
    violations = np.triu(sq_dist < gaps, k=1)
    if not violations.any():
        return None
    i, j = np.argwhere(violations)[0]
    return int(i), int(j)


def fix_pair(weights: np.ndarray, i: int, j: int, sq_dist: float,
             variant: OverweightVariant, epsilon: float) -> None:
    """Apply one correction to the weights of pair (i, j), in place."""
    if weights[i] > weights[j]:
        heavier, lighter = i, j
    else:
        heavier, lighter = j, i

    if variant == OverweightVariant.LOWER_HEAVY:
        weights[heavier] = max(sq_dist + weights[lighter] / 2, epsilon)
    else:
        overweight = weights[heavier] - weights[lighter] - sq_dist
        weights[lighter] += overweight + epsilon


def correct_overweighted(sites: Sequence, variant: OverweightVariant = OverweightVariant.RAISE_LIGHT,
                         epsilon: float = 1.0, max_passes: int = 10000) -> int:
    """
    Fix site weights until every pair satisfies dist^2 >= |w_i - w_j|.

    The scan restarts after every fix since a fix may break or repair other
    pairs.

    Args:
        sites: Sites exposing x, y and a writable weight
        variant: Correction heuristic
        epsilon: Weight floor and correction margin
        max_passes: Max number of fixes before giving up

    Returns:
        Number of fixes applied

    Raises:
        InternalConsistencyError: if max_passes fixes were not enough
    """
    if len(sites) < 2:
        return 0

    xs = np.array([site.x for site in sites], dtype=float)
    ys = np.array([site.y for site in sites], dtype=float)
    weights = np.array([site.weight for site in sites], dtype=float)
    sq_dist = squared_distances(xs, ys)

    fix_count = 0
    while True:
        pair = find_overweighted_pair(sq_dist, weights)
        if pair is None:
            break
        if fix_count >= max_passes:
            raise InternalConsistencyError(
                f"Overweight correction did not settle after {fix_count} fixes"
            )
        i, j = pair
        fix_pair(weights, i, j, sq_dist[i, j], variant, epsilon)
        fix_count += 1

    for site, weight in zip(sites, weights):
        site.weight = float(weight)

    if fix_count > 0:
        logger.debug("Overweight fixes applied", fixes=fix_count, variant=variant.value)
    return fix_count
