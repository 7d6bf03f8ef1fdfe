"""
Per-iteration adaptation of site positions and weights.

Both adapters work on the cells of the previous diagram and mutate the
sites those cells reference.
"""

from typing import List, Sequence

from .power_diagram import Cell

PLACEMENT_FLICKERING_INFLUENCE = 0.5
WEIGHT_FLICKERING_INFLUENCE = 0.1


def adapt_placements(cells: Sequence[Cell], flickering_ratio: float) -> List:
    """
    Move each site towards the centroid of its cell.

    The move is damped by 1 - 0.5 * flickering_ratio, so a site covers
    between half and all of the way to its centroid.

    Returns:
        The moved sites, in cell order
    """
    damping = 1 - PLACEMENT_FLICKERING_INFLUENCE * flickering_ratio
    sites = []
    for cell in cells:
        site = cell.site
        cx, cy = cell.centroid
        site.x += (cx - site.x) * damping
        site.y += (cy - site.y) * damping
        sites.append(site)
    return sites


def adapt_weights(cells: Sequence[Cell], flickering_ratio: float, epsilon: float) -> List:
    """
    Scale each site's weight by its targeted area over its current area.

    The scaling is clamped to +/-10%, less when flickering, and weights
    never drop below epsilon.

    Returns:
        The reweighted sites, in cell order
    """
    influence = WEIGHT_FLICKERING_INFLUENCE
    damp = influence * flickering_ratio
    low = (1 - influence) + damp
    high = (1 + influence) - damp

    sites = []
    for cell in cells:
        site = cell.site
        adapt_ratio = site.targeted_area / cell.area
        adapt_ratio = min(max(adapt_ratio, low), high)
        site.weight = max(site.weight * adapt_ratio, epsilon)
        sites.append(site)
    return sites
