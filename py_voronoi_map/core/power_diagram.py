"""
Clipped power diagram (additively weighted Voronoi diagram).

The cell of site i is the set of points p of the clip region for which
|p - s_i|^2 - w_i is minimal among all sites. Each cell is built by cutting
the convex clip region with the half-plane bisectors against every other
site, so cells of a convex clip are convex too.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import numpy as np
import structlog

from .geometry import AREA_TOLERANCE, polygon_area, polygon_centroid

logger = structlog.get_logger()


@dataclass
class Cell:
    """A power cell: counter-clockwise boundary points and the owning site."""

    points: np.ndarray
    site: Any

    @property
    def area(self) -> float:
        return polygon_area(self.points)

    @property
    def centroid(self) -> np.ndarray:
        return polygon_centroid(self.points)

    def __len__(self) -> int:
        return len(self.points)


def clip_half_plane(polygon: np.ndarray, a: float, b: float, c: float) -> Optional[np.ndarray]:
    """
    Keep the part of a convex polygon where a*x + b*y <= c.

    One Sutherland-Hodgman pass against a single edge.

    Args:
        polygon: (n, 2) counter-clockwise convex polygon
        a, b, c: Half-plane coefficients

    Returns:
        Clipped polygon, or None if less than a triangle remains
    """
    values = polygon @ np.array([a, b]) - c
    if np.all(values <= 0):
        return polygon
    if np.all(values >= 0):
        return None

    clipped = []
    n = len(polygon)
    for k in range(n):
        p = polygon[k]
        q = polygon[(k + 1) % n]
        vp = values[k]
        vq = values[(k + 1) % n]
        if vp <= 0:
            clipped.append(p)
        if (vp < 0 < vq) or (vq < 0 < vp):
            t = vp / (vp - vq)
            clipped.append(p + t * (q - p))

    if len(clipped) < 3:
        return None
    return np.array(clipped)


def compute_power_cell(index: int, xs: np.ndarray, ys: np.ndarray, ws: np.ndarray,
                       clip: np.ndarray) -> Optional[np.ndarray]:
    """
    Build the power cell of one site.

    Args:
        index: Site whose cell is built
        xs, ys, ws: Coordinates and weights of all sites
        clip: Counter-clockwise convex clip region

    Returns:
        Cell polygon, or None if the site has no area
    """
    squared_norms = xs ** 2 + ys ** 2
    # |p - s_i|^2 - w_i <= |p - s_j|^2 - w_j
    # <=> 2 (s_j - s_i) . p <= |s_j|^2 - |s_i|^2 - w_j + w_i
    a = 2.0 * (xs - xs[index])
    b = 2.0 * (ys - ys[index])
    c = squared_norms - squared_norms[index] - ws + ws[index]

    # nearest sites first, they cut the most
    order = np.argsort(a ** 2 + b ** 2)

    polygon = clip
    for j in order:
        if j == index:
            continue
        if a[j] == 0.0 and b[j] == 0.0:
            # Coincident sites: the heavier one wins, ties go to the lower index
            if c[j] < 0.0 or (c[j] == 0.0 and j < index):
                return None
            continue
        polygon = clip_half_plane(polygon, a[j], b[j], c[j])
        if polygon is None:
            return None

    if polygon_area(polygon) <= AREA_TOLERANCE:
        return None
    return polygon


def compute_power_diagram(sites: Sequence[Any], clip: np.ndarray) -> List[Cell]:
    """
    Compute the power diagram of weighted sites inside a convex clip region.

    Sites are any objects exposing x, y and weight attributes. Sites without
    area are left out, so the result may hold fewer cells than there are
    sites; surviving cells keep the input order.

    Args:
        sites: Weighted sites
        clip: Counter-clockwise convex clip polygon

    Returns:
        List of cells, each referencing its site
    """
    clip = np.asarray(clip, dtype=float)
    xs = np.array([site.x for site in sites], dtype=float)
    ys = np.array([site.y for site in sites], dtype=float)
    ws = np.array([site.weight for site in sites], dtype=float)

    cells = []
    for i, site in enumerate(sites):
        polygon = compute_power_cell(i, xs, ys, ws, clip)
        if polygon is not None:
            cells.append(Cell(points=polygon, site=site))

    if len(cells) < len(sites):
        logger.debug("Power diagram dropped sites",
                     sites=len(sites), cells=len(cells))
    return cells
