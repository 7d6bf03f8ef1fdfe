"""Polygon utilities used by the fitting loop and the power diagram."""

from typing import Sequence, Tuple

import numpy as np
import structlog
from scipy.spatial import ConvexHull, QhullError
from shapely.geometry import Point, Polygon

from ..exceptions import ConfigurationError

logger = structlog.get_logger()

AREA_TOLERANCE = 1e-10


def as_points(points) -> np.ndarray:
    """Coerce a polygon given as pairs into an (n, 2) float array."""
    array = np.asarray(points, dtype=float)
    if array.ndim != 2 or array.shape[1] != 2:
        raise ConfigurationError(f"Expected a sequence of (x, y) pairs, got shape {array.shape}")
    return array


def polygon_area(points: np.ndarray) -> float:
    """Signed area of a polygon (shoelace formula).

    Counter-clockwise polygons have a positive area.
    """
    points = np.asarray(points, dtype=float)
    if len(points) < 3:
        return 0.0
    x = points[:, 0]
    y = points[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def polygon_centroid(points: np.ndarray) -> np.ndarray:
    """Compute the centroid of a polygon.

    Args:
        points: Array of [x, y] vertex coordinates

    Returns:
        [x, y] centroid coordinates
    """
    points = np.asarray(points, dtype=float)
    if len(points) < 3:
        return np.mean(points, axis=0)

    x = points[:, 0]
    y = points[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)
    cross = x * y_next - x_next * y
    area = cross.sum()

    if abs(area) < AREA_TOLERANCE:
        return np.mean(points, axis=0)

    area *= 0.5
    cx = np.dot(x + x_next, cross) / (6.0 * area)
    cy = np.dot(y + y_next, cross) / (6.0 * area)
    return np.array([cx, cy])


def polygon_contains(points: np.ndarray, point: Tuple[float, float]) -> bool:
    """Check whether a point lies strictly inside a polygon."""
    return Polygon(points).contains(Point(point[0], point[1]))


def polygon_hull(points: np.ndarray) -> np.ndarray:
    """Counter-clockwise convex hull of a point set."""
    points = as_points(points)
    try:
        hull = ConvexHull(points)
    except QhullError as exc:
        raise ConfigurationError(f"Cannot build a convex hull: {exc}") from exc
    # scipy returns 2D hull vertices in counter-clockwise order
    return points[hull.vertices]


def bounding_box(points: np.ndarray) -> Tuple[float, float, float, float]:
    """Return (min_x, min_y, max_x, max_y)."""
    points = np.asarray(points, dtype=float)
    min_x, min_y = points.min(axis=0)
    max_x, max_y = points.max(axis=0)
    return float(min_x), float(min_y), float(max_x), float(max_y)


def normalize_clip(points: Sequence[Sequence[float]]) -> np.ndarray:
    """
    Validate a clip region and return it as a counter-clockwise convex polygon.

    Power cells are clipped against convex regions only, so a concave clip
    region is replaced by its convex hull.

    Args:
        points: Clip polygon vertices

    Returns:
        (n, 2) array of hull vertices, counter-clockwise

    Raises:
        ConfigurationError: if the polygon is invalid or has no area
    """
    points = as_points(points)
    if len(np.unique(points, axis=0)) < 3:
        raise ConfigurationError("Clip region needs at least 3 distinct vertices")
    if not np.all(np.isfinite(points)):
        raise ConfigurationError("Clip region has non-finite coordinates")

    shape = Polygon(points)
    if shape.area <= AREA_TOLERANCE:
        raise ConfigurationError(f"Clip region has no area (area={shape.area})")
    if not shape.is_valid:
        raise ConfigurationError("Clip region is not a simple polygon")

    hull = polygon_hull(points)
    if not np.isclose(Polygon(hull).area, shape.area):
        logger.warning("Clip region is not convex, using its convex hull",
                       area=shape.area, hull_area=Polygon(hull).area)
    return hull
