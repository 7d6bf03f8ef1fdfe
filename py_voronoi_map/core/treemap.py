"""
Hierarchical Voronoi treemap.

Nests Voronoi maps: the children of a node are fitted inside the node's
cell, level after level, so the area of every cell is proportional to the
summed weight of the leaves below it.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Sequence

import numpy as np
import structlog

from .geometry import normalize_clip
from .voronoi_map import VoronoiMap, default_weight

logger = structlog.get_logger()


def default_children(node) -> Optional[Sequence]:
    """Read `children` from a mapping key or an attribute."""
    if isinstance(node, Mapping):
        return node.get("children")
    return getattr(node, "children", None)


@dataclass
class TreemapNode:
    """A laid out node of the hierarchy."""

    item: Any
    depth: int
    value: float
    polygon: np.ndarray
    children: List["TreemapNode"] = field(default_factory=list)
    iteration_count: int = 0  # iterations used to fit this node's children
    convergence_ratio: float = 0.0

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator["TreemapNode"]:
        """Yield this node and its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def leaves(self) -> List["TreemapNode"]:
        return [node for node in self.walk() if node.is_leaf]


def voronoi_treemap(root, clip: Sequence[Sequence[float]],
                    children: Callable[[Any], Optional[Sequence]] = default_children,
                    weight: Callable[[Any], float] = default_weight,
                    seed: Optional[str] = None, **options) -> TreemapNode:
    """
    Lay out a hierarchy as nested Voronoi maps.

    Args:
        root: Root item of the hierarchy
        clip: Clip region of the root
        children: Accessor returning a node's children (None or empty for leaves)
        weight: Accessor returning a leaf's weight
        seed: Seed string; each node derives its own seed from it
        **options: Any other VoronoiMap option

    Returns:
        TreemapNode tree mirroring the hierarchy
    """

    def value(node) -> float:
        kids = children(node)
        if not kids:
            return float(weight(node))
        return sum(value(kid) for kid in kids)

    def layout(node, polygon: np.ndarray, depth: int, path: str) -> TreemapNode:
        tree_node = TreemapNode(item=node, depth=depth, value=value(node), polygon=polygon)
        kids = children(node)
        if not kids:
            return tree_node

        node_seed = None if seed is None else f"{seed}:{path}"
        vmap = VoronoiMap(clip=polygon, weight=value, seed=node_seed, **options)
        result = vmap.fit(kids)
        tree_node.iteration_count = result.iteration_count
        tree_node.convergence_ratio = result.convergence_ratio

        for cell in result.cells:
            child_path = f"{path}.{cell.site.index}"
            tree_node.children.append(
                layout(cell.site.item, cell.points, depth + 1, child_path)
            )
        return tree_node

    logger.info("Starting Voronoi treemap layout")
    tree = layout(root, normalize_clip(clip), 0, "0")
    logger.info("Voronoi treemap layout complete",
                nodes=sum(1 for _ in tree.walk()), leaves=len(tree.leaves()))
    return tree
