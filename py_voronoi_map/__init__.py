"""
Voronoi maps: power diagram partitions whose cell areas follow item weights.
"""

from .core import (
    Cell,
    FitResult,
    OverweightVariant,
    TreemapNode,
    VoronoiMap,
    fit,
    voronoi_treemap,
)
from .exceptions import (
    ConfigurationError,
    DegenerateDiagramError,
    InternalConsistencyError,
    VoronoiMapError,
)
from .log_config import configure_logging

__version__ = "0.1.0"

__all__ = ['Cell', 'FitResult', 'OverweightVariant', 'TreemapNode', 'VoronoiMap',
           'fit', 'voronoi_treemap', 'ConfigurationError', 'DegenerateDiagramError',
           'InternalConsistencyError', 'VoronoiMapError', 'configure_logging']
