"""
Core Voronoi map fitting functionality.
"""

from .alea_prng import AleaPRNG
from .flickering import FlickeringMitigation
from .initializer import Site
from .overweight import OverweightVariant, correct_overweighted
from .power_diagram import Cell, compute_power_diagram
from .voronoi_map import FitResult, VoronoiMap, fit
from .treemap import TreemapNode, voronoi_treemap

__all__ = ['AleaPRNG', 'FlickeringMitigation', 'Site', 'OverweightVariant',
           'correct_overweighted', 'Cell', 'compute_power_diagram',
           'FitResult', 'VoronoiMap', 'fit', 'TreemapNode', 'voronoi_treemap']
