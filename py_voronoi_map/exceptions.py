"""Error taxonomy for Voronoi map fitting."""


class VoronoiMapError(Exception):
    """Base class for all errors raised while fitting a Voronoi map."""


class ConfigurationError(VoronoiMapError, ValueError):
    """Invalid input or option (empty items, degenerate clip, bad weights)."""


class DegenerateDiagramError(VoronoiMapError):
    """The power diagram lost at least one cell.

    Raised when the diagram holds fewer cells than there are sites, meaning
    a site ended up with zero area.
    """

    def __init__(self, expected: int, actual: int, step: str = ""):
        self.expected = expected
        self.actual = actual
        self.step = step
        where = f" after {step}" if step else ""
        super().__init__(
            f"Power diagram has {actual} cells for {expected} sites{where}"
        )


class InternalConsistencyError(VoronoiMapError, RuntimeError):
    """An internal fixed-point loop exceeded its bound."""
