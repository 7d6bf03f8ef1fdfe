"""
Voronoi map fitting.

Finds site positions and power weights such that each site's cell in the
clipped power diagram gets an area proportional to its item's weight. The
fit alternates two adaptations per iteration (move sites to their cell
centroids, rescale weights towards the targeted areas) until the summed
area error drops below a share of the clip area or the iteration cap is
reached.
"""

import math
import numbers
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence

import numpy as np
import structlog

from ..config import Settings, settings as default_settings
from ..exceptions import ConfigurationError, DegenerateDiagramError
from ..utils.random import create_prng
from .adaptation import adapt_placements, adapt_weights
from .flickering import FlickeringMitigation
from .geometry import normalize_clip, polygon_area
from .initializer import Site, initialize_sites
from .overweight import OverweightVariant, correct_overweighted
from .power_diagram import Cell, compute_power_diagram

logger = structlog.get_logger()

TickCallback = Callable[[List[Cell], int], Any]


def _is_real(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and not math.isnan(value)


def default_weight(item) -> float:
    """Read `weight` from a mapping key or an attribute."""
    if isinstance(item, Mapping):
        return item["weight"]
    return item.weight


@dataclass
class FitResult:
    """Outcome of a fitting run.

    Not converging within the iteration cap is a normal outcome: check
    `converged` or `convergence_ratio`.
    """

    cells: List[Cell]
    iteration_count: int
    convergence_ratio: float
    converged: bool
    total_area: float


@dataclass
class FittingContext:
    """State owned by a single fitting run."""

    clip: np.ndarray
    total_area: float
    sites: List[Site]
    flickering: FlickeringMitigation
    variant: OverweightVariant
    epsilon: float
    max_correction_passes: int
    degenerate_retry: bool
    degenerate_retry_margin: float

    @property
    def site_count(self) -> int:
        return len(self.sites)

    def diagram(self, step: str) -> List[Cell]:
        """Recompute the power diagram and check that no site vanished."""
        cells = compute_power_diagram(self.sites, self.clip)
        if len(cells) < self.site_count:
            raise DegenerateDiagramError(self.site_count, len(cells), step)
        return cells

    def correct(self, sites: Sequence[Site], epsilon: float) -> int:
        return correct_overweighted(sites, self.variant, epsilon, self.max_correction_passes)

    def area_error(self, cells: Sequence[Cell]) -> float:
        """Sum of absolute differences between targeted and current areas."""
        return sum(abs(cell.site.targeted_area - cell.area) for cell in cells)

    def adapt(self, cells: List[Cell], flickering_ratio: float) -> List[Cell]:
        """
        Run one placement and one weight adaptation.

        On a degenerate diagram the sites are restored and the step is
        retried once with a wider correction margin.
        """
        snapshot = [(site.x, site.y, site.weight) for site in self.sites]
        try:
            return self._adapt(cells, flickering_ratio, self.epsilon)
        except DegenerateDiagramError as exc:
            if not self.degenerate_retry:
                raise
            logger.warning("Degenerate power diagram, retrying with a wider margin",
                           expected=exc.expected, actual=exc.actual, step=exc.step,
                           epsilon=self.epsilon * self.degenerate_retry_margin)
            for site, (x, y, weight) in zip(self.sites, snapshot):
                site.x, site.y, site.weight = x, y, weight
            return self._adapt(cells, flickering_ratio,
                               self.epsilon * self.degenerate_retry_margin)

    def _adapt(self, cells: List[Cell], flickering_ratio: float, epsilon: float) -> List[Cell]:
        sites = adapt_placements(cells, flickering_ratio)
        self.correct(sites, epsilon)
        cells = self.diagram("placement adaptation")

        sites = adapt_weights(cells, flickering_ratio, epsilon)
        self.correct(sites, epsilon)
        return self.diagram("weight adaptation")


class VoronoiMap:
    """
    Fits a Voronoi map of weighted items inside a clip region.

    Options left unset fall back to the settings defaults. Every option can
    be read and replaced through its property; invalid values raise
    ConfigurationError.

    Example:
        vmap = VoronoiMap(clip=[(0, 0), (10, 0), (10, 10), (0, 10)])
        result = vmap([{"weight": 1}, {"weight": 3}])
    """

    def __init__(
        self,
        clip: Optional[Sequence[Sequence[float]]] = None,
        weight: Optional[Callable[[Any], float]] = None,
        convergence_ratio: Optional[float] = None,
        max_iteration_count: Optional[int] = None,
        min_weight_ratio: Optional[float] = None,
        tick: Optional[TickCallback] = None,
        overweight_variant: Optional[str] = None,
        epsilon: Optional[float] = None,
        seed: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or default_settings
        self._clip = None
        if clip is not None:
            self.clip = clip
        self.weight = weight or default_weight
        self.convergence_ratio = (
            self.settings.convergence_ratio if convergence_ratio is None else convergence_ratio
        )
        self.max_iteration_count = (
            self.settings.max_iteration_count if max_iteration_count is None else max_iteration_count
        )
        self.min_weight_ratio = (
            self.settings.min_weight_ratio if min_weight_ratio is None else min_weight_ratio
        )
        self.tick = tick
        self.overweight_variant = overweight_variant or self.settings.overweight_variant
        self.epsilon = self.settings.epsilon if epsilon is None else epsilon
        self.seed = seed

    # Options

    @property
    def clip(self) -> Optional[np.ndarray]:
        """Convex, counter-clockwise clip region."""
        return self._clip

    @clip.setter
    def clip(self, value: Sequence[Sequence[float]]):
        self._clip = normalize_clip(value)

    @property
    def weight(self) -> Callable[[Any], float]:
        return self._weight

    @weight.setter
    def weight(self, value: Callable[[Any], float]):
        if not callable(value):
            raise ConfigurationError("weight must be callable")
        self._weight = value

    @property
    def convergence_ratio(self) -> float:
        return self._convergence_ratio

    @convergence_ratio.setter
    def convergence_ratio(self, value: float):
        if not _is_real(value) or not 0 < value < math.inf:
            raise ConfigurationError(f"convergence_ratio must be positive and finite, got {value}")
        self._convergence_ratio = float(value)

    @property
    def max_iteration_count(self) -> int:
        return self._max_iteration_count

    @max_iteration_count.setter
    def max_iteration_count(self, value: int):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
            raise ConfigurationError(f"max_iteration_count must be a non-negative integer, got {value}")
        self._max_iteration_count = int(value)

    @property
    def min_weight_ratio(self) -> float:
        return self._min_weight_ratio

    @min_weight_ratio.setter
    def min_weight_ratio(self, value: float):
        if not _is_real(value) or not 0 <= value <= 1:
            raise ConfigurationError(f"min_weight_ratio must be within [0, 1], got {value}")
        self._min_weight_ratio = float(value)

    @property
    def tick(self) -> Optional[TickCallback]:
        """Observer called with (cells, iteration) after every iteration."""
        return self._tick

    @tick.setter
    def tick(self, value: Optional[TickCallback]):
        if value is not None and not callable(value):
            raise ConfigurationError("tick must be callable")
        self._tick = value

    @property
    def overweight_variant(self) -> OverweightVariant:
        return self._overweight_variant

    @overweight_variant.setter
    def overweight_variant(self, value):
        try:
            self._overweight_variant = OverweightVariant(value)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown overweight variant: {value!r}") from exc

    @property
    def epsilon(self) -> Optional[float]:
        """Power-weight floor; None derives it from the clip area at fit time."""
        return self._epsilon

    @epsilon.setter
    def epsilon(self, value: Optional[float]):
        if value is None:
            self._epsilon = None
            return
        if not _is_real(value) or not 0 < value < math.inf:
            raise ConfigurationError(f"epsilon must be positive and finite, got {value}")
        self._epsilon = float(value)

    # Fitting

    def __call__(self, items: Iterable) -> FitResult:
        return self.fit(items)

    def fit(self, items: Iterable) -> FitResult:
        """
        Fit cells to the items' weights.

        Args:
            items: Non-empty iterable of items, read through the weight accessor

        Returns:
            FitResult with one cell per item, in item order

        Raises:
            ConfigurationError: on empty items, missing clip or invalid weights
            DegenerateDiagramError: if a site lost its cell and the retry failed
            InternalConsistencyError: if overweight correction did not settle
        """
        items = list(items)
        if not items:
            raise ConfigurationError("Cannot fit a Voronoi map without items")
        if self._clip is None:
            raise ConfigurationError("Clip region is not set")

        context = self._create_context(items)
        total_area = context.total_area
        area_error_threshold = self.convergence_ratio * total_area

        logger.info("Starting Voronoi map fitting",
                    sites=context.site_count, total_area=total_area,
                    area_error_threshold=area_error_threshold, epsilon=context.epsilon,
                    max_iteration_count=self.max_iteration_count,
                    variant=self.overweight_variant.value)

        cells = context.diagram("initialization")
        iteration_count = 0
        area_error = context.area_error(cells)
        converged = area_error < area_error_threshold
        self._notify(cells, iteration_count)

        while not converged and iteration_count < self.max_iteration_count:
            cells = context.adapt(cells, context.flickering.ratio())
            iteration_count += 1
            area_error = context.area_error(cells)
            converged = area_error < area_error_threshold
            context.flickering.add(area_error)
            logger.debug("Iteration complete", iteration=iteration_count,
                         area_error_pct=context.flickering.error_percent())
            self._notify(cells, iteration_count)

        result = FitResult(
            cells=cells,
            iteration_count=iteration_count,
            convergence_ratio=area_error / total_area,
            converged=converged,
            total_area=total_area,
        )
        logger.info("Voronoi map fitting complete",
                    iterations=iteration_count,
                    convergence_ratio=round(result.convergence_ratio, 6),
                    converged=converged)
        return result

    def _create_context(self, items: List) -> FittingContext:
        total_area = abs(polygon_area(self._clip))
        prng = create_prng(self.seed)
        flickering = FlickeringMitigation(self.settings.flickering_history_length)
        flickering.clear().set_total_area(total_area)

        sites = initialize_sites(items, self.weight, self.min_weight_ratio, self._clip,
                                 total_area, prng, self.settings.max_seed_attempts)
        return FittingContext(
            clip=self._clip,
            total_area=total_area,
            sites=sites,
            flickering=flickering,
            variant=self.overweight_variant,
            epsilon=self.resolve_epsilon(total_area),
            max_correction_passes=self.settings.max_correction_passes,
            degenerate_retry=self.settings.degenerate_retry,
            degenerate_retry_margin=self.settings.degenerate_retry_margin,
        )

    def resolve_epsilon(self, total_area: float) -> float:
        """Explicit epsilon, or a share of the clip area so fitting is scale free."""
        if self._epsilon is not None:
            return self._epsilon
        return self.settings.epsilon_ratio * total_area

    def _notify(self, cells: List[Cell], iteration: int) -> None:
        # the observer's return value is ignored
        if self._tick is not None:
            self._tick(cells, iteration)


def fit(items: Iterable, clip: Sequence[Sequence[float]], **options) -> FitResult:
    """
    Fit a Voronoi map in one call.

    Args:
        items: Items to lay out
        clip: Clip region vertices
        **options: Any VoronoiMap option

    Returns:
        FitResult
    """
    return VoronoiMap(clip=clip, **options).fit(items)
