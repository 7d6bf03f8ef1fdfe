"""
Flickering mitigation.

Flickering is the oscillation of the area error from one iteration to the
next. The tracker flags every iteration where the error grew or where its
direction changed, and weights recent flags more; the resulting ratio in
[0, 1] is used by the adapters to damp site moves and weight changes.
"""

from typing import List, Optional

import structlog

logger = structlog.get_logger()

DEFAULT_HISTORY_LENGTH = 10


def event_weights(length: int) -> List[int]:
    """Weights of the flickering events, newest first: 3, 2, 1, 1, ..."""
    initial_weight = 3
    min_weight = 1
    return [max(initial_weight - i, min_weight) for i in range(length)]


def growth_direction(current: float, previous: float) -> int:
    """1 if the error grew, -1 otherwise."""
    return 1 if current > previous else -1


class FlickeringMitigation:
    """Tracks area error growth and direction changes across the iterations of one run."""

    def __init__(self, history_length: int = DEFAULT_HISTORY_LENGTH):
        if history_length <= 0:
            raise ValueError("history_length must be positive")
        self.history_length = history_length
        self.weights = event_weights(history_length)
        self.weights_sum = sum(self.weights)
        self.total_area: Optional[float] = None
        self.clear()

    def clear(self) -> "FlickeringMitigation":
        """Forget every recorded sample."""
        self.last_area_error: Optional[float] = None
        self.last_growth: Optional[int] = None
        self.events: List[bool] = []
        return self

    def set_total_area(self, total_area: float) -> "FlickeringMitigation":
        self.total_area = total_area
        return self

    def add(self, area_error: float) -> "FlickeringMitigation":
        """Record the area error of the iteration that just ended."""
        previous_error = self.last_area_error
        self.last_area_error = area_error
        if previous_error is None:
            return self

        previous_growth = self.last_growth
        self.last_growth = growth_direction(area_error, previous_error)
        flickering = self.last_growth > 0 or (
            previous_growth is not None and self.last_growth != previous_growth
        )

        self.events.insert(0, flickering)
        if len(self.events) > self.history_length:
            self.events.pop()
        return self

    def ratio(self) -> float:
        """
        Weighted share of recent flickering events over the full window.

        0 while the error decreases smoothly; grows from the first event on
        and reaches 1 once every iteration in the window grew the error or
        reversed its direction.
        """
        weighted_events = sum(
            weight for weight, flickering in zip(self.weights, self.events) if flickering
        )
        ratio = weighted_events / self.weights_sum
        if ratio > 0:
            logger.debug("Flickering mitigation", ratio=round(ratio, 3),
                         area_error_pct=self.error_percent())
        return ratio

    def error_percent(self) -> Optional[float]:
        """Last area error as a percentage of the total area."""
        if self.last_area_error is None or not self.total_area:
            return None
        return round(self.last_area_error * 100 / self.total_area, 3)
