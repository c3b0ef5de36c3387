"""
Sinks - one-way consumers of derivation node output

NumericDisplay: fixed-precision text of a node value
MarkerStrip: a row of markers whose length follows a node's count

Sinks call node.value / node.on_change(); nothing in the graph knows
about them, and they never write back into it.
"""

import logging
import math
from typing import List

from bayes_backend.utils.helpers import format_fixed

logger = logging.getLogger(__name__)


class NumericDisplay:
    """Text readout of a node, two decimals"""

    def __init__(self, name: str, digits: int = 2):
        self.name = name
        self.digits = digits
        self.text = ""
        self.render_count = 0

    def bind(self, node) -> "NumericDisplay":
        self._render(node.value)
        node.on_change(self._render)
        return self

    def _render(self, value):
        self.text = format_fixed(value, self.digits)
        self.render_count += 1


def marker_target(value) -> int:
    """
    Number of markers a value asks for.

    Markers are added while the count is below the value, so any
    fractional part rounds up (0.9 -> 1). Negative values ask for none.
    """
    return max(0, math.ceil(value))


class MarkerStrip:
    """
    Row of discrete markers reconciled to a node's count.

    Markers are added at the end and removed from the front, one at a
    time, until the count matches. Only the steps of the latest update are
    kept, in .steps as ('add' | 'remove', count_after). A NaN or absent
    value leaves the strip as it is.
    """

    def __init__(self, name: str):
        self.name = name
        self.markers: List[int] = []
        self.steps: List[tuple] = []
        self._next_id = 0

    @property
    def count(self) -> int:
        return len(self.markers)

    def bind(self, node) -> "MarkerStrip":
        self.update(node.value)
        node.on_change(self.update)
        return self

    def update(self, value) -> None:
        self.steps = []

        if value is None or math.isnan(value):
            logger.debug(f"{self.name}: no count for {value!r}, markers unchanged")
            return

        target = marker_target(value)

        while self.count < target:
            self.markers.append(self._next_id)
            self._next_id += 1
            self.steps.append(('add', self.count))

        while self.count > target:
            self.markers.pop(0)
            self.steps.append(('remove', self.count))
