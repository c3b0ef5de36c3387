"""
Derivation Node - the reactive engine of the calculator

A Derivation Node is a pure function of N upstream dependencies (input
sources or other nodes). It caches its last value and re-broadcasts
whenever any dependency changes.

Lifecycle:
1. Construction reads every dependency's current value into a fixed-size
   slot list (index = dependency position)
2. The function is applied to the slots and the result cached as .value
3. Each dependency gets a subscription bound to its own slot index:
   on change -> update that slot -> recompute -> notify own subscribers

Propagation model:
- Synchronous, depth-first, eager push. No batching, no scheduling.
- Subscribers always receive a value computed from a complete slot list.
- No glitch-freedom across the graph: when one input change reaches a
  node along two paths (base rate -> ppv -> condition probability, and
  base rate -> condition probability), that node recomputes and notifies
  once per path. Earlier notifications may carry values computed from
  slots that have not caught up yet. The value cached after the pass
  returns is always consistent with the current inputs.
- Subscriber order is registration order, and nodes subscribe to their
  dependencies in construction order, so the sequence of transient
  values is deterministic.

Absent inputs are not short-circuited: the function runs with None in
the slot and the formulas turn it into NaN.
"""

import logging
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


def _validate_dependency(dependency: Any, position: int) -> None:
    """Check a dependency exposes the value/on_change capability"""
    if not hasattr(dependency, 'value'):
        raise TypeError(f"Dependency {position} must expose a 'value' attribute")
    if not callable(getattr(dependency, 'on_change', None)):
        raise TypeError(f"Dependency {position} must have callable on_change() method")


class DerivationNode:
    """
    Cached, eagerly recomputed result of a pure function over dependencies.

    Args:
        function: Pure function of arity len(dependencies)
        *dependencies: Objects exposing .value and .on_change(cb)
        name: Label used in logs (defaults to the function name)

    Raises:
        TypeError: If function is not callable or a dependency lacks the
                   value/on_change capability
    """

    def __init__(self, function: Callable[..., Any], *dependencies: Any, name: Optional[str] = None):
        if not callable(function):
            raise TypeError("function must be callable")
        for position, dependency in enumerate(dependencies):
            _validate_dependency(dependency, position)

        self.function = function
        self.name = name or getattr(function, '__name__', 'derivation')
        self._dependencies: Tuple[Any, ...] = tuple(dependencies)
        self._slots: List[Any] = [dependency.value for dependency in self._dependencies]
        self._subscribers: List[Callable[[Any], None]] = []
        self.value: Any = None

        self._update_value()

        for index, dependency in enumerate(self._dependencies):
            dependency.on_change(self._make_slot_handler(index))

    @property
    def dependencies(self) -> Tuple[Any, ...]:
        return self._dependencies

    @property
    def slots(self) -> Tuple[Any, ...]:
        """Snapshot of the values the node last computed from"""
        return tuple(self._slots)

    def on_change(self, callback: Callable[[Any], None]) -> None:
        self._subscribers.append(callback)

    def _make_slot_handler(self, index: int):
        def handle_change(new_value: Any):
            self._slots[index] = new_value
            self._update_value()
            self._did_change()

        return handle_change

    def _update_value(self) -> None:
        self.value = self.function(*self._slots)
        logger.debug(f"{self.name} recomputed -> {self.value!r}")

    def _did_change(self) -> None:
        for callback in self._subscribers:
            callback(self.value)

    def __repr__(self):
        return f"DerivationNode({self.name}={self.value!r})"
