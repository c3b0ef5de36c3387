"""
Input Sources - mutable cells feeding the derivation graph

Every source exposes the same two-method capability the graph relies on:
- value: current value (get/set)
- on_change(cb): subscribe; cb receives the new value on every change

Sources:
- PercentageInput: one representation (one text field)
- PercentageVariable: one logical percentage mirrored across several
  representations (e.g. slider + text box)
- TernaryVariable: the test result selector

Propagation contract:
A change runs to completion synchronously through every downstream node
before control returns. Writing any source while that pass is running
would re-enter the graph, so the shared PropagationGuard rejects it.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, List, Optional, Sequence

from bayes_backend.core.fields import RadioGroup, TextField
from bayes_backend.core.percentage import (
    is_percentage_string,
    parse_percentage,
    read_percentage,
    to_text,
    validate_percentage,
)
from bayes_backend.utils.ternary_choice import TernaryChoice

logger = logging.getLogger(__name__)


class ReentrantUpdateError(RuntimeError):
    """Raised when a source is written while a propagation pass is running"""


class PropagationGuard:
    """
    Tracks whether a propagation pass is in progress.

    One guard is shared by every source of a graph so that a subscriber
    writing to *any* source mid-pass is caught, not just the one that
    started the pass.
    """

    def __init__(self):
        self.active_key: Optional[str] = None

    @property
    def is_propagating(self) -> bool:
        return self.active_key is not None

    def check_idle(self, key: str) -> None:
        if self.active_key is not None:
            raise ReentrantUpdateError(
                f"Write to '{key}' while propagating change of '{self.active_key}'"
            )

    @contextmanager
    def propagating(self, key: str):
        self.check_idle(key)
        self.active_key = key
        try:
            yield
        finally:
            self.active_key = None


class _Source:
    """Shared subscriber bookkeeping for logical input sources"""

    def __init__(self, key: str):
        self.key = key
        self.guard = PropagationGuard()
        self._subscribers: List[Callable[[Any], None]] = []

    def attach_guard(self, guard: PropagationGuard) -> None:
        """Share a propagation guard with the other sources of one graph"""
        self.guard = guard

    def on_change(self, callback: Callable[[Any], None]) -> None:
        self._subscribers.append(callback)

    def _notify(self, new_value: Any) -> None:
        logger.debug(f"Input '{self.key}' changed to {new_value!r}")
        with self.guard.propagating(self.key):
            for callback in self._subscribers:
                callback(new_value)


class PercentageInput:
    """
    One representation of a percentage: a single text field.

    The value read is the last one accepted: written programmatically, or
    entered as lexically valid text. In-progress text that fails the
    lexical check stays in the field but is never read, so the input
    cannot report a value the graph has not seen. A cleared field is an
    accepted edit and reads None.
    """

    def __init__(self, field: TextField):
        self.field = field
        self._value = read_percentage(field.text)
        field.on_input(self._accept_edit)

    @property
    def value(self) -> Optional[float]:
        return self._value

    @value.setter
    def value(self, new_value: Optional[float]):
        self._value = new_value
        self.field.text = to_text(new_value)

    def _accept_edit(self, text: str):
        if is_percentage_string(text):
            self._value = parse_percentage(text)

    def on_change(self, callback: Callable[[Optional[float]], None]) -> None:
        def handle_input(text: str):
            if not is_percentage_string(text):
                return
            callback(parse_percentage(text))

        self.field.on_input(handle_input)


class PercentageVariable(_Source):
    """
    Logical percentage input backed by one or more mirrored representations.

    Reading returns the first representation (registration order) holding a
    valid percentage, else None. Writing pushes the value into every
    representation and notifies subscribers once. A lexically valid edit in
    one representation is copied into the others and notifies once.

    Args:
        key: Stable input identifier (e.g. 'sensitivity')
        fields: Text fields representing the same quantity
    """

    def __init__(self, key: str, fields: Sequence[TextField]):
        super().__init__(key)
        if not fields:
            raise ValueError(f"Percentage input '{key}' needs at least one field")
        self.inputs = [PercentageInput(field) for field in fields]

        for index, percentage_input in enumerate(self.inputs):
            percentage_input.on_change(self._make_sync_handler(index))

    @property
    def value(self) -> Optional[float]:
        for percentage_input in self.inputs:
            current = percentage_input.value
            if current is not None:
                return current
        return None

    @value.setter
    def value(self, new_value: Optional[float]):
        self.guard.check_idle(self.key)
        new_value = validate_percentage(new_value)
        for percentage_input in self.inputs:
            percentage_input.value = new_value
        self._notify(new_value)

    def _make_sync_handler(self, source_index: int):
        def sync(new_value: Optional[float]):
            self.guard.check_idle(self.key)
            for index, percentage_input in enumerate(self.inputs):
                if index != source_index:
                    percentage_input.value = new_value
            self._notify(new_value)

        return sync


class TernaryVariable(_Source):
    """
    Test result selector backed by a radio group.

    Args:
        key: Stable input identifier (e.g. 'test_result')
        group: Radio group whose options are exactly the TernaryChoice values
    """

    def __init__(self, key: str, group: RadioGroup):
        super().__init__(key)
        if set(group.options) != {choice.value for choice in TernaryChoice}:
            raise ValueError(f"Radio group for '{key}' must offer {[c.value for c in TernaryChoice]}")
        self.group = group
        self.group.on_input(self._handle_click)

    @property
    def value(self) -> TernaryChoice:
        return TernaryChoice(self.group.checked)

    @value.setter
    def value(self, new_value):
        self.guard.check_idle(self.key)
        choice = TernaryChoice(new_value)
        self.group.select(choice.value)
        self._notify(choice)

    def _handle_click(self):
        self.guard.check_idle(self.key)
        self._notify(self.value)
