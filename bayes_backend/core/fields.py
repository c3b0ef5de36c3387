"""
Raw input fields - stand-ins for the widgets that back each logical input

The graph never talks to these directly; Input Sources wrap them.
They exist so a hosting shell (Flask, console, tests) can drive the
calculator exactly as a user would: by typing text or clicking a choice.

Event semantics mirror browser inputs:
- Programmatic writes (text setter, select()) fire no event
- User actions (enter(), click()) store the new state, then fire listeners
"""

from typing import Callable, List, Sequence


class TextField:
    """Single-line text entry holding raw, unvalidated text"""

    def __init__(self, text: str = ""):
        self._text = text
        self._listeners: List[Callable[[str], None]] = []

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, new_text: str):
        self._text = new_text

    def on_input(self, listener: Callable[[str], None]) -> None:
        """Register listener for user edits (called in registration order)"""
        self._listeners.append(listener)

    def enter(self, text: str) -> None:
        """Simulate the user editing the field to read `text`"""
        self._text = text
        for listener in self._listeners:
            listener(text)


class RadioGroup:
    """
    Mutually exclusive set of options, exactly one checked.

    Args:
        options: Option values in display order
        selected: Initially checked option
    """

    def __init__(self, options: Sequence[str], selected: str):
        self.options = tuple(options)
        if selected not in self.options:
            raise ValueError(f"Unknown option '{selected}', expected one of {self.options}")
        self._checked = selected
        self._listeners: List[Callable[[], None]] = []

    @property
    def checked(self) -> str:
        return self._checked

    def is_checked(self, option: str) -> bool:
        return option == self._checked

    def select(self, option: str) -> None:
        """Check `option` (and uncheck the others) without firing an event"""
        if option not in self.options:
            raise ValueError(f"Unknown option '{option}', expected one of {self.options}")
        self._checked = option

    def on_input(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def click(self, option: str) -> None:
        """Simulate the user clicking `option`; fires only when selection changes"""
        if option == self._checked:
            return
        self.select(option)
        for listener in self._listeners:
            listener()
