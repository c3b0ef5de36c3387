"""
Command types for CalculatorSession control flow.

Commands are the ONLY public interface to CalculatorSession.
Hosting shells (Flask routes, console loop) translate requests into
commands; they never touch inputs or nodes directly.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SetPercentage:
    """
    Programmatic write of a logical percentage input.

    value=None clears the input (every representation becomes empty).
    Returns: UpdateResult, or IllegalCommand for unknown key / bad value.
    """
    key: str
    value: Optional[float]


@dataclass(frozen=True)
class EnterText:
    """
    User edit of one representation of a percentage input.

    Lexically invalid text is accepted and ignored, exactly like a
    half-typed entry field.
    Returns: UpdateResult, or IllegalCommand for unknown key / index.
    """
    key: str
    representation: int
    text: str


@dataclass(frozen=True)
class SelectTestResult:
    """
    User selection of the test result.

    Returns: UpdateResult, or IllegalCommand for unknown choice.
    """
    choice: str


@dataclass(frozen=True)
class ReadSnapshot:
    """
    Read the settled state without changing anything.

    Returns: UpdateResult with notifications=0.
    """
    pass


# Command union type for type hints
Command = SetPercentage | EnterText | SelectTestResult | ReadSnapshot
