"""
Result types returned by CalculatorSession.handle()

These are the ONLY return types from the command handler.
"""

from dataclasses import dataclass

from bayes_backend.contracts import CalculatorSnapshot


@dataclass(frozen=True)
class UpdateResult:
    """
    Command applied and propagation settled.

    Attributes:
        snapshot: Settled state of inputs, nodes and sinks
        notifications: Number of times condition_probability notified its
            subscribers during the command. More than one means transient
            values were broadcast before the graph settled.
    """
    snapshot: CalculatorSnapshot
    notifications: int


@dataclass(frozen=True)
class IllegalCommand:
    """
    Command rejected before reaching the graph.

    Examples:
    - SetPercentage with an unknown key or a value outside [0, 100]
    - EnterText with a representation index out of range
    - SelectTestResult with a choice that is not unknown/positive/negative

    Attributes:
        reason: Human-readable explanation
        command_type: Name of rejected command type
    """
    reason: str
    command_type: str
