"""
Calculator Session - command handler over one assembled graph

Responsibilities:
- Translate commands into input writes / simulated user edits
- Reject malformed commands before they touch the graph
- Report the settled snapshot after every command

Design principles:
- Thin layer: all arithmetic lives in formulas, all propagation in nodes
- One graph per session, assembled once and never rebuilt
- Rejections are results (IllegalCommand), not exceptions
"""

import logging

from bayes_backend.commands import Command, EnterText, ReadSnapshot, SelectTestResult, SetPercentage
from bayes_backend.core.graph import PERCENTAGE_KEYS, CalculatorGraph
from bayes_backend.core.percentage import InvalidPercentageError
from bayes_backend.results import IllegalCommand, UpdateResult
from bayes_backend.utils.ternary_choice import VALID_CHOICES

logger = logging.getLogger(__name__)


class CalculatorSession:
    """
    Applies commands to a calculator graph.

    Args:
        graph: Assembled CalculatorGraph

    Raises:
        TypeError: If graph lacks the snapshot()/inputs interface
    """

    def __init__(self, graph: CalculatorGraph):
        if not callable(getattr(graph, 'snapshot', None)):
            raise TypeError("graph must have callable snapshot() method")
        if not hasattr(graph, 'inputs'):
            raise TypeError("graph must expose inputs")

        self.graph = graph
        self._notifications = 0
        graph.nodes['condition_probability'].on_change(self._count_notification)

        logger.info("Calculator session initialized")

    def _count_notification(self, _value):
        self._notifications += 1

    def handle(self, command: Command) -> UpdateResult | IllegalCommand:
        """
        Apply one command.

        Returns:
            UpdateResult with settled snapshot, or IllegalCommand
        """
        self._notifications = 0

        match command:
            case SetPercentage(key=key, value=value):
                rejection = self._set_percentage(key, value)
            case EnterText(key=key, representation=index, text=text):
                rejection = self._enter_text(key, index, text)
            case SelectTestResult(choice=choice):
                rejection = self._select_test_result(choice)
            case ReadSnapshot():
                rejection = None
            case _:
                raise TypeError(f"Unsupported command: {type(command).__name__}")

        if rejection is not None:
            logger.warning(f"Rejected {type(command).__name__}: {rejection}")
            return IllegalCommand(reason=rejection, command_type=type(command).__name__)

        return UpdateResult(snapshot=self.graph.snapshot(), notifications=self._notifications)

    # ========================
    # Command handlers
    # ========================
    # Each returns None on success or a rejection reason.

    def _set_percentage(self, key, value):
        if key not in PERCENTAGE_KEYS:
            return f"Unknown percentage input '{key}'"
        try:
            self.graph.inputs.get(key).value = value
        except InvalidPercentageError as e:
            return str(e)
        logger.info(f"{key} set to {value!r}")
        return None

    def _enter_text(self, key, index, text):
        if key not in PERCENTAGE_KEYS:
            return f"Unknown percentage input '{key}'"
        representations = self.graph.inputs.get(key).inputs
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(representations):
            return f"Input '{key}' has no representation {index!r}"
        if not isinstance(text, str):
            return "Text must be a string"

        representations[index].field.enter(text)
        logger.debug(f"{key}[{index}] edited to {text!r}")
        return None

    def _select_test_result(self, choice):
        if not isinstance(choice, str) or choice not in VALID_CHOICES:
            return f"Unknown test result '{choice}', expected one of {sorted(VALID_CHOICES)}"
        self.graph.inputs.test_result.group.click(choice)
        logger.info(f"test_result selected: {choice}")
        return None
