"""
Semantic contracts for the Bayesian calculator.

This module defines immutable data structures that cross the boundary
between the reactive core and its hosting shells (Flask, console).

Design principles:
- Frozen dataclasses (immutable after creation)
- No validation logic (contracts, not validators)
- No dependencies on core modules

Contents:
- CalculatorSnapshot: settled state of every input, node and sink

Usage:
    from bayes_backend.contracts import CalculatorSnapshot
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional


def _json_number(value: Any) -> Any:
    # JSON has no NaN; undefined values travel as null
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


@dataclass(frozen=True)
class CalculatorSnapshot:
    """
    Read-only view of the graph after a propagation pass has settled.

    Attributes:
        inputs: Current input values keyed by input key.
            Percentages are float or None (absent); 'test_result' is the
            choice string.
        values: Cached node values keyed by node name, in construction
            order (true_positive ... condition_probability). May be NaN.
        displays: Rendered text of each numeric display
            (condition_probability, positive_predictive_value,
            negative_predictive_value).
        marker_counts: Marker count of each strip
            (true_positive, false_negative, false_positive, true_negative).

    Examples:
        >>> snapshot.values['positive_predictive_value']
        8.333333333333334
        >>> snapshot.displays['condition_probability']
        '8.33'
    """
    inputs: Dict[str, Optional[Any]]
    values: Dict[str, float]
    displays: Dict[str, str]
    marker_counts: Dict[str, int]

    def to_json(self) -> dict:
        """JSON-safe dict (NaN values become None)"""
        return {
            'inputs': {k: _json_number(v) for k, v in self.inputs.items()},
            'values': {k: _json_number(v) for k, v in self.values.items()},
            'displays': dict(self.displays),
            'marker_counts': dict(self.marker_counts),
        }
