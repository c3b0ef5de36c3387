"""
Test result selector enum for the condition probability node.

Invariants:
- Exactly one choice is selected at any time
- Selection is exclusive (one value, not three booleans)

Design:
- TernaryChoice is a string-based enum so radio option values and JSON
  payloads compare equal to members ('positive' == TernaryChoice.POSITIVE)
- TernaryVariable owns the selection; formulas only read it
"""

from enum import Enum


class TernaryChoice(str, Enum):
    """
    Outcome of the diagnostic test as selected by the clinician.

    UNKNOWN:
        No test performed (or result not yet known).
        Condition probability falls back to the base rate.

    POSITIVE:
        Test came back positive.
        Condition probability is the positive predictive value.

    NEGATIVE:
        Test came back negative.
        Condition probability is 100 minus the negative predictive value.
    """
    UNKNOWN = "unknown"
    POSITIVE = "positive"
    NEGATIVE = "negative"


# Single source of truth for valid choice strings
# Used by the session layer to reject bad payloads before they reach the graph
VALID_CHOICES = {choice.value for choice in TernaryChoice}
