"""
Domain formulas - Bayesian arithmetic plugged into the derivation graph

All functions are pure and operate on percentages (0-100).
Counts are per 100 people: true_positive(1, 90) == 0.9 means 0.9 out of
every 100 tested people are true positives.

Undefined arithmetic is not an error:
- An absent input (None) is treated as NaN
- PPV/NPV with a zero denominator yield NaN
NaN then flows downstream like any other number.
"""

from typing import assert_never

from bayes_backend.utils.ternary_choice import TernaryChoice

NAN = float('nan')


def _number(value):
    return NAN if value is None else value


def _ratio(numerator, denominator):
    # cells are non-negative, so a zero denominator means 0/0
    if denominator == 0:
        return NAN
    return numerator / denominator


# ========================
# First tier: 2x2 table cells
# ========================

def true_positive(base_rate, sensitivity):
    base_rate, sensitivity = _number(base_rate), _number(sensitivity)
    return base_rate * sensitivity / 100


def false_negative(base_rate, sensitivity):
    base_rate, sensitivity = _number(base_rate), _number(sensitivity)
    return base_rate * (100 - sensitivity) / 100


def false_positive(base_rate, specificity):
    base_rate, specificity = _number(base_rate), _number(specificity)
    return (100 - base_rate) * (100 - specificity) / 100


def true_negative(base_rate, specificity):
    base_rate, specificity = _number(base_rate), _number(specificity)
    return (100 - base_rate) * specificity / 100


# ========================
# Second tier: predictive values
# ========================

def positive_predictive_value(true_positive, false_positive):
    """P(condition | positive test) as a percentage; NaN when tp + fp == 0"""
    true_positive, false_positive = _number(true_positive), _number(false_positive)
    return _ratio(100 * true_positive, true_positive + false_positive)


def negative_predictive_value(true_negative, false_negative):
    """P(no condition | negative test) as a percentage; NaN when tn + fn == 0"""
    true_negative, false_negative = _number(true_negative), _number(false_negative)
    return _ratio(100 * true_negative, true_negative + false_negative)


# ========================
# Terminal: posterior
# ========================

def condition_probability(test_result: TernaryChoice, base_rate, positive_predictive_value,
                          negative_predictive_value):
    """
    Probability of the condition given what is known about the test.

    Args:
        test_result: Selected test outcome
        base_rate: Prior (used when the result is unknown)
        positive_predictive_value: Posterior after a positive test
        negative_predictive_value: Used as 100 - NPV after a negative test

    Raises:
        AssertionError: For a value outside TernaryChoice (programming error)

    Examples:
        >>> condition_probability(TernaryChoice.NEGATIVE, 30, 77, 92)
        8
    """
    match test_result:
        case TernaryChoice.UNKNOWN:
            return _number(base_rate)
        case TernaryChoice.POSITIVE:
            return _number(positive_predictive_value)
        case TernaryChoice.NEGATIVE:
            return 100 - _number(negative_predictive_value)
        case _:
            assert_never(test_result)
