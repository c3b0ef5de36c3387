"""
Utility helpers for the Bayesian calculator

Fixed-precision rendering and defaults loading.
"""

import json
import logging
import math
from pathlib import Path

logger = logging.getLogger(__name__)

# data/ sits next to the bayes_backend package at the project root
DEFAULTS_PATH = Path(__file__).resolve().parent.parent.parent / "data" / "calculator_defaults.json"

REQUIRED_DEFAULT_KEYS = {'sensitivity', 'specificity', 'base_rate', 'test_result'}


def format_fixed(value, digits=2):
    """
    Render a number with a fixed number of decimals.

    NaN renders as 'NaN' so undefined predictive values stay visible
    instead of reading as a number.

    Args:
        value (float | None): Value to render (None is treated as NaN)
        digits (int): Decimal places

    Returns:
        str: Rendered text

    Examples:
        >>> format_fixed(8.333333)
        '8.33'
        >>> format_fixed(float('nan'))
        'NaN'
    """
    if value is None or math.isnan(value):
        return "NaN"
    return f"{value:.{digits}f}"


def load_defaults(path=DEFAULTS_PATH):
    """
    Load initial widget contents for the four calculator inputs.

    Args:
        path (str or Path): Path to defaults JSON file

    Returns:
        dict: Raw defaults with keys sensitivity, specificity, base_rate,
              test_result. Percentages are kept as text, exactly as they
              would sit in an entry field.

    Raises:
        FileNotFoundError: If defaults file is missing
        ValueError: If a required key is missing
    """
    defaults_file = Path(path)
    if not defaults_file.exists():
        raise FileNotFoundError(f"Calculator defaults not found: {path}")

    with open(defaults_file, 'r') as f:
        defaults = json.load(f)

    missing = REQUIRED_DEFAULT_KEYS - set(defaults)
    if missing:
        raise ValueError(f"Calculator defaults missing keys: {sorted(missing)}")

    logger.info(f"Loaded calculator defaults from {defaults_file}")
    return defaults
