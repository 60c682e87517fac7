"""
Numeric parsing and guarded arithmetic.

All monetary inputs entering the engine go through ``parse_amount`` so the
fallback policy lives in one place:

- ints, floats and Decimals pass through as float
- strings are stripped of whitespace, currency symbols and thousands
  separators before parsing ("€ 1.234,50" and "$1,234.50" both work)
- None, empty strings, NaN and infinities resolve to ``default``
- anything unparsable resolves to ``default`` and is logged
"""

import logging
import math
import re
from decimal import Decimal
from typing import Any, Optional

logger = logging.getLogger(__name__)

_CURRENCY_CHARS = re.compile(r"[€$£¥\s]|EUR|USD|GBP", re.IGNORECASE)


def _normalize_number_string(text: str) -> str:
    """Resolve thousands/decimal separators to a plain float literal."""
    if "," in text and "." in text:
        # The right-most separator is the decimal mark
        if text.rfind(",") > text.rfind("."):
            return text.replace(".", "").replace(",", ".")
        return text.replace(",", "")
    if "," in text:
        head, _, tail = text.rpartition(",")
        if len(tail) == 3 and head:
            return text.replace(",", "")
        return text.replace(",", ".")
    return text


def parse_amount(value: Any, default: float = 0.0) -> float:
    """
    Parse a monetary value into a float.

    Args:
        value: Raw value (number, numeric string, Decimal or None)
        default: Value used for missing or unparsable input

    Returns:
        Parsed float, or ``default``
    """
    if value is None:
        return default

    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        text = _CURRENCY_CHARS.sub("", value)
        if not text:
            return default
        try:
            number = float(_normalize_number_string(text))
        except ValueError:
            logger.warning(f"Unparsable amount {value!r}, using {default}")
            return default
    else:
        logger.warning(f"Unsupported amount type {type(value).__name__}, using {default}")
        return default

    if math.isnan(number) or math.isinf(number):
        return default
    return number


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning ``default`` when the denominator is zero."""
    if denominator == 0:
        return default
    return numerator / denominator


def clamp(value: float, lower: float, upper: Optional[float] = None) -> float:
    """Clamp a value into [lower, upper]."""
    if upper is not None and value > upper:
        return upper
    return max(lower, value)
