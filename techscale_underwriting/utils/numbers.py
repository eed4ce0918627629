"""Numeric helpers shared by the scoring and pricing code"""

import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

# First run of digits, optionally with thousands separators, decimals and a "k" suffix
_AMOUNT_PATTERN = re.compile(r"(\d[\d,]*(?:\.\d+)?)(?:\s*([kK])\b)?")


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round half away from zero.

    Python's round() uses banker's rounding (round(2.5) == 2); pricing and
    scoring thresholds expect 2.5 → 3.
    """
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def parse_amount(text: Optional[str]) -> Optional[float]:
    """
    Extract the first numeric amount from free text.

    "£60,000" → 60000.0, "45k" → 45000.0, "about 12,500.50 GBP" → 12500.5.
    Returns None when no digits are present.
    """
    if not text:
        return None
    match = _AMOUNT_PATTERN.search(str(text))
    if not match:
        return None
    amount = float(match.group(1).replace(",", ""))
    if match.group(2):
        amount *= 1000
    return amount
