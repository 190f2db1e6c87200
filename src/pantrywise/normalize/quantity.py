"""Free-text quantity parsing.

Receipt OCR output and LLM-generated ingredient lists are untrusted text,
so everything in this module resolves to a fallback value instead of
raising.
"""

import math
import re
from dataclasses import dataclass

# Leading numeric run (optional sign, digits, separators, fractions) + unit token
QUANTITY_PATTERN = re.compile(r"^(-?[\d.,/\s]+)\s*(.*)$")
THOUSANDS_COMMA_PATTERN = re.compile(r"^\d{1,3}(,\d{3})+$")

DEFAULT_VALUE = 1.0
DEFAULT_UNIT = "count"


@dataclass(frozen=True)
class ParsedQuantity:
    """Numeric value and raw unit token split out of a quantity string."""

    value: float
    unit: str


def parse_quantity(raw: str | None) -> ParsedQuantity:
    """
    Split a quantity string into a number and a unit token.

    Examples:
        "1 1/2 cups" -> ParsedQuantity(1.5, "cups")
        "500g" -> ParsedQuantity(500.0, "g")
        "apples" -> ParsedQuantity(1.0, "count")
    """
    if not raw:
        return ParsedQuantity(DEFAULT_VALUE, DEFAULT_UNIT)

    match = QUANTITY_PATTERN.match(str(raw).lower().strip())
    if not match:
        return ParsedQuantity(DEFAULT_VALUE, DEFAULT_UNIT)

    number_run, unit_token = match.groups()
    return ParsedQuantity(parse_number(number_run), unit_token.strip() or DEFAULT_UNIT)


def parse_number(number_run: str) -> float:
    """
    Resolve a numeric run to a float.

    Handles:
    - mixed numbers and fractions ("1 1/2", "3/4")
    - comma thousands separators ("1,234.56", "1,234,567", "1,500")
    - dot thousands separators with decimal comma ("1.234,56")
    - decimal comma ("1,5")
    """
    cleaned = number_run.strip()

    if "/" in cleaned:
        return _parse_fraction_sum(cleaned)

    try:
        return float(_resolve_separators(cleaned))
    except ValueError:
        return DEFAULT_VALUE


def _parse_fraction_sum(cleaned: str) -> float:
    total = 0.0
    for part in cleaned.split():
        if "/" in part:
            numerator, denominator = (part.split("/") + [""])[:2]
            num = _fraction_operand(numerator)
            denom = _fraction_operand(denominator)
            if denom != 0:
                total += num / denom
        else:
            try:
                total += float(_resolve_separators(part))
            except ValueError:
                continue

    if not total or math.isnan(total):
        return DEFAULT_VALUE
    return total


def _fraction_operand(text: str) -> float:
    # An empty side counts as zero; anything unreadable poisons the sum.
    if not text:
        return 0.0
    try:
        return float(text.replace(",", "."))
    except ValueError:
        return math.nan


def _resolve_separators(text: str) -> str:
    has_comma = "," in text
    has_dot = "." in text

    if has_comma and has_dot:
        if text.index(",") < text.index("."):
            return text.replace(",", "")
        return text.replace(".", "").replace(",", ".")

    if text.count(",") > 1:
        return text.replace(",", "")

    if has_comma and THOUSANDS_COMMA_PATTERN.match(text):
        return text.replace(",", "")

    return text.replace(",", ".")
