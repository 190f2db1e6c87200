"""Unit normalization and conversion utilities."""

import math
import re
from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Context, Decimal
from enum import Enum

from pantrywise.logging_config import get_logger
from pantrywise.normalize.quantity import parse_quantity

logger = get_logger(__name__)


# =============================================================================
# Unit Conversion Tables
# =============================================================================

# Weight conversions (base unit: g)
WEIGHT_TO_GRAMS: dict[str, float] = {
    "g": 1.0,
    "gram": 1.0,
    "grams": 1.0,
    "kg": 1000.0,
    "kilogram": 1000.0,
    "kilograms": 1000.0,
    "oz": 28.3495,
    "ounce": 28.3495,
    "ounces": 28.3495,
    "lb": 453.592,
    "lbs": 453.592,
    "pound": 453.592,
    "pounds": 453.592,
    "mg": 0.001,
    "milligram": 0.001,
    "milligrams": 0.001,
}

# Volume conversions (base unit: ml)
VOLUME_TO_ML: dict[str, float] = {
    "ml": 1.0,
    "milliliter": 1.0,
    "milliliters": 1.0,
    "millilitre": 1.0,
    "millilitres": 1.0,
    "l": 1000.0,
    "liter": 1000.0,
    "liters": 1000.0,
    "litre": 1000.0,
    "litres": 1000.0,
    "cup": 236.588,
    "cups": 236.588,
    "tbsp": 14.787,
    "tablespoon": 14.787,
    "tablespoons": 14.787,
    "tsp": 4.929,
    "teaspoon": 4.929,
    "teaspoons": 4.929,
    "fl oz": 29.5735,
    "fluid ounce": 29.5735,
    "fluid ounces": 29.5735,
    "floz": 29.5735,
    "pint": 473.176,
    "pints": 473.176,
    "pt": 473.176,
    "quart": 946.353,
    "quarts": 946.353,
    "qt": 946.353,
    "gallon": 3785.41,
    "gallons": 3785.41,
    "gal": 3785.41,
}

# Count-based units (no conversion needed, base unit: count)
COUNT_UNITS: frozenset[str] = frozenset(
    {
        "count",
        "piece",
        "pieces",
        "pcs",
        "pc",
        "unit",
        "units",
        "each",
        "ea",
        "item",
        "items",
        "bunch",
        "bunches",
        "head",
        "heads",
        "clove",
        "cloves",
        "slice",
        "slices",
        "can",
        "cans",
        "bottle",
        "bottles",
        "jar",
        "jars",
        "pack",
        "packs",
        "package",
        "packages",
        "bag",
        "bags",
        "box",
        "boxes",
        "dozen",
        "doz",
    }
)

DOZEN_UNITS = ("dozen", "doz")

# Descriptors dropped from ingredient names before matching
NAME_MODIFIERS = re.compile(r"\b(?:organic|fresh|frozen|canned|dried)\b", re.IGNORECASE)
NAME_DISALLOWED_CHARS = re.compile(r"[^\w\s-]")
WHITESPACE_RUN = re.compile(r"\s+")


class UnitType(str, Enum):
    """Canonical unit families."""

    WEIGHT = "WEIGHT"
    VOLUME = "VOLUME"
    COUNT = "COUNT"

    @property
    def base_unit(self) -> str:
        return BASE_UNITS[self]


BASE_UNITS: dict[UnitType, str] = {
    UnitType.WEIGHT: "g",
    UnitType.VOLUME: "ml",
    UnitType.COUNT: "count",
}


class IncompatibleUnitsError(ValueError):
    """Raised when quantities of different unit types are combined."""

    def __init__(self, first: UnitType, second: UnitType):
        super().__init__(
            f"Cannot add quantities of different types: {first.value} and {second.value}"
        )
        self.first = first
        self.second = second


@dataclass(frozen=True)
class NormalizedQuantity:
    """A quantity expressed in the canonical base unit of its type."""

    value: float
    unit: str
    unit_type: UnitType
    original_value: str

    @classmethod
    def of(cls, value: float, unit_type: UnitType, original_value: str) -> "NormalizedQuantity":
        """Build a quantity whose unit is derived from its unit type."""
        return cls(
            value=value,
            unit=unit_type.base_unit,
            unit_type=unit_type,
            original_value=original_value,
        )

    @classmethod
    def from_stored(
        cls,
        value: float | Decimal | str,
        unit: str | None,
        unit_type: UnitType | str | None,
    ) -> "NormalizedQuantity":
        """
        Re-hydrate a quantity persisted as a (value, unit, unit_type) triple.

        The stored value is already canonical, so no conversion is applied.
        A missing unit type is inferred from the stored unit.
        """
        if unit_type:
            resolved_type = UnitType(unit_type)
        else:
            resolved_type = infer_unit_type(unit or "")
        numeric = float(value)
        return cls.of(numeric, resolved_type, f"{numeric:g} {resolved_type.base_unit}")

    def to_stored(self) -> tuple[Decimal, str, str]:
        """Serialize to the (decimal value, unit, unit type) storage triple."""
        return Decimal(str(self.value)), self.unit, self.unit_type.value

    def __add__(self, other: "NormalizedQuantity") -> "NormalizedQuantity":
        return add(self, other)


# =============================================================================
# Normalization
# =============================================================================


def normalize_quantity(raw: str | None) -> NormalizedQuantity:
    """
    Normalize a raw quantity string into canonical base units.

    Unknown units are treated as counts, and unparseable numbers fall back
    to a value of 1, so this never raises for bad input.
    """
    original = "" if raw is None else str(raw)
    parsed = parse_quantity(raw)
    unit = parsed.unit.lower()

    if unit in DOZEN_UNITS:
        return NormalizedQuantity.of(parsed.value * 12, UnitType.COUNT, original)

    if unit in WEIGHT_TO_GRAMS:
        grams = parsed.value * WEIGHT_TO_GRAMS[unit]
        return NormalizedQuantity.of(grams, UnitType.WEIGHT, original)

    if unit in VOLUME_TO_ML:
        millilitres = parsed.value * VOLUME_TO_ML[unit]
        return NormalizedQuantity.of(millilitres, UnitType.VOLUME, original)

    if unit in COUNT_UNITS or unit == "":
        return NormalizedQuantity.of(parsed.value, UnitType.COUNT, original)

    logger.debug(f"Unrecognized unit '{unit}' in '{original}', treating as count")
    return NormalizedQuantity.of(parsed.value, UnitType.COUNT, original)


def infer_unit_type(unit: str) -> UnitType:
    """Classify a bare unit string."""
    unit_lower = unit.lower().strip()
    if unit_lower in WEIGHT_TO_GRAMS:
        return UnitType.WEIGHT
    if unit_lower in VOLUME_TO_ML:
        return UnitType.VOLUME
    return UnitType.COUNT


def normalize_name(raw: str | None) -> str:
    """
    Normalize an ingredient or product name for matching.

    - Lowercase
    - Remove common modifiers (organic, fresh, frozen, canned, dried)
    - Remove special characters except hyphens
    - Collapse whitespace
    """
    if not raw:
        return ""

    name = raw.lower().strip()
    name = NAME_MODIFIERS.sub("", name)
    name = NAME_DISALLOWED_CHARS.sub("", name)
    name = WHITESPACE_RUN.sub(" ", name)
    return name.strip()


# =============================================================================
# Arithmetic
# =============================================================================


def are_comparable(first: NormalizedQuantity, second: NormalizedQuantity) -> bool:
    """Check whether two quantities share a unit type."""
    return first.unit_type == second.unit_type


def add(first: NormalizedQuantity, second: NormalizedQuantity) -> NormalizedQuantity:
    """Add two quantities of the same unit type."""
    if not are_comparable(first, second):
        raise IncompatibleUnitsError(first.unit_type, second.unit_type)

    return NormalizedQuantity(
        value=first.value + second.value,
        unit=first.unit,
        unit_type=first.unit_type,
        original_value=f"{first.original_value} + {second.original_value}",
    )


def scale(quantity: NormalizedQuantity, factor: float) -> NormalizedQuantity:
    """Multiply a quantity by a factor, e.g. to adjust recipe servings."""
    return replace(
        quantity,
        value=quantity.value * factor,
        original_value=f"{quantity.original_value} × {_format_factor(factor)}",
    )


def _format_factor(factor: float) -> str:
    if float(factor).is_integer():
        return str(int(factor))
    return str(factor)


# =============================================================================
# Display
# =============================================================================

TENTH = Decimal("0.1")

# Wide enough for any finite float in fixed-point form
DISPLAY_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)


def to_display_string(quantity: NormalizedQuantity) -> str:
    """
    Convert a canonical quantity back to a human-readable string.

    Halves round up in both the whole-number and one-decimal forms.
    Infinite values, from absurdly long numeric runs, render as "inf".
    """
    value = quantity.value

    if quantity.unit_type == UnitType.WEIGHT:
        if value >= 1000:
            return f"{_one_decimal(value / 1000)}kg"
        return f"{_whole(value)}g"

    if quantity.unit_type == UnitType.VOLUME:
        if value >= 1000:
            return f"{_one_decimal(value / 1000)}L"
        return f"{_whole(value)}ml"

    if float(value).is_integer():
        return str(int(value))
    return _one_decimal(value)


def _whole(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    return str(round_half_up(value))


def _one_decimal(value: float) -> str:
    # Rounds the exact binary value, so 1.25 -> 1.3 but 1.15 (1.1499...) -> 1.1
    if not math.isfinite(value):
        return str(value)
    return str(Decimal(value).quantize(TENTH, context=DISPLAY_CONTEXT))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (round() rounds half to even)."""
    return math.floor(value + 0.5)
