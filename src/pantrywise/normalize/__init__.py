"""Quantity parsing, unit conversion and name normalization."""

from pantrywise.normalize.quantity import ParsedQuantity, parse_number, parse_quantity
from pantrywise.normalize.units import (
    COUNT_UNITS,
    VOLUME_TO_ML,
    WEIGHT_TO_GRAMS,
    IncompatibleUnitsError,
    NormalizedQuantity,
    UnitType,
    add,
    are_comparable,
    infer_unit_type,
    normalize_name,
    normalize_quantity,
    scale,
    to_display_string,
)

__all__ = [
    "COUNT_UNITS",
    "VOLUME_TO_ML",
    "WEIGHT_TO_GRAMS",
    "IncompatibleUnitsError",
    "NormalizedQuantity",
    "ParsedQuantity",
    "UnitType",
    "add",
    "are_comparable",
    "infer_unit_type",
    "normalize_name",
    "normalize_quantity",
    "parse_number",
    "parse_quantity",
    "scale",
    "to_display_string",
]
