"""Unit parsing and conversion."""

from .conversion import convert_unit, convert_units, parse_conversion_rule, parse_unit
from .tables import Dimension, dimension_of, normalize_unit
from .types import ConversionRule, Custom, Default, Fraction, Range, Unit

__all__ = [
    "parse_unit",
    "parse_conversion_rule",
    "convert_units",
    "convert_unit",
    "normalize_unit",
    "dimension_of",
    "Dimension",
    "ConversionRule",
    "Default",
    "Fraction",
    "Range",
    "Custom",
    "Unit",
]
