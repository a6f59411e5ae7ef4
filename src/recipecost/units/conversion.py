"""Parsing of unit expressions and conversion between units."""

import logging
import re

from recipecost.errors import (
    ConversionRuleParseError,
    IncompatibleUnitsError,
    UnitParseError,
)
from recipecost.units.tables import (
    DESCRIPTIVE_QUANTITIES,
    TABLES,
    dimension_of,
    normalize_unit,
)
from recipecost.units.types import ConversionRule, Custom, Default, Fraction, Range, Unit

logger = logging.getLogger(__name__)

_NUMBER = r"(\d+(?:\.\d+)?|\.\d+)"
_RANGE_RE = re.compile(rf"^{_NUMBER}\s*-\s*{_NUMBER}\s*(.+)$")
_MIXED_RE = re.compile(r"^(\d+)\s+(\d+)/(\d+)\s*(.+)$")
_FRACTION_RE = re.compile(r"^(\d+)/(\d+)\s*(.+)$")
_DEFAULT_RE = re.compile(rf"^{_NUMBER}\s*(.+)$")
_RULE_RE = re.compile(rf"^{_NUMBER}\s*([^=]*?)\s*=\s*{_NUMBER}\s*([^=]*?)$")
_HAS_LETTER = re.compile(r"[a-z]")


def _unit_symbol(text: str, raw: str) -> str:
    if not _HAS_LETTER.search(raw):
        raise UnitParseError(text, "missing unit")
    return normalize_unit(raw)


def parse_unit(text: str, rule: ConversionRule | str | None = None) -> Unit:
    """Parse a quantity such as ``120g``, ``1 1/2 cups``, ``1-2 cups`` or ``2 loaves``.

    Unit symbols are normalised (``grams`` -> ``g``, ``loaves`` -> ``loaf``).
    ``rule`` is attached to custom units so they can later be converted.
    """
    cleaned = " ".join(text.lower().split())
    if not cleaned:
        raise UnitParseError(text, "empty")
    if any(pattern in cleaned for pattern in DESCRIPTIVE_QUANTITIES):
        raise UnitParseError(text, "descriptive quantities cannot be costed")

    if match := _RANGE_RE.match(cleaned):
        low, high, raw = match.groups()
        minimum, maximum = sorted((float(low), float(high)))
        return Range(minimum, maximum, _unit_symbol(text, raw))

    if match := _MIXED_RE.match(cleaned):
        whole, num, den, raw = match.groups()
        if int(den) == 0:
            raise UnitParseError(text, "zero denominator")
        return Fraction(int(num), int(den), _unit_symbol(text, raw), whole=int(whole))

    if match := _FRACTION_RE.match(cleaned):
        num, den, raw = match.groups()
        if int(den) == 0:
            raise UnitParseError(text, "zero denominator")
        return Fraction(int(num), int(den), _unit_symbol(text, raw))

    match = _DEFAULT_RE.match(cleaned)
    if not match:
        raise UnitParseError(text)

    value, raw = match.groups()
    unit = _unit_symbol(text, raw)
    if dimension_of(unit) is not None:
        return Default(float(value), unit)

    if isinstance(rule, str):
        rule = parse_conversion_rule(rule)
    return Custom(float(value), unit, rule)


def parse_conversion_rule(text: str) -> ConversionRule:
    """Parse ``"1 loaf = 16 slices"`` into a ConversionRule."""
    cleaned = " ".join(text.lower().split())
    match = _RULE_RE.match(cleaned)
    if not match:
        raise ConversionRuleParseError(text)

    from_amount, from_unit, to_amount, to_unit = match.groups()
    if not (_HAS_LETTER.search(from_unit) and _HAS_LETTER.search(to_unit)):
        raise ConversionRuleParseError(text)
    if float(from_amount) <= 0 or float(to_amount) <= 0:
        raise ConversionRuleParseError(text)

    return ConversionRule(
        from_amount=float(from_amount),
        from_unit=normalize_unit(from_unit),
        to_amount=float(to_amount),
        to_unit=normalize_unit(to_unit),
    )


def _convert_standard(amount: float, from_unit: str, to_unit: str) -> float | None:
    """Convert between normalised units of one dimension, None if not possible."""
    if from_unit == to_unit:
        return amount

    dimension = dimension_of(from_unit)
    if dimension is None or dimension != dimension_of(to_unit):
        return None

    table = TABLES[dimension]
    return amount * table[from_unit] / table[to_unit]


def _apply_rule(
    amount: float, from_unit: str, to_unit: str, rule: ConversionRule
) -> float | None:
    """Bridge two units through ``rule`` in either direction."""
    directions = (
        (rule.from_unit, rule.to_unit, rule.to_amount / rule.from_amount),
        (rule.to_unit, rule.from_unit, rule.from_amount / rule.to_amount),
    )
    for rule_from, rule_to, ratio in directions:
        into_rule = _convert_standard(amount, from_unit, rule_from)
        if into_rule is None:
            continue
        converted = _convert_standard(into_rule * ratio, rule_to, to_unit)
        if converted is not None:
            return converted
    return None


def convert_units(
    amount: float,
    from_unit: str,
    to_unit: str,
    rule: ConversionRule | str | None = None,
) -> float:
    """Express ``amount`` of ``from_unit`` in ``to_unit``.

    Units of the same dimension convert through the standard tables; anything
    else needs ``rule``. Raises IncompatibleUnitsError when no path exists.
    """
    src = normalize_unit(from_unit)
    dst = normalize_unit(to_unit)

    converted = _convert_standard(amount, src, dst)
    if converted is not None:
        return converted

    if rule is not None:
        if isinstance(rule, str):
            rule = parse_conversion_rule(rule)
        logger.debug("No standard conversion for %s -> %s, trying rule '%s'", src, dst, rule)
        converted = _apply_rule(amount, src, dst, rule)
        if converted is not None:
            return converted

    raise IncompatibleUnitsError(src, dst)


def convert_unit(
    unit: Unit, to_unit: str, rule: ConversionRule | str | None = None
) -> float:
    """Convert a parsed quantity, using its own rule if it is a custom unit."""
    if rule is None and isinstance(unit, Custom):
        rule = unit.rule
    return convert_units(unit.amount, unit.unit, to_unit, rule)
