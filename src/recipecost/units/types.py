"""Parsed unit expressions and conversion rules."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ConversionRule:
    """Equivalence between two quantities, e.g. ``1 loaf = 800 g``."""

    from_amount: float
    from_unit: str
    to_amount: float
    to_unit: str

    def __str__(self) -> str:
        return f"{self.from_amount:g} {self.from_unit} = {self.to_amount:g} {self.to_unit}"


@dataclass(frozen=True)
class Default:
    """Plain amount of a standard unit: ``120g``, ``1.5 l``."""

    value: float
    unit: str

    @property
    def amount(self) -> float:
        return self.value


@dataclass(frozen=True)
class Fraction:
    """Fractional or mixed amount: ``1/2 cup``, ``1 1/2 cups``."""

    numerator: int
    denominator: int
    unit: str
    whole: int = 0

    @property
    def amount(self) -> float:
        return self.whole + self.numerator / self.denominator


@dataclass(frozen=True)
class Range:
    """Amount given as a range, costed at its maximum: ``1-2 cups``."""

    minimum: float
    maximum: float
    unit: str

    @property
    def amount(self) -> float:
        return self.maximum


@dataclass(frozen=True)
class Custom:
    """Amount of a non-standard unit (``2 loaves``).

    Converting it to any other unit needs ``rule``.
    """

    value: float
    unit: str
    rule: ConversionRule | None = None

    @property
    def amount(self) -> float:
        return self.value


Unit = Union[Default, Fraction, Range, Custom]
