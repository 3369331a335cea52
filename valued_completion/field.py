# -*- coding: utf-8 -*-
"""
域的能力接口 (Field capability)

``Field`` is the narrow interface the valuation layer consumes. Inversion is
total: ``inv(0) = 0`` by convention, so division by zero is never raised
anywhere in the engine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from fractions import Fraction
from typing import Any, List

from .exact import as_fraction_strict


__all__ = ["Field", "RationalField"]


class Field(ABC):
    """域的抽象基类"""

    name: str = "K"

    @abstractmethod
    def zero(self) -> Any: pass

    @abstractmethod
    def one(self) -> Any: pass

    @abstractmethod
    def add(self, a: Any, b: Any) -> Any: pass

    @abstractmethod
    def neg(self, a: Any) -> Any: pass

    @abstractmethod
    def mul(self, a: Any, b: Any) -> Any: pass

    @abstractmethod
    def inv(self, a: Any) -> Any:
        """Total inverse, inv(0) = 0."""

    @abstractmethod
    def is_zero(self, a: Any) -> bool: pass

    @abstractmethod
    def coerce(self, a: Any) -> Any: pass

    def sub(self, a: Any, b: Any) -> Any:
        return self.add(a, self.neg(b))

    def div(self, a: Any, b: Any) -> Any:
        return self.mul(a, self.inv(b))

    def eq(self, a: Any, b: Any) -> bool:
        return self.is_zero(self.sub(a, b))

    def sample_elements(self) -> List[Any]:
        """Deterministic finite sample for axiom checks."""
        return [self.zero(), self.one(), self.neg(self.one())]

    def __repr__(self) -> str:
        return self.name


class RationalField(Field):
    """
    有理数域 ℚ

    Elements are ``Fraction``; ints and rational strings are coerced, floats are
    rejected.
    """

    name = "ℚ"

    def zero(self) -> Fraction:
        return Fraction(0)

    def one(self) -> Fraction:
        return Fraction(1)

    def add(self, a: Fraction, b: Fraction) -> Fraction:
        return a + b

    def neg(self, a: Fraction) -> Fraction:
        return -a

    def mul(self, a: Fraction, b: Fraction) -> Fraction:
        return a * b

    def inv(self, a: Fraction) -> Fraction:
        if a == 0:
            return Fraction(0)
        return 1 / a

    def is_zero(self, a: Fraction) -> bool:
        return a == 0

    def eq(self, a: Fraction, b: Fraction) -> bool:
        return a == b

    def coerce(self, a: Any) -> Fraction:
        return as_fraction_strict(a, name="element of ℚ")

    def sample_elements(self) -> List[Fraction]:
        # small numerators/denominators hit every residue pattern of 2, 3, 5, 7
        out = [Fraction(0)]
        for num in (1, 2, 3, 4, 5, 6, 7, 8, 9, 12, 14, 18, 25, 49):
            for den in (1, 2, 3, 5, 7, 9, 16):
                for sign in (1, -1):
                    out.append(Fraction(sign * num, den))
        return out

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RationalField)

    def __hash__(self) -> int:
        return hash("RationalField")
