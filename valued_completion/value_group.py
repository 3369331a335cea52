# -*- coding: utf-8 -*-
"""
有序值群 Γ₀ (Ordered Value Group with Zero)

Γ₀ is a linearly ordered commutative monoid-with-zero whose units form an
ordered group:

    0 · x = 0,   0 ≤ x,   a < b ⟹ a·c < b·c  (c a unit)

Elements are exact ``Fraction`` values inside ℚ≥0, so the order and the
multiplication are those of ℚ. Capabilities are split into small ABCs and
composed in ``ValueGroupWithZero``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from fractions import Fraction
from typing import Any, Iterable, Iterator

import numpy as np

from .errors import CompletionInputError
from .exact import as_fraction_strict


__all__ = [
    "HasZero",
    "HasOne",
    "HasMul",
    "LinearOrder",
    "ValueGroupWithZero",
    "RationalValueGroup",
    "DiscreteValueGroup",
]


class HasZero(ABC):
    @abstractmethod
    def zero(self) -> Any: pass


class HasOne(ABC):
    @abstractmethod
    def one(self) -> Any: pass


class HasMul(ABC):
    @abstractmethod
    def mul(self, a: Any, b: Any) -> Any: pass


class LinearOrder(ABC):
    @abstractmethod
    def le(self, a: Any, b: Any) -> bool: pass

    def lt(self, a: Any, b: Any) -> bool:
        return self.le(a, b) and not self.le(b, a)

    def max(self, a: Any, b: Any) -> Any:
        return b if self.le(a, b) else a

    def min(self, a: Any, b: Any) -> Any:
        return a if self.le(a, b) else b


class ValueGroupWithZero(HasZero, HasOne, HasMul, LinearOrder):
    """
    Γ₀ 的公共接口

    Elements are Fractions; subclasses restrict which Fractions are members
    and supply a cofinal descending family of units for searches.
    """

    name: str = "Γ₀"

    def zero(self) -> Fraction:
        return Fraction(0)

    def one(self) -> Fraction:
        return Fraction(1)

    def mul(self, a: Fraction, b: Fraction) -> Fraction:
        return a * b

    def le(self, a: Fraction, b: Fraction) -> bool:
        return a <= b

    def lt(self, a: Fraction, b: Fraction) -> bool:
        return a < b

    def is_unit(self, a: Fraction) -> bool:
        return a > 0

    def inv_unit(self, a: Fraction) -> Fraction:
        """Inverse in the unit group Γ₀ˣ; 0 has none."""
        if not self.is_unit(a):
            raise CompletionInputError(f"{a} is not a unit of {self.name}")
        return 1 / a

    def pow(self, a: Fraction, n: int) -> Fraction:
        if n < 0:
            return self.inv_unit(a) ** (-n)
        return a ** n

    def coerce(self, a: Any, *, name: str = "value") -> Fraction:
        value = as_fraction_strict(a, name=name)
        if not self.contains(value):
            raise CompletionInputError(f"{name}={value} is not an element of {self.name}")
        return value

    def require_unit(self, gamma: Any, *, name: str = "gamma") -> Fraction:
        """Coerce a tolerance and check it is a unit of Γ₀ (positive and a member)."""
        value = as_fraction_strict(gamma, name=name)
        if value <= 0 or not self.contains(value):
            raise CompletionInputError(f"{name} must be a positive unit of {self.name}, got {value}")
        return value

    @abstractmethod
    def contains(self, a: Fraction) -> bool: pass

    @abstractmethod
    def units_below(self, gamma: Fraction, depth: int) -> Iterator[Fraction]:
        """
        Strictly decreasing units, all < gamma, cofinal towards 0 as depth grows.
        """

    def __repr__(self) -> str:
        return self.name


class RationalValueGroup(ValueGroupWithZero):
    """ℚ≥0 under multiplication; dense units, halving gives a cofinal family."""

    name = "ℚ≥0"

    def contains(self, a: Fraction) -> bool:
        return isinstance(a, Fraction) and a >= 0

    def units_below(self, gamma: Fraction, depth: int) -> Iterator[Fraction]:
        gamma = self.require_unit(gamma)
        current = gamma
        for _ in range(depth):
            current = current / 2
            yield current


class DiscreteValueGroup(ValueGroupWithZero):
    """
    {0} ∪ {base^n : n ∈ ℤ} ⊂ ℚ≥0

    Value group of a discretely valued field: the p-adic valuation
    v(pⁿ·a/b) = p⁻ⁿ lands here with base = p.
    """

    def __init__(self, base: int):
        if not isinstance(base, int) or isinstance(base, bool) or base < 2:
            raise CompletionInputError(f"base must be int >= 2, got {base!r}")
        self.base = base
        self.name = f"{base}^ℤ ∪ {{0}}"

    def contains(self, a: Fraction) -> bool:
        if not isinstance(a, Fraction) or a < 0:
            return False
        if a == 0:
            return True
        num, den = a.numerator, a.denominator
        if num != 1 and den != 1:
            return False
        x = num if den == 1 else den
        while x % self.base == 0:
            x //= self.base
        return x == 1

    def exponent(self, a: Fraction) -> int:
        """n with a = base^n; zero has no exponent."""
        if a == 0:
            raise CompletionInputError("the zero of Γ₀ has no exponent")
        if not self.contains(a):
            raise CompletionInputError(f"{a} is not a power of {self.base}")
        n = 0
        num, den = a.numerator, a.denominator
        while num % self.base == 0:
            num //= self.base
            n += 1
        while den % self.base == 0:
            den //= self.base
            n -= 1
        return n

    def exponents(self, values: Iterable[Fraction]) -> np.ndarray:
        """Vectorised ``exponent`` for valuation profiles."""
        return np.asarray([self.exponent(v) for v in values], dtype=np.int64)

    def from_exponent(self, n: int) -> Fraction:
        return Fraction(self.base) ** n

    def units_below(self, gamma: Fraction, depth: int) -> Iterator[Fraction]:
        gamma = self.require_unit(gamma)
        # largest power of base strictly below gamma
        current = Fraction(1)
        while current >= gamma:
            current = current / self.base
        while current * self.base < gamma:
            current = current * self.base
        for _ in range(depth):
            yield current
            current = current / self.base

    def __eq__(self, other: object) -> bool:
        return isinstance(other, DiscreteValueGroup) and other.base == self.base

    def __hash__(self) -> int:
        return hash(("DiscreteValueGroup", self.base))
