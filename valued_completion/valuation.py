# -*- coding: utf-8 -*-
"""
赋值 (Valuation)

A valuation on a field K is a map v: K → Γ₀ with

    v(0) = 0,   v(1) = 1,   v(xy) = v(x)·v(y),   v(x+y) ≤ max(v(x), v(y)).

The four axioms are a constructor precondition. They are never re-checked per
call; ``check_axioms`` / ``assert_axioms`` exist so that tests can verify them
on a sample.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Callable, List, Optional, Sequence

from .errors import CompletionInputError, ValuationAxiomError
from .field import Field, RationalField
from .value_group import DiscreteValueGroup, ValueGroupWithZero


__all__ = [
    "AxiomViolation",
    "Valuation",
    "padic_valuation",
    "padic_order",
    "trivial_valuation",
]


@dataclass(frozen=True)
class AxiomViolation:
    """一条公理反例"""
    axiom: str
    args: tuple
    detail: str


class Valuation:
    """
    v: K → Γ₀ bound to a field.

    Immutable: the map, the field and the value group are fixed at
    construction. ``ExtendedValuation`` rebinds the same laws to a new carrier.
    """

    def __init__(self, field: Field, value_group: ValueGroupWithZero,
                 fn: Callable[[Any], Fraction], name: str = "v"):
        if not isinstance(field, Field):
            raise CompletionInputError(f"field must be a Field, got {type(field).__name__}")
        if not isinstance(value_group, ValueGroupWithZero):
            raise CompletionInputError(
                f"value_group must be a ValueGroupWithZero, got {type(value_group).__name__}")
        if not callable(fn):
            raise CompletionInputError("fn must be callable")
        self._field = field
        self._gamma = value_group
        self._fn = fn
        self._name = name

    @property
    def field(self) -> Field:
        return self._field

    @property
    def value_group(self) -> ValueGroupWithZero:
        return self._gamma

    @property
    def name(self) -> str:
        return self._name

    def __call__(self, x: Any) -> Fraction:
        return self._fn(x)

    def value_below(self, x: Any, gamma: Fraction) -> bool:
        """v(x) < γ"""
        return self._gamma.lt(self(x), gamma)

    def __repr__(self) -> str:
        return f"Valuation({self._name}: {self._field!r} → {self._gamma!r})"

    # ------------------------------------------------------------------
    # 导出律 (derived laws used by the algorithms)
    # ------------------------------------------------------------------

    def ne_zero_iff(self, x: Any) -> bool:
        """v(x) ≠ 0 ⟺ x ≠ 0, evaluated at x."""
        return (self(x) != 0) == (not self._field.is_zero(x))

    def map_neg(self, x: Any) -> Fraction:
        """v(−x) = v(x)"""
        return self(self._field.neg(x))

    def map_sub_swap(self, x: Any, y: Any) -> bool:
        """v(x − y) = v(y − x)"""
        f = self._field
        return self(f.sub(x, y)) == self(f.sub(y, x))

    def map_inv(self, x: Any) -> Fraction:
        """v(x⁻¹) = v(x)⁻¹ for x ≠ 0, and v(inv 0) = 0."""
        value = self(x)
        if value == 0:
            return self._gamma.zero()
        return self._gamma.inv_unit(value)

    def map_pow(self, x: Any, n: int) -> Fraction:
        """v(xⁿ) = v(x)ⁿ"""
        value = self(x)
        if value == 0:
            return self._gamma.one() if n == 0 else self._gamma.zero()
        return self._gamma.pow(value, n)

    def map_sum_le(self, xs: Sequence[Any]) -> bool:
        """v(Σ xᵢ) ≤ max v(xᵢ)"""
        f = self._field
        total = f.zero()
        bound = self._gamma.zero()
        for x in xs:
            total = f.add(total, x)
            bound = self._gamma.max(bound, self(x))
        return self._gamma.le(self(total), bound)

    def map_eq_of_sub_lt(self, x: Any, y: Any) -> Optional[Fraction]:
        """
        v(x − y) < v(y) ⟹ v(x) = v(y).

        Returns the common value when the hypothesis holds, else None.
        Under the ultrametric inequality v(x) ≤ max(v(x−y), v(y)) = v(y) and
        v(y) ≤ max(v(y−x), v(x)) forces v(y) ≤ v(x).
        """
        if not self._gamma.lt(self(self._field.sub(x, y)), self(y)):
            return None
        return self(y)

    def is_integral(self, x: Any) -> bool:
        """x ∈ 𝒪_v ⟺ v(x) ≤ 1"""
        return self._gamma.le(self(x), self._gamma.one())

    def is_equivalent(self, other: "Valuation", samples: Optional[Sequence[Any]] = None) -> bool:
        """v(x) ≤ v(y) ⟺ w(x) ≤ w(y) on every sampled pair."""
        if other.field != self._field:
            return False
        xs = list(samples if samples is not None else self._field.sample_elements())
        for x, y in itertools.product(xs, repeat=2):
            if (self(x) <= self(y)) != (other(x) <= other(y)):
                return False
        return True

    # ------------------------------------------------------------------
    # 公理检查 (property-test support, never called per operation)
    # ------------------------------------------------------------------

    def check_axioms(self, samples: Optional[Sequence[Any]] = None) -> List[AxiomViolation]:
        f, g = self._field, self._gamma
        xs = list(samples if samples is not None else f.sample_elements())
        out: List[AxiomViolation] = []

        if self(f.zero()) != g.zero():
            out.append(AxiomViolation("map_zero", (), f"v(0) = {self(f.zero())}"))
        if self(f.one()) != g.one():
            out.append(AxiomViolation("map_one", (), f"v(1) = {self(f.one())}"))
        for x in xs:
            if not g.contains(self(x)):
                out.append(AxiomViolation("codomain", (x,), f"v(x) = {self(x)} ∉ {g.name}"))
        for x, y in itertools.product(xs, repeat=2):
            vx, vy = self(x), self(y)
            vxy = self(f.mul(x, y))
            if vxy != g.mul(vx, vy):
                out.append(AxiomViolation("map_mul", (x, y), f"v(xy) = {vxy} ≠ {vx}·{vy}"))
            vs = self(f.add(x, y))
            if not g.le(vs, g.max(vx, vy)):
                out.append(AxiomViolation("map_add", (x, y), f"v(x+y) = {vs} > max({vx}, {vy})"))
        return out

    def assert_axioms(self, samples: Optional[Sequence[Any]] = None) -> None:
        violations = self.check_axioms(samples)
        if violations:
            head = violations[0]
            raise ValuationAxiomError(
                f"{self._name} violates {head.axiom} at {head.args}: {head.detail} "
                f"({len(violations)} violation(s))",
                violations=violations,
            )


def padic_order(x: Fraction, p: int) -> int:
    """
    ord_p(a/b) = v_p(a) − v_p(b) for x ≠ 0.
    """
    if x == 0:
        raise CompletionInputError("ord_p(0) is undefined (the valuation sends 0 to the zero of Γ₀)")
    num, den = abs(x.numerator), x.denominator
    n = 0
    while num % p == 0:
        num //= p
        n += 1
    while den % p == 0:
        den //= p
        n -= 1
    return n


def _is_prime(n: int) -> bool:
    if n < 2:
        return False
    i = 2
    while i * i <= n:
        if n % i == 0:
            return False
        i += 1
    return True


def padic_valuation(p: int, field: Optional[RationalField] = None) -> Valuation:
    """
    p-adic valuation on ℚ: v(pⁿ·a/b) = p⁻ⁿ with a, b coprime to p.
    """
    if not isinstance(p, int) or isinstance(p, bool) or not _is_prime(p):
        raise CompletionInputError(f"p-adic valuation needs a prime, got p={p!r}")
    field = field if field is not None else RationalField()
    group = DiscreteValueGroup(p)

    def _v(x: Fraction) -> Fraction:
        if x == 0:
            return Fraction(0)
        return group.from_exponent(-padic_order(x, p))

    return Valuation(field, group, _v, name=f"v_{p}")


def trivial_valuation(field: Optional[Field] = None) -> Valuation:
    """v(x) = 1 for x ≠ 0: the discrete topology, K is its own completion."""
    field = field if field is not None else RationalField()

    def _v(x: Any) -> Fraction:
        return Fraction(0) if field.is_zero(x) else Fraction(1)

    # the image {0, 1} sits inside every 2^ℤ ∪ {0}
    return Valuation(field, DiscreteValueGroup(2), _v, name="v_triv")
