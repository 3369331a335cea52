# -*- coding: utf-8 -*-
"""
零点邻域基 (Neighborhood basis at zero)

The topology of a valued field is read off the algebra alone:

    B_γ = {x : v(x) < γ},   γ ∈ Γ₀ˣ

is a filter base at 0, and the ring filter-basis witnesses below derive the
uniformity {(x, y) : v(y − x) < γ}. Balls are lazy predicates; no set is ever
materialised.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Callable

from .valuation import Valuation


__all__ = ["ZeroBall", "Entourage", "NeighborhoodBasis"]


@dataclass(frozen=True)
class ZeroBall:
    """B_γ = {x : v(x) < γ}"""

    valuation: Valuation
    gamma: Fraction

    def contains(self, x: Any) -> bool:
        return self.valuation.value_below(x, self.gamma)

    def __contains__(self, x: Any) -> bool:
        return self.contains(x)

    def is_subset_of(self, other: "ZeroBall") -> bool:
        """B_γ ⊆ B_δ ⟸ γ ≤ δ"""
        return self.valuation.value_group.le(self.gamma, other.gamma)


@dataclass(frozen=True)
class Entourage:
    """U_γ = {(x, y) : v(y − x) < γ}"""

    valuation: Valuation
    gamma: Fraction

    def contains(self, x: Any, y: Any) -> bool:
        v = self.valuation
        return v.value_below(v.field.sub(y, x), self.gamma)


class NeighborhoodBasis:
    """
    Filter base {B_γ} at 0 derived from a valuation.

    Each ``*_witness`` method returns the γ-index of a ball that realises one
    axiom of a ring filter basis.
    """

    def __init__(self, valuation: Valuation):
        self._v = valuation
        self._g = valuation.value_group

    @property
    def valuation(self) -> Valuation:
        return self._v

    def ball(self, gamma: Any) -> ZeroBall:
        return ZeroBall(self._v, self._g.require_unit(gamma))

    def nhds_zero_basis(self) -> Callable[[Any], ZeroBall]:
        """Lazy family γ ↦ B_γ."""
        return self.ball

    def entourage(self, gamma: Any) -> Entourage:
        return Entourage(self._v, self._g.require_unit(gamma))

    def inter_witness(self, gamma: Any, delta: Any) -> ZeroBall:
        """B_min(γ,δ) ⊆ B_γ ∩ B_δ"""
        g = self._g
        return self.ball(g.min(g.require_unit(gamma), g.require_unit(delta)))

    def nonempty_witness(self, gamma: Any) -> Any:
        """0 ∈ B_γ since v(0) = 0 < γ."""
        self._g.require_unit(gamma)
        return self._v.field.zero()

    def add_witness(self, gamma: Any) -> ZeroBall:
        """B_γ + B_γ ⊆ B_γ (ultrametric)."""
        return self.ball(gamma)

    def neg_witness(self, gamma: Any) -> ZeroBall:
        """−B_γ ⊆ B_γ"""
        return self.ball(gamma)

    def conj_witness(self, x0: Any, gamma: Any) -> ZeroBall:
        """x0 + B_γ − x0 ⊆ B_γ (commutative)."""
        return self.ball(gamma)

    def mul_witness(self, gamma: Any) -> ZeroBall:
        """
        δ with B_δ·B_δ ⊆ B_γ: δ = min(γ, 1), since v(xy) < δ·δ ≤ δ ≤ γ.
        """
        g = self._g
        return self.ball(g.min(g.require_unit(gamma), g.one()))

    def mul_left_witness(self, x0: Any, gamma: Any) -> ZeroBall:
        """
        δ with x0·B_δ ⊆ B_γ: δ = γ·v(x0)⁻¹, or γ when x0 = 0.
        """
        g = self._g
        gamma = g.require_unit(gamma)
        v0 = self._v(x0)
        if v0 == 0:
            return self.ball(gamma)
        return self.ball(g.mul(gamma, g.inv_unit(v0)))

    def mul_right_witness(self, x0: Any, gamma: Any) -> ZeroBall:
        return self.mul_left_witness(x0, gamma)
