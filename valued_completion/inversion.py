# -*- coding: utf-8 -*-
"""
逆映射估计 (Inversion Estimate)

Contract: for x, y ∈ K with y ≠ 0 and γ a positive unit,

    v(x − y) < min(γ·v(y)², v(y))   ⟹   v(x⁻¹ − y⁻¹) < γ.

Steps:
  1. v(x − y) < v(y) ⟹ v(x) = v(y), in particular x ≠ 0.
  2. x⁻¹ − y⁻¹ = x⁻¹·(y − x)·y⁻¹.
  3. v(x⁻¹ − y⁻¹) = v(x)⁻¹·v(y − x)·v(y)⁻¹ = v(y − x)·(v(y)·v(y))⁻¹.
  4. v(y − x) = v(x − y) < γ·v(y)², hence the product is < γ.

All comparisons are exact in Γ₀. An invocation outside the hypothesis is not
an error: the certificate records ``hypothesis_holds = False`` and guarantees
nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any, Dict, Optional

from .exact import fraction_to_str, sha256_hex_of_dict
from .valuation import Valuation
from .value_group import ValueGroupWithZero


__all__ = ["InversionCertificate", "inversion_radius", "inversion_estimate"]

_logger = logging.getLogger(__name__)


def inversion_radius(valuation: Valuation, y: Any, gamma: Any) -> Fraction:
    """
    min(γ·v(y)², v(y)): any x closer than this to y has v(x⁻¹ − y⁻¹) < γ.

    Zero when y = 0, so no x qualifies.
    """
    g = valuation.value_group
    gamma = g.require_unit(gamma)
    vy = valuation(y)
    return g.min(g.mul(gamma, g.mul(vy, vy)), vy)


@dataclass(frozen=True)
class InversionCertificate:
    """
    One evaluation of the estimate.

    predicted:
        v(y − x)·(v(y)·v(y))⁻¹ from step 3, only when the hypothesis holds.
    v_inv_diff:
        v(x⁻¹ − y⁻¹) computed directly in K (total inverse).
    """

    gamma: Fraction
    v_diff: Fraction
    v_y: Fraction
    radius: Fraction
    hypothesis_holds: bool
    v_x_equals_v_y: Optional[bool]
    predicted: Optional[Fraction]
    v_inv_diff: Fraction
    value_group: ValueGroupWithZero = field(repr=False, compare=False)

    @property
    def conclusion_holds(self) -> bool:
        return self.value_group.lt(self.v_inv_diff, self.gamma)

    @property
    def guaranteed(self) -> bool:
        """hypothesis ⟹ conclusion, as observed."""
        return (not self.hypothesis_holds) or self.conclusion_holds

    def to_dict(self) -> Dict[str, Any]:
        def _s(x: Optional[Fraction]) -> Optional[str]:
            return None if x is None else fraction_to_str(x)
        return {
            "gamma": _s(self.gamma),
            "v_diff": _s(self.v_diff),
            "v_y": _s(self.v_y),
            "radius": _s(self.radius),
            "hypothesis_holds": self.hypothesis_holds,
            "v_x_equals_v_y": self.v_x_equals_v_y,
            "predicted": _s(self.predicted),
            "v_inv_diff": _s(self.v_inv_diff),
            "conclusion_holds": self.conclusion_holds,
        }

    def digest(self) -> str:
        return sha256_hex_of_dict(self.to_dict())


def inversion_estimate(valuation: Valuation, x: Any, y: Any, gamma: Any) -> InversionCertificate:
    f, g = valuation.field, valuation.value_group
    gamma = g.require_unit(gamma)

    v_diff = valuation(f.sub(x, y))
    v_y = valuation(y)
    radius = inversion_radius(valuation, y, gamma)
    hypothesis = g.lt(v_diff, radius)

    v_x_equals_v_y: Optional[bool] = None
    predicted: Optional[Fraction] = None
    if hypothesis:
        # step 1
        common = valuation.map_eq_of_sub_lt(x, y)
        v_x_equals_v_y = common is not None and valuation(x) == common
        # steps 3-4: v(y − x) = v(x − y)
        v_swap = valuation(f.sub(y, x))
        predicted = g.mul(v_swap, g.inv_unit(g.mul(v_y, v_y)))

    # step 2 evaluated directly
    v_inv_diff = valuation(f.sub(f.inv(x), f.inv(y)))

    cert = InversionCertificate(
        gamma=gamma,
        v_diff=v_diff,
        v_y=v_y,
        radius=radius,
        hypothesis_holds=hypothesis,
        v_x_equals_v_y=v_x_equals_v_y,
        predicted=predicted,
        v_inv_diff=v_inv_diff,
        value_group=g,
    )
    if hypothesis and not cert.conclusion_holds:
        # only reachable with a map that is not a valuation
        _logger.warning("inversion estimate failed under its hypothesis: %s", cert.to_dict())
    return cert
