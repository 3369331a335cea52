# -*- coding: utf-8 -*-
"""
赋值延拓 (Valuation extension to the completion)

v̂ = extend(ι; v). Away from 0 the valuation is locally constant: once a tail
of (x_n) is bounded below by γ₀ it is constant there, and that constant is
v̂(lim x_n). At 0 v̂ is 0. An inexact point that the search cannot separate
from 0 has no decided value: ``try_value`` returns None and the call form
raises ``CompletionPrecisionError``. Ball membership v̂(x̂) < γ stays decidable
for every γ through the approximant at precision γ.

The zero basis of v̂ is the closure of the base balls:

    {x̂ : v̂(x̂) < γ} = closure_K̂( ι{x ∈ K : v(x) < γ} ).
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import Any, Optional

from .completion_field import CompletionField
from .errors import CompletionInputError, CompletionPrecisionError
from .neighborhoods import NeighborhoodBasis, ZeroBall
from .valuation import Valuation


__all__ = ["ExtendedValuation", "extend_valuation"]

_logger = logging.getLogger(__name__)


class ExtendedValuation(Valuation):
    """v̂: K̂ → Γ₀, continuous, with v̂ ∘ ι = v."""

    def __init__(self, completion: CompletionField, name: Optional[str] = None):
        if not isinstance(completion, CompletionField):
            raise CompletionInputError(
                f"completion must be a CompletionField, got {type(completion).__name__}")
        base = completion.valuation
        super().__init__(completion, base.value_group, self._evaluate, name=name or f"{base.name}^")
        self._completion = completion
        self._base = base
        self._basis = NeighborhoodBasis(self)

    @property
    def base(self) -> Valuation:
        return self._base

    @property
    def completion(self) -> CompletionField:
        return self._completion

    def try_value(self, point: Any) -> Optional[Fraction]:
        """
        v̂(point) when decidable at the search depth; exact zero gives 0,
        an inexact point with no lower bound gives None.
        """
        point = self._completion.coerce(point)
        if point.exact is not None:
            return self._base(point.exact)
        bound = self._completion.lower_bound(point)
        if bound is None:
            return None
        return bound.gamma0

    def _evaluate(self, point: Any) -> Fraction:
        value = self.try_value(point)
        if value is None:
            depth = self._completion.config.search_depth
            _logger.debug("v̂(%r) undecided at depth %d", point, depth)
            raise CompletionPrecisionError(
                f"v̂({point!r}) is not separated from 0 within search depth {depth}")
        return value

    def value_below(self, point: Any, gamma: Any) -> bool:
        """v̂(point) < γ, read off approx(point, γ) when v̂(point) is undecided."""
        value = self.try_value(point)
        if value is None:
            return self.closure_contains(point, gamma)
        return self.value_group.lt(value, self.value_group.require_unit(gamma))

    def stable_index(self, point: Any) -> Optional[int]:
        """N from which v(x_n) is constant (= v̂(point)); None at 0."""
        point = self._completion.coerce(point)
        bound = self._completion.lower_bound(point)
        return None if bound is None else bound.start

    def extends(self, x: Any) -> bool:
        """v̂(ι x) = v(x)"""
        return self(self._completion.embed(x)) == self._base(x)

    # ------------------------------------------------------------------
    # zero basis
    # ------------------------------------------------------------------

    def zero_ball(self, gamma: Any) -> ZeroBall:
        """{x̂ : v̂(x̂) < γ}"""
        return self._basis.ball(gamma)

    def closure_contains(self, point: Any, gamma: Any) -> bool:
        """
        point ∈ closure(ι B_γ).

        With a = approx(point, γ): if v(a) < γ every finer approximant also
        lies in B_γ, so point is a limit of ι B_γ; if v(a) ≥ γ the ball of
        radius γ about point misses ι B_γ.
        """
        point = self._completion.coerce(point)
        g = self.value_group
        gamma = g.require_unit(gamma)
        a = self._completion.approx(point, gamma)
        return g.lt(self._base(a), gamma)

    def zero_basis_agrees(self, point: Any, gamma: Any) -> bool:
        return self.zero_ball(gamma).contains(point) == self.closure_contains(point, gamma)


def extend_valuation(completion: CompletionField) -> ExtendedValuation:
    return ExtendedValuation(completion)
