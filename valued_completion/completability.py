# -*- coding: utf-8 -*-
"""
可完备化判定 (Completability)

    Completable K  ⟺  K separated (v(x) = 0 ⟺ x = 0)
                     ∧ every Cauchy F with 𝓝(0) ⊓ F = ⊥ stays Cauchy under x ↦ x⁻¹.

The second clause is made constructive: ``CompletabilityWitness.witness(F, γ)``
returns a member of F that inversion maps pairwise within γ. It runs the
InversionEstimate at scale min(γ·γ₀², γ₀), with γ₀ the lower bound supplied by
the (injectable) oracle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Optional, Sequence

from .cauchy import BoundAwayFromZero, CauchySequence, LowerBoundOracle, Tail, search_lower_bound
from .config import CompletionConfig, default_config
from .errors import CompletionPrecisionError
from .valuation import Valuation


__all__ = ["is_separated", "CompletabilityWitness", "check_completable"]

_logger = logging.getLogger(__name__)


def is_separated(valuation: Valuation, samples: Optional[Sequence[Any]] = None) -> bool:
    """v(x) = 0 ⟺ x = 0 on the sample (the field's own sample by default)."""
    xs = samples if samples is not None else valuation.field.sample_elements()
    return all(valuation.ne_zero_iff(x) for x in xs)


@dataclass(frozen=True)
class CompletabilityWitness:
    """Evidence that (K, v) is completable, plus the inversion witness function."""

    valuation: Valuation
    oracle: LowerBoundOracle
    depth: int

    def lower_bound(self, sequence: CauchySequence) -> Optional[BoundAwayFromZero]:
        return self.oracle(sequence, self.depth)

    def tolerance(self, gamma: Any, gamma0: Fraction) -> Fraction:
        """min(γ·γ₀², γ₀)"""
        g = self.valuation.value_group
        gamma = g.require_unit(gamma)
        return g.min(g.mul(gamma, g.mul(gamma0, gamma0)), gamma0)

    def _require_bound(self, sequence: CauchySequence,
                       bound: Optional[BoundAwayFromZero]) -> BoundAwayFromZero:
        if bound is None:
            bound = self.lower_bound(sequence)
        if bound is None:
            raise CompletionPrecisionError(
                f"{sequence.label} is not separated from 0 within search depth {self.depth}")
        return bound

    def witness(self, sequence: CauchySequence, gamma: Any,
                bound: Optional[BoundAwayFromZero] = None) -> Tail:
        """
        M ∈ F with v(x⁻¹ − y⁻¹) < γ for all x, y ∈ M.

        For m, n ≥ N: v(x_n) ≥ γ₀ and v(x_m − x_n) < min(γ·γ₀², γ₀)
        ≤ min(γ·v(x_n)², v(x_n)), which is the InversionEstimate hypothesis.
        """
        bound = self._require_bound(sequence, bound)
        tol = self.tolerance(gamma, bound.gamma0)
        return sequence.tail(max(bound.start, sequence.modulus(tol)))

    def inverse_filter(self, sequence: CauchySequence,
                       bound: Optional[BoundAwayFromZero] = None) -> CauchySequence:
        """Image of F under inversion; its modulus is the witness start."""
        bound = self._require_bound(sequence, bound)
        field = self.valuation.field
        return sequence.map_terms(
            field.inv,
            lambda gamma: self.witness(sequence, gamma, bound).start,
            label=f"inv({sequence.label})",
        )


def check_completable(valuation: Valuation, config: Optional[CompletionConfig] = None,
                      oracle: Optional[LowerBoundOracle] = None,
                      samples: Optional[Sequence[Any]] = None) -> Optional[CompletabilityWitness]:
    """
    Completability witness, or None when the valuation is not separated.

    Checked once per construction; a None result means no completion is
    offered, it is not an error.
    """
    config = config if config is not None else default_config()
    if not is_separated(valuation, samples):
        _logger.info("%r is not separated: no completion offered", valuation)
        return None
    return CompletabilityWitness(valuation, oracle or search_lower_bound, config.search_depth)
