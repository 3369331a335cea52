# -*- coding: utf-8 -*-
"""
Cauchy 滤子 (Cauchy filters, sequence model)

A Cauchy filter on (K, v) is modelled by a sequence with an explicit modulus:

    m, n ≥ modulus(γ)   ⟹   v(x_m − x_n) < γ.

The filter's members are the tails {x_n : n ≥ N}. The filter avoids the
neighbourhoods of 0 (𝓝(0) ⊓ F = ⊥) exactly when some tail is bounded below in
value; ``search_lower_bound`` looks for such a bound constructively and returns
None once its depth is exhausted.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Callable, Dict, Iterator, Optional, Sequence

import numpy as np

from .errors import CompletionInputError
from .valuation import Valuation


__all__ = [
    "CauchySequence",
    "Tail",
    "BoundAwayFromZero",
    "LowerBoundOracle",
    "search_lower_bound",
]

_logger = logging.getLogger(__name__)


class CauchySequence:
    """
    (x_n) with modulus γ ↦ N.

    ``terms`` and ``modulus`` must be pure; terms are cached on first use.
    """

    def __init__(self, valuation: Valuation, terms: Callable[[int], Any],
                 modulus: Callable[[Fraction], int], label: str = "F"):
        if not callable(terms) or not callable(modulus):
            raise CompletionInputError("terms and modulus must be callable")
        self._v = valuation
        self._terms = terms
        self._modulus = modulus
        self._cache: Dict[int, Any] = {}
        self.label = label

    @classmethod
    def constant(cls, valuation: Valuation, x: Any, label: Optional[str] = None) -> "CauchySequence":
        return cls(valuation, lambda n: x, lambda gamma: 0, label=label or f"const({x})")

    @property
    def valuation(self) -> Valuation:
        return self._v

    def term(self, n: int) -> Any:
        if not isinstance(n, int) or n < 0:
            raise CompletionInputError(f"index must be int >= 0, got {n!r}")
        if n not in self._cache:
            self._cache[n] = self._terms(n)
        return self._cache[n]

    def modulus(self, gamma: Any) -> int:
        gamma = self._v.value_group.require_unit(gamma)
        n = self._modulus(gamma)
        if not isinstance(n, (int, np.integer)) or n < 0:
            raise CompletionInputError(f"modulus of {self.label} returned {n!r} for γ={gamma}")
        return int(n)

    def tail(self, start: int) -> "Tail":
        return Tail(self, int(start))

    def map_terms(self, fn: Callable[[Any], Any], index_modulus: Callable[[Fraction], int],
                  label: Optional[str] = None) -> "CauchySequence":
        """Image sequence (fn(x_n)) with the caller's modulus."""
        return CauchySequence(self._v, lambda n: fn(self.term(n)), index_modulus,
                              label=label or f"map({self.label})")

    def modulus_profile(self, levels: Sequence[Fraction]) -> np.ndarray:
        """N(γ) for each tolerance level."""
        return np.asarray([self.modulus(g) for g in levels], dtype=np.int64)

    def is_monotone_profile(self, levels: Sequence[Fraction]) -> bool:
        """Smaller tolerance never needs an earlier index (levels descending)."""
        profile = self.modulus_profile(levels)
        return bool(np.all(np.diff(profile) >= 0))

    def __iter__(self) -> Iterator[Any]:
        for n in itertools.count():
            yield self.term(n)

    def __repr__(self) -> str:
        return f"CauchySequence({self.label})"


@dataclass(frozen=True)
class Tail:
    """滤子成员 {x_n : n ≥ start}"""

    sequence: CauchySequence
    start: int

    def indices(self, span: int) -> range:
        return range(self.start, self.start + span)

    def pairwise_within(self, gamma: Any, span: int,
                        fn: Optional[Callable[[Any], Any]] = None) -> bool:
        """
        Sampled check: v(fn(x_i) − fn(x_j)) < γ for i, j in the first ``span``
        indices of the tail (fn defaults to the identity).
        """
        v = self.sequence.valuation
        g = v.value_group
        gamma = g.require_unit(gamma)
        image = [self.sequence.term(i) for i in self.indices(span)]
        if fn is not None:
            image = [fn(x) for x in image]
        for a, b in itertools.combinations(image, 2):
            if not g.lt(v(v.field.sub(a, b)), gamma):
                return False
        return True


@dataclass(frozen=True)
class BoundAwayFromZero:
    """
    𝓝(0) ⊓ F = ⊥ witness: v(x_n) ≥ gamma0 > 0 for every n ≥ start.

    Found by ``search_lower_bound``, v is in fact constant (= gamma0) on the
    tail.
    """

    gamma0: Fraction
    start: int


LowerBoundOracle = Callable[[CauchySequence, int], Optional[BoundAwayFromZero]]


def search_lower_bound(sequence: CauchySequence, depth: int) -> Optional[BoundAwayFromZero]:
    """
    Probe γ = 1, then the units below 1, for at most ``depth`` levels.

    With N = modulus(γ) and v(x_N) ≥ γ, every n ≥ N has v(x_n − x_N) < γ ≤ v(x_N),
    so v(x_n) = v(x_N): that tail is bounded away from zero.
    """
    v = sequence.valuation
    g = v.value_group
    levels = itertools.chain([g.one()], g.units_below(g.one(), depth - 1))
    for gamma in levels:
        n = sequence.modulus(gamma)
        vn = v(sequence.term(n))
        if g.le(gamma, vn):
            return BoundAwayFromZero(vn, n)
    _logger.debug("no lower bound for %s within depth %d", sequence.label, depth)
    return None
