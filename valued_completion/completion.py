# -*- coding: utf-8 -*-
"""
一致完备化 (Uniform completion, sequence model)

K̂ is the set of Cauchy sequences of (K, v) up to equivalence. The engine never
decides equivalence outright; every point is handled through

  - the dense embedding ι: K → K̂ (``embed``; embedded points keep their exact
    K value),
  - approximation: ``approx(p, γ)`` returns x ∈ K with v̂(p − ι x) < γ,
  - extension by density: ``extend_by_density(f, index_modulus)`` turns
    f: K → K into f̂: K̂ → K̂,
  - closed induction on approximant pairs (``closed_induction2``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Callable, Iterator, List, Optional, Tuple

from .cauchy import BoundAwayFromZero, CauchySequence, LowerBoundOracle, search_lower_bound
from .config import CompletionConfig, default_config
from .errors import CompletionInputError
from .valuation import Valuation


__all__ = [
    "CompletionPoint",
    "UniformCompletion",
    "DensityExtension",
    "IndexModulus",
]

_logger = logging.getLogger(__name__)

# (point, γ) ↦ N with v(f(x_m) − f(x_n)) < γ for m, n ≥ N
IndexModulus = Callable[["CompletionPoint", Fraction], int]


class CompletionPoint:
    """
    完备化中的点

    ``exact`` is set for points of ι(K) and for values computed from them
    exactly; for every other point it is None.
    """

    __slots__ = ("completion", "sequence", "exact")

    def __init__(self, completion: "UniformCompletion", sequence: CauchySequence,
                 exact: Any = None):
        self.completion = completion
        self.sequence = sequence
        self.exact = exact

    @property
    def is_exact(self) -> bool:
        return self.exact is not None

    def approx(self, gamma: Any) -> Any:
        return self.completion.approx(self, gamma)

    def _algebra(self):
        return self.completion.require_field()

    def _other(self, other: Any) -> "CompletionPoint":
        if isinstance(other, CompletionPoint):
            return other
        return self._algebra().coerce(other)

    def __add__(self, other: Any) -> "CompletionPoint":
        return self._algebra().add(self, self._other(other))

    def __radd__(self, other: Any) -> "CompletionPoint":
        return self._algebra().add(self._other(other), self)

    def __sub__(self, other: Any) -> "CompletionPoint":
        return self._algebra().sub(self, self._other(other))

    def __rsub__(self, other: Any) -> "CompletionPoint":
        return self._algebra().sub(self._other(other), self)

    def __mul__(self, other: Any) -> "CompletionPoint":
        return self._algebra().mul(self, self._other(other))

    def __rmul__(self, other: Any) -> "CompletionPoint":
        return self._algebra().mul(self._other(other), self)

    def __truediv__(self, other: Any) -> "CompletionPoint":
        return self._algebra().div(self, self._other(other))

    def __rtruediv__(self, other: Any) -> "CompletionPoint":
        return self._algebra().div(self._other(other), self)

    def __neg__(self) -> "CompletionPoint":
        return self._algebra().neg(self)

    def inverse(self) -> "CompletionPoint":
        return self._algebra().inv(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (CompletionPoint, int, Fraction, str)):
            return NotImplemented
        return self._algebra().eq(self, self._other(other))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.exact is not None:
            return f"ι({self.exact})"
        return f"lim {self.sequence.label}"


@dataclass(frozen=True)
class DensityExtension:
    """
    f̂: K̂ → K̂ extending f: K → K along ι.

    f̂(ι x) = ι(f(x)) exactly; on other points the image sequence is (f(x_n))
    with the modulus supplied at construction.
    """

    source: "UniformCompletion"
    fn: Callable[[Any], Any]
    index_modulus: IndexModulus
    target: "UniformCompletion"
    label: str = "f"

    def __call__(self, point: CompletionPoint) -> CompletionPoint:
        self.source.check_member(point)
        if point.exact is not None:
            return self.target.embed(self.fn(point.exact))
        seq = point.sequence
        image = CauchySequence(
            self.target.valuation,
            lambda n: self.fn(seq.term(n)),
            lambda gamma: self.index_modulus(point, gamma),
            label=f"{self.label}({seq.label})",
        )
        return self.target.point(image)


class UniformCompletion:
    """
    K̂ = Complete(K) for a valued field (K, v).
    """

    def __init__(self, valuation: Valuation, config: Optional[CompletionConfig] = None,
                 oracle: Optional[LowerBoundOracle] = None):
        if not isinstance(valuation, Valuation):
            raise CompletionInputError(f"valuation must be a Valuation, got {type(valuation).__name__}")
        self._v = valuation
        self._config = config if config is not None else default_config()
        self._oracle = oracle or search_lower_bound

    @property
    def valuation(self) -> Valuation:
        return self._v

    @property
    def config(self) -> CompletionConfig:
        return self._config

    @property
    def oracle(self) -> LowerBoundOracle:
        return self._oracle

    def require_field(self):
        """The field structure on K̂; plain uniform completions have none."""
        raise CompletionInputError("this completion carries no field structure (build a CompletionField)")

    # ------------------------------------------------------------------
    # points
    # ------------------------------------------------------------------

    def embed(self, x: Any) -> CompletionPoint:
        """ι: K → K̂"""
        x = self._v.field.coerce(x)
        return CompletionPoint(self, CauchySequence.constant(self._v, x), exact=x)

    def point(self, sequence: CauchySequence) -> CompletionPoint:
        if sequence.valuation is not self._v:
            raise CompletionInputError(
                f"{sequence.label} is Cauchy for {sequence.valuation!r}, not for {self._v!r}")
        return CompletionPoint(self, sequence)

    def limit(self, terms: Callable[[int], Any], modulus: Callable[[Fraction], int],
              label: str = "x") -> CompletionPoint:
        """Point of K̂ given by a Cauchy sequence and its modulus."""
        field = self._v.field
        return self.point(CauchySequence(self._v, lambda n: field.coerce(terms(n)), modulus, label=label))

    def check_member(self, point: Any) -> CompletionPoint:
        if not isinstance(point, CompletionPoint):
            raise CompletionInputError(f"expected CompletionPoint, got {type(point).__name__}")
        if point.completion is not self:
            raise CompletionInputError("point belongs to a different completion")
        return point

    def approx(self, point: CompletionPoint, gamma: Any) -> Any:
        """x ∈ K with v̂(point − ι x) < γ."""
        self.check_member(point)
        gamma = self._v.value_group.require_unit(gamma)
        if point.exact is not None:
            return point.exact
        seq = point.sequence
        return seq.term(seq.modulus(gamma))

    def lower_bound(self, point: CompletionPoint) -> Optional[BoundAwayFromZero]:
        """
        Tail bound away from 0, or None when the point is 0 (exact) or
        indistinguishable from 0 at the configured depth.
        """
        self.check_member(point)
        if point.exact is not None:
            value = self._v(point.exact)
            if value == 0:
                return None
            return BoundAwayFromZero(value, 0)
        return self._oracle(point.sequence, self._config.search_depth)

    def levels(self, count: Optional[int] = None) -> List[Fraction]:
        """Descending tolerances 1 > γ₁ > γ₂ > … used by precision-bounded checks."""
        count = count if count is not None else self._config.law_check_levels
        g = self._v.value_group
        return [g.one()] + list(g.units_below(g.one(), count - 1))

    # ------------------------------------------------------------------
    # extension by density
    # ------------------------------------------------------------------

    def extend_by_density(self, fn: Callable[[Any], Any], index_modulus: IndexModulus,
                          target: Optional["UniformCompletion"] = None,
                          label: str = "f") -> DensityExtension:
        return DensityExtension(self, fn, index_modulus, target if target is not None else self, label)

    @staticmethod
    def uniform_index_modulus(delta: Callable[[Fraction], Fraction]) -> IndexModulus:
        """Index modulus of a uniformly continuous f with v(x − y) < δ(γ) ⟹ v(f x − f y) < γ."""
        def _modulus(point: CompletionPoint, gamma: Fraction) -> int:
            return point.sequence.modulus(delta(gamma))
        return _modulus

    # ------------------------------------------------------------------
    # induction on dense pairs
    # ------------------------------------------------------------------

    def dense_pairs(self, a: CompletionPoint, b: CompletionPoint,
                    levels: Optional[List[Fraction]] = None) -> Iterator[Tuple[Any, Any, Fraction]]:
        """(x, y, γ) with x, y ∈ K approximating a, b within γ, for each level."""
        self.check_member(a)
        self.check_member(b)
        for gamma in (levels if levels is not None else self.levels()):
            yield self.approx(a, gamma), self.approx(b, gamma), gamma

    def closed_induction2(self, predicate: Callable[[CompletionPoint, CompletionPoint], bool],
                          a: CompletionPoint, b: CompletionPoint,
                          levels: Optional[List[Fraction]] = None) -> bool:
        """
        A closed predicate holding on ι(K) × ι(K) holds on K̂ × K̂; here it is
        evaluated on the embedded approximant pairs of (a, b) at each level.
        """
        for x, y, gamma in self.dense_pairs(a, b, levels):
            if not predicate(self.embed(x), self.embed(y)):
                _logger.debug("closed induction failed at γ=%s on (%s, %s)", gamma, x, y)
                return False
        return True

    def __repr__(self) -> str:
        return f"Complete({self._v.field!r}, {self._v.name})"
