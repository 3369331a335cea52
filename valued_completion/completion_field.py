# -*- coding: utf-8 -*-
"""
完备化上的域结构 (Field structure on the completion)

Pipeline, fixed and total:

    neighbourhood basis → completability witness → completion
        → inverse extension → field laws

``inv`` extends x ↦ ι(x⁻¹) from K \\ {0} by density and is
glued with inv(0) = 0. An inexact point that the lower-bound oracle cannot
separate from 0 within the configured search depth has no decided inverse:
``try_inv`` returns None (the documented fallback) and ``inv`` raises
``CompletionPrecisionError``. ``is_zero`` and ``eq`` on inexact points are
precision-bounded: they read "indistinguishable at the search depth".
"""

from __future__ import annotations

import itertools
import logging
from fractions import Fraction
from typing import Any, List, Optional, Sequence

from .cauchy import CauchySequence, LowerBoundOracle
from .completability import CompletabilityWitness, check_completable
from .completion import CompletionPoint, UniformCompletion
from .config import CompletionConfig, default_config
from .errors import CompletionInputError, CompletionPrecisionError, CompletionUnavailableError
from .field import Field
from .neighborhoods import NeighborhoodBasis
from .valuation import Valuation


__all__ = ["CompletionField", "complete"]

_logger = logging.getLogger(__name__)


class CompletionField(UniformCompletion, Field):
    """
    K̂ as a field. Construction requires a ``CompletabilityWitness``; without
    one the completion is simply not available.
    """

    def __init__(self, witness: CompletabilityWitness, config: Optional[CompletionConfig] = None):
        if not isinstance(witness, CompletabilityWitness):
            raise CompletionInputError(
                f"a CompletabilityWitness is required, got {type(witness).__name__}")
        config = config if config is not None else default_config()
        if config.search_depth != witness.depth:
            config = config.with_depth(witness.depth)
        super().__init__(witness.valuation, config, witness.oracle)
        self._witness = witness
        self._basis = NeighborhoodBasis(witness.valuation)
        self.name = f"Complete({witness.valuation.field.name}, {witness.valuation.name})"

    @property
    def witness(self) -> CompletabilityWitness:
        return self._witness

    @property
    def neighborhoods(self) -> NeighborhoodBasis:
        """Zero basis of the base field K."""
        return self._basis

    @property
    def base_field(self) -> Field:
        return self.valuation.field

    def require_field(self) -> "CompletionField":
        return self

    # ------------------------------------------------------------------
    # Field interface
    # ------------------------------------------------------------------

    def zero(self) -> CompletionPoint:
        return self.embed(self.base_field.zero())

    def one(self) -> CompletionPoint:
        return self.embed(self.base_field.one())

    def coerce(self, a: Any) -> CompletionPoint:
        if isinstance(a, CompletionPoint):
            return self.check_member(a)
        return self.embed(a)

    def _binary(self, a: CompletionPoint, b: CompletionPoint, op, modulus, label: str) -> CompletionPoint:
        sa, sb = a.sequence, b.sequence
        seq = CauchySequence(
            self.valuation,
            lambda n: op(sa.term(n), sb.term(n)),
            modulus,
            label=f"({sa.label} {label} {sb.label})",
        )
        return self.point(seq)

    def add(self, a: Any, b: Any) -> CompletionPoint:
        a, b = self.coerce(a), self.coerce(b)
        f = self.base_field
        if a.exact is not None and b.exact is not None:
            return self.embed(f.add(a.exact, b.exact))
        # v((a_m + b_m) − (a_n + b_n)) ≤ max(v(a_m − a_n), v(b_m − b_n))
        return self._binary(
            a, b, f.add,
            lambda gamma: max(a.sequence.modulus(gamma), b.sequence.modulus(gamma)),
            "+",
        )

    def neg(self, a: Any) -> CompletionPoint:
        a = self.coerce(a)
        f = self.base_field
        if a.exact is not None:
            return self.embed(f.neg(a.exact))
        ext = self.extend_by_density(f.neg, self.uniform_index_modulus(lambda gamma: gamma), label="neg")
        return ext(a)

    def _tail_bound(self, a: CompletionPoint):
        """(N₁, A): v(a_n) ≤ A for n ≥ N₁, with A ≥ 1 a unit."""
        g = self.valuation.value_group
        n1 = a.sequence.modulus(g.one())
        return n1, g.max(self.valuation(a.sequence.term(n1)), g.one())

    def mul(self, a: Any, b: Any) -> CompletionPoint:
        a, b = self.coerce(a), self.coerce(b)
        f, g = self.base_field, self.valuation.value_group
        if a.exact is not None and b.exact is not None:
            return self.embed(f.mul(a.exact, b.exact))
        na, bound_a = self._tail_bound(a)
        nb, bound_b = self._tail_bound(b)

        def _modulus(gamma: Fraction) -> int:
            # a_m b_m − a_n b_n = a_m (b_m − b_n) + (a_m − a_n) b_n
            return max(
                na, nb,
                a.sequence.modulus(g.mul(gamma, g.inv_unit(bound_b))),
                b.sequence.modulus(g.mul(gamma, g.inv_unit(bound_a))),
            )

        return self._binary(a, b, f.mul, _modulus, "·")

    def try_inv(self, a: Any) -> Optional[CompletionPoint]:
        """
        inv(a) when a is separated from 0 within the search depth, else None.
        """
        a = self.coerce(a)
        f = self.base_field
        if a.exact is not None:
            if f.is_zero(a.exact):
                return None
            return self.embed(f.inv(a.exact))
        bound = self.lower_bound(a)
        if bound is None:
            return None
        witness = self._witness
        ext = self.extend_by_density(
            f.inv,
            lambda point, gamma: witness.witness(point.sequence, gamma, bound).start,
            label="inv",
        )
        return ext(a)

    def inv(self, a: Any) -> CompletionPoint:
        """
        Total inverse on K̂: inv(0) = 0 for the exact zero; an inexact point
        not separated from 0 at the search depth raises CompletionPrecisionError.
        """
        a = self.coerce(a)
        result = self.try_inv(a)
        if result is not None:
            return result
        if a.exact is None:
            raise CompletionPrecisionError(
                f"inv({a!r}) is undecided: not separated from 0 within search depth "
                f"{self.config.search_depth}")
        return self.zero()

    def is_zero(self, a: Any) -> bool:
        a = self.coerce(a)
        if a.exact is not None:
            return self.base_field.is_zero(a.exact)
        return self.lower_bound(a) is None

    def eq(self, a: Any, b: Any) -> bool:
        a, b = self.coerce(a), self.coerce(b)
        if a.exact is not None and b.exact is not None:
            return self.base_field.eq(a.exact, b.exact)
        return self.is_zero(self.sub(a, b))

    def eq_to_precision(self, a: Any, b: Any, levels: Optional[Sequence[Fraction]] = None) -> bool:
        """v(approx(a, γ) − approx(b, γ)) < γ at every level (necessary for a = b)."""
        a, b = self.coerce(a), self.coerce(b)
        f, v = self.base_field, self.valuation
        for gamma in (levels if levels is not None else self.levels()):
            if not v.value_group.lt(v(f.sub(self.approx(a, gamma), self.approx(b, gamma))), gamma):
                return False
        return True

    def sample_elements(self) -> List[CompletionPoint]:
        return [self.embed(x) for x in self.base_field.sample_elements()[:9]]

    # ------------------------------------------------------------------
    # topological division ring
    # ------------------------------------------------------------------

    def inverse_radius(self, point: Any, gamma: Any) -> Fraction:
        """
        δ with v̂(x − point) < δ ⟹ v̂(inv x − inv point) < γ: the
        InversionEstimate radius min(γ·v̂(point)², v̂(point)), zero at 0.
        """
        point = self.coerce(point)
        g = self.valuation.value_group
        gamma = g.require_unit(gamma)
        bound = self.lower_bound(point)
        if bound is None:
            return g.zero()
        return self._witness.tolerance(gamma, bound.gamma0)

    def check_mul_inv_cancel(self, point: Any, levels: Optional[Sequence[Fraction]] = None) -> bool:
        """
        x·inv(x) = 1 for x ≠ 0, inv(0) = 0.

        {1} is closed, so x·inv(x) = 1 once its approximants stay within every
        tested γ of 1.
        """
        point = self.coerce(point)
        inverse = self.inv(point)
        if point.exact is not None and self.base_field.is_zero(point.exact):
            return self.is_zero(inverse)
        return self.eq_to_precision(self.mul(point, inverse), self.one(), levels)

    def check_inverse_witness(self, point: Any, gamma: Any) -> bool:
        """
        Sampled check of the completability witness on a nonzero point: the
        witness tail of its sequence maps pairwise within γ under inversion.
        """
        point = self.coerce(point)
        bound = self.lower_bound(point)
        if bound is None:
            raise CompletionPrecisionError(
                f"{point!r} is not separated from 0 within search depth {self.config.search_depth}")
        tail = self._witness.witness(point.sequence, gamma, bound)
        return tail.pairwise_within(gamma, self.config.sample_span, fn=self.base_field.inv)

    def verify_field_laws(self, points: Sequence[Any],
                          levels: Optional[Sequence[Fraction]] = None) -> List[str]:
        """Names of the laws that fail on the given points (empty when all hold)."""
        pts = [self.coerce(p) for p in points]
        levels = list(levels) if levels is not None else self.levels()
        failed: List[str] = []

        def _record(name: str, ok: bool) -> None:
            if not ok and name not in failed:
                failed.append(name)

        for a in pts:
            _record("add_zero", self.eq_to_precision(self.add(a, self.zero()), a, levels))
            _record("add_neg", self.eq_to_precision(self.add(a, self.neg(a)), self.zero(), levels))
            _record("mul_one", self.eq_to_precision(self.mul(a, self.one()), a, levels))
            _record("mul_inv_cancel", self.check_mul_inv_cancel(a, levels))
        for a, b in itertools.product(pts, repeat=2):
            _record("add_comm", self.closed_induction2(
                lambda x, y: self.eq(self.add(x, y), self.add(y, x)), a, b, levels))
            _record("mul_comm", self.closed_induction2(
                lambda x, y: self.eq(self.mul(x, y), self.mul(y, x)), a, b, levels))
        for a, b, c in itertools.product(pts, repeat=3):
            _record("add_assoc", self.eq_to_precision(
                self.add(self.add(a, b), c), self.add(a, self.add(b, c)), levels))
            _record("mul_assoc", self.eq_to_precision(
                self.mul(self.mul(a, b), c), self.mul(a, self.mul(b, c)), levels))
            _record("left_distrib", self.eq_to_precision(
                self.mul(a, self.add(b, c)), self.add(self.mul(a, b), self.mul(a, c)), levels))
        return failed

    def __repr__(self) -> str:
        return self.name


def _unit_limit(field: CompletionField) -> CompletionPoint:
    """
    Inexact point lim (1 + tⁿ) for a sampled t with 0 < v(t) < 1; without such
    a t (trivial valuation) the constant sequence 1 given as a limit.
    """
    v, g, f = field.valuation, field.valuation.value_group, field.base_field
    small = next((x for x in f.sample_elements() if g.lt(g.zero(), v(x)) and g.lt(v(x), g.one())), None)
    if small is None:
        return field.point(CauchySequence.constant(v, f.one(), label="1"))
    r = v(small)

    def _term(n: int):
        power = f.one()
        for _ in range(n):
            power = f.mul(power, small)
        return f.add(f.one(), power)

    def _modulus(gamma: Fraction) -> int:
        # v(t^m − t^n) ≤ r^min(m, n)
        n, power = 0, g.one()
        while not g.lt(power, gamma):
            power = g.mul(power, r)
            n += 1
        return n

    return field.limit(_term, _modulus, label=f"1 + ({small})^n")


def complete(valuation: Valuation, config: Optional[CompletionConfig] = None,
             oracle: Optional[LowerBoundOracle] = None) -> CompletionField:
    """
    Build K̂ for (K, v); raises CompletionUnavailableError when v is not
    completable (caller contract).
    """
    config = config if config is not None else default_config()
    witness = check_completable(valuation, config, oracle)
    if witness is None:
        raise CompletionUnavailableError(
            f"{valuation!r} is not completable (not separated)",
            analysis={"valuation": valuation.name, "separated": False},
        )

    field = CompletionField(witness, config)
    probe = [p for p in field.sample_elements() if not field.is_zero(p)][:3] + [_unit_limit(field)]
    try:
        failed = field.verify_field_laws(probe)
    except CompletionPrecisionError as e:
        raise CompletionUnavailableError(
            f"field laws undecided on {field!r}: {e}",
            analysis={"valuation": valuation.name, "precision": str(e)},
        ) from e
    if failed:
        raise CompletionUnavailableError(
            f"field laws fail on {field!r}: {failed}",
            analysis={"valuation": valuation.name, "failed_laws": list(failed)},
        )
    _logger.info("built %r (search depth %d)", field, config.search_depth)
    return field
