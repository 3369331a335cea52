"""Cauchy 序列、远离零下界与可完备化见证测试"""

from fractions import Fraction

import numpy as np
import pytest

from valued_completion import (
    BoundAwayFromZero,
    CauchySequence,
    CompletionInputError,
    CompletionPrecisionError,
    Valuation,
    check_completable,
    is_separated,
    search_lower_bound,
)
from valued_completion.config import CompletionConfig
from tests.grids import power_modulus


@pytest.fixture
def minus_one(v2):
    """x_n = 2^n − 1 → −1 in ℚ_2"""
    return CauchySequence(v2, lambda n: Fraction(2 ** n - 1), power_modulus(2), label="2^n-1")


@pytest.fixture
def null_sequence(v2):
    """x_n = 2^n → 0"""
    return CauchySequence(v2, lambda n: Fraction(2 ** n), power_modulus(2), label="2^n")


class TestCauchySequence:
    def test_terms_cached(self, v2):
        calls = []

        def _term(n):
            calls.append(n)
            return Fraction(n)

        seq = CauchySequence(v2, _term, lambda gamma: 0)
        seq.term(3)
        seq.term(3)
        assert calls == [3]

    def test_negative_index_rejected(self, minus_one):
        with pytest.raises(CompletionInputError):
            minus_one.term(-1)

    def test_bad_modulus_rejected(self, v2):
        seq = CauchySequence(v2, lambda n: Fraction(0), lambda gamma: -1, label="bad")
        with pytest.raises(CompletionInputError):
            seq.modulus(Fraction(1))

    def test_non_positive_tolerance_rejected(self, minus_one):
        with pytest.raises(CompletionInputError):
            minus_one.modulus(0)

    def test_modulus_profile(self, minus_one):
        levels = [Fraction(1), Fraction(1, 2), Fraction(1, 8)]
        profile = minus_one.modulus_profile(levels)
        assert profile.dtype == np.int64
        assert profile.tolist() == [1, 2, 4]
        assert minus_one.is_monotone_profile(levels)

    def test_tail_pairwise_within(self, minus_one):
        tail = minus_one.tail(minus_one.modulus(Fraction(1, 16)))
        assert tail.pairwise_within(Fraction(1, 16), span=5)
        assert not minus_one.tail(0).pairwise_within(Fraction(1, 16), span=5)

    def test_constant(self, v2):
        seq = CauchySequence.constant(v2, Fraction(5))
        assert seq.modulus(Fraction(1, 1024)) == 0
        assert seq.term(17) == 5


class TestSearchLowerBound:
    def test_unit_limit(self, minus_one):
        bound = search_lower_bound(minus_one, 24)
        assert bound == BoundAwayFromZero(Fraction(1), 1)

    def test_null_sequence_has_no_bound(self, null_sequence):
        assert search_lower_bound(null_sequence, 24) is None

    def test_depth_limits_the_search(self, v2):
        # x_n = 32 + 2^n → 32, v = 1/32 is found at the sixth level
        seq = CauchySequence(v2, lambda n: Fraction(32 + 2 ** n), power_modulus(2))
        assert search_lower_bound(seq, 5) is None
        assert search_lower_bound(seq, 6) == BoundAwayFromZero(Fraction(1, 32), 6)

    def test_value_constant_on_bounded_tail(self, v2):
        seq = CauchySequence(v2, lambda n: Fraction(32 + 2 ** n), power_modulus(2))
        bound = search_lower_bound(seq, 24)
        assert all(v2(seq.term(n)) == bound.gamma0 for n in range(bound.start, bound.start + 10))


class TestCompletability:
    def test_padic_is_separated(self, v3):
        assert is_separated(v3)

    def test_witness_tolerance(self, v2):
        w = check_completable(v2)
        assert w.tolerance(Fraction(1, 4), Fraction(1, 2)) == Fraction(1, 16)
        assert w.tolerance(Fraction(8), Fraction(1, 2)) == Fraction(1, 2)

    @pytest.mark.parametrize("gamma", [Fraction(1), Fraction(1, 4), Fraction(1, 64)])
    def test_witness_maps_tail_pairwise_within(self, v2, qq, minus_one, gamma):
        w = check_completable(v2)
        tail = w.witness(minus_one, gamma)
        assert tail.start >= minus_one.modulus(gamma)
        assert tail.pairwise_within(gamma, span=6, fn=qq.inv)

    def test_inverse_filter_is_cauchy(self, v2, minus_one):
        w = check_completable(v2)
        inv = w.inverse_filter(minus_one)
        gamma = Fraction(1, 32)
        assert inv.tail(inv.modulus(gamma)).pairwise_within(gamma, span=6)
        assert inv.term(1) == 1

    def test_null_sequence_raises_precision_error(self, v2, null_sequence):
        w = check_completable(v2, CompletionConfig(search_depth=12))
        with pytest.raises(CompletionPrecisionError):
            w.witness(null_sequence, Fraction(1))

    def test_injected_oracle(self, v2, null_sequence):
        seen = []

        def _oracle(seq, depth):
            seen.append(depth)
            return BoundAwayFromZero(Fraction(1), 0)

        w = check_completable(v2, CompletionConfig(search_depth=7), oracle=_oracle)
        assert w.lower_bound(null_sequence) == BoundAwayFromZero(Fraction(1), 0)
        assert seen == [7]

    def test_non_separated_gives_none(self, v2):
        def _broken(x):
            return Fraction(0) if x in (0, 2) else v2(x)

        broken = Valuation(v2.field, v2.value_group, _broken, name="broken")
        assert not is_separated(broken)
        assert check_completable(broken) is None
