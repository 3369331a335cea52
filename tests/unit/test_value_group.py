"""
有序值群 Γ₀ 测试

不变量：
1. 0 吸收、0 ≤ x
2. 单位群可逆，0 无逆
3. units_below 严格递减且全部低于 γ
4. DiscreteValueGroup 的成员判定与指数
"""

from fractions import Fraction

import numpy as np
import pytest

from valued_completion import CompletionInputError, DiscreteValueGroup, RationalValueGroup


class TestRationalValueGroup:
    def test_zero_absorbs_and_is_least(self):
        g = RationalValueGroup()
        for x in (Fraction(0), Fraction(1, 3), Fraction(7)):
            assert g.mul(g.zero(), x) == 0
            assert g.le(g.zero(), x)

    def test_unit_inverse(self):
        g = RationalValueGroup()
        assert g.inv_unit(Fraction(3, 4)) == Fraction(4, 3)
        with pytest.raises(CompletionInputError):
            g.inv_unit(Fraction(0))

    def test_units_below_strictly_decreasing(self):
        g = RationalValueGroup()
        levels = list(g.units_below(Fraction(1, 3), 5))
        assert len(levels) == 5
        assert all(a > b for a, b in zip(levels, levels[1:]))
        assert all(x < Fraction(1, 3) for x in levels)

    def test_coerce_rejects_float(self):
        with pytest.raises(CompletionInputError):
            RationalValueGroup().coerce(0.5)

    def test_coerce_rejects_negative(self):
        with pytest.raises(CompletionInputError):
            RationalValueGroup().coerce(Fraction(-1, 2))

    def test_require_unit_rejects_zero(self):
        with pytest.raises(CompletionInputError):
            RationalValueGroup().require_unit(0)


class TestDiscreteValueGroup:
    def test_contains_powers_only(self):
        g = DiscreteValueGroup(3)
        assert g.contains(Fraction(0))
        assert g.contains(Fraction(1))
        assert g.contains(Fraction(27))
        assert g.contains(Fraction(1, 9))
        assert not g.contains(Fraction(2))
        assert not g.contains(Fraction(3, 2))
        assert not g.contains(Fraction(-3))

    def test_exponent_round_trip(self):
        g = DiscreteValueGroup(2)
        for n in (-5, 0, 4):
            assert g.exponent(g.from_exponent(n)) == n

    def test_exponent_of_zero_rejected(self):
        with pytest.raises(CompletionInputError):
            DiscreteValueGroup(2).exponent(Fraction(0))

    def test_exponents_array(self):
        g = DiscreteValueGroup(5)
        out = g.exponents([Fraction(1, 25), Fraction(1), Fraction(5)])
        assert out.dtype == np.int64
        assert out.tolist() == [-2, 0, 1]

    def test_units_below_starts_at_largest_power(self):
        g = DiscreteValueGroup(2)
        assert list(g.units_below(Fraction(1), 3)) == [Fraction(1, 2), Fraction(1, 4), Fraction(1, 8)]
        assert next(g.units_below(Fraction(8), 1)) == Fraction(4)
        assert next(g.units_below(Fraction(1, 16), 1)) == Fraction(1, 32)

    def test_tolerance_outside_group_rejected(self):
        g = DiscreteValueGroup(2)
        assert g.require_unit(Fraction(1, 8)) == Fraction(1, 8)
        for bad in (Fraction(1, 3), Fraction(6), Fraction(0)):
            with pytest.raises(CompletionInputError):
                g.require_unit(bad)
        with pytest.raises(CompletionInputError):
            next(g.units_below(Fraction(1, 3), 1))

    def test_pow_negative_exponent(self):
        g = DiscreteValueGroup(2)
        assert g.pow(Fraction(1, 2), -3) == 8

    def test_bad_base(self):
        with pytest.raises(CompletionInputError):
            DiscreteValueGroup(1)
