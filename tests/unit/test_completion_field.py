"""
完备化域 K̂ 测试

覆盖：
- 嵌入点精确运算
- 全定义逆 inv(0) = 0
- 精度受限的零判定
- 域公律（闭归纳）
- 不可完备化时不提供构造
"""

from fractions import Fraction

import pytest

from valued_completion import (
    CompletionConfig,
    CompletionField,
    CompletionInputError,
    CompletionPrecisionError,
    CompletionUnavailableError,
    UniformCompletion,
    Valuation,
    check_completable,
    complete,
    extend_valuation,
    padic_completion,
    padic_sqrt,
    trivial_valuation,
)
from valued_completion.completion_field import _unit_limit
from tests.grids import power_modulus


@pytest.fixture
def minus_one_limit(q2):
    """lim 2^n − 1 = −1, an inexact point"""
    return q2.limit(lambda n: 2 ** n - 1, power_modulus(2), label="2^n-1")


class TestEmbedding:
    def test_embedded_arithmetic_is_exact(self, q2):
        a = q2.embed(Fraction(1, 3))
        b = q2.embed(Fraction(5, 6))
        assert (a + b).exact == Fraction(7, 6)
        assert (a * b).exact == Fraction(5, 18)
        assert (a - b).exact == Fraction(-1, 2)
        assert q2.embed(1) / 3 == Fraction(1, 3)

    def test_float_rejected(self, q2):
        with pytest.raises(CompletionInputError):
            q2.embed(0.5)

    def test_points_unhashable(self, q2):
        with pytest.raises(TypeError):
            hash(q2.one())

    def test_foreign_point_rejected(self, q2, q3):
        with pytest.raises(CompletionInputError):
            q2.add(q2.one(), q3.one())

    def test_plain_uniform_completion_has_no_algebra(self, v2):
        uc = UniformCompletion(v2)
        with pytest.raises(CompletionInputError):
            uc.embed(1) + uc.embed(2)


class TestInverse:
    def test_third_inverts_to_three(self, q2):
        third = q2.embed(Fraction(1, 3))
        assert q2.eq(q2.inv(third), q2.embed(3))

    def test_inv_zero_is_zero(self, q2):
        assert q2.try_inv(q2.zero()) is None
        assert q2.is_zero(q2.inv(q2.zero()))

    def test_inverse_of_limit(self, q2, minus_one_limit):
        inv = q2.inv(minus_one_limit)
        assert inv.exact is None
        assert q2.eq_to_precision(inv, q2.embed(-1))
        assert q2.check_mul_inv_cancel(minus_one_limit)

    def test_inverse_radius(self, q2):
        assert q2.inverse_radius(q2.embed(2), Fraction(1)) == Fraction(1, 4)
        assert q2.inverse_radius(q2.embed(2), Fraction(8)) == Fraction(1, 2)
        assert q2.inverse_radius(q2.zero(), Fraction(1)) == 0

    def test_sqrt_inverse(self, q7):
        s = padic_sqrt(q7, 2)
        assert q7.check_mul_inv_cancel(s)

    @pytest.mark.parametrize("gamma", [Fraction(1), Fraction(1, 16)])
    def test_inverse_witness_tail(self, q2, minus_one_limit, gamma):
        assert q2.check_inverse_witness(minus_one_limit, gamma)
        assert q2.check_inverse_witness(q2.embed(Fraction(6)), gamma)

    def test_inverse_witness_needs_nonzero(self, q2):
        with pytest.raises(CompletionPrecisionError):
            q2.check_inverse_witness(q2.zero(), Fraction(1))


class TestZeroTest:
    def test_limit_equals_embedding(self, q2, minus_one_limit):
        assert q2.eq(minus_one_limit, q2.embed(-1))
        assert minus_one_limit == -1
        assert not q2.eq(minus_one_limit, q2.embed(1))

    def test_zero_test_is_depth_bounded(self, v2):
        tiny = Fraction(2) ** 30
        shallow = complete(v2, CompletionConfig(search_depth=24, law_check_levels=4))
        deep = complete(v2, CompletionConfig(search_depth=40, law_check_levels=4))
        assert shallow.is_zero(shallow.limit(lambda n: tiny, lambda gamma: 0))
        assert not deep.is_zero(deep.limit(lambda n: tiny, lambda gamma: 0))
        # exact points are never affected by the depth
        assert not shallow.is_zero(shallow.embed(tiny))


class TestFieldLaws:
    def test_laws_on_mixed_points(self, q2, minus_one_limit):
        points = [q2.embed(Fraction(1, 3)), minus_one_limit, q2.embed(2)]
        assert q2.verify_field_laws(points, levels=q2.levels(4)) == []

    def test_laws_on_sqrt(self, q7):
        s = padic_sqrt(q7, 2)
        assert q7.verify_field_laws([s, q7.embed(Fraction(1, 7))], levels=q7.levels(4)) == []

    def test_closed_induction_detects_failure(self, q2, minus_one_limit):
        assert not q2.closed_induction2(lambda x, y: q2.eq(x, y), minus_one_limit, q2.embed(5))


class TestConstruction:
    def test_config_depth_follows_witness(self, v2):
        witness = check_completable(v2, CompletionConfig(search_depth=16))
        field = CompletionField(witness, CompletionConfig(search_depth=64))
        assert field.config.search_depth == 16

    def test_witness_required(self, v2):
        with pytest.raises(CompletionInputError):
            CompletionField(v2)

    def test_not_separated_is_unavailable(self, v2):
        broken = Valuation(v2.field, v2.value_group,
                           lambda x: Fraction(0) if x in (0, 2) else v2(x), name="broken")
        with pytest.raises(CompletionUnavailableError) as exc:
            complete(broken)
        assert exc.value.analysis["separated"] is False

    def test_trivial_valuation(self):
        k = complete(trivial_valuation(), CompletionConfig(search_depth=8, law_check_levels=3))
        # Cauchy for the trivial valuation means eventually constant
        point = k.limit(lambda n: Fraction(5) if n >= 3 else Fraction(n), lambda gamma: 3)
        assert k.eq(point, k.embed(5))
        assert k.eq(k.inv(point), k.embed(Fraction(1, 5)))

    def test_padic_completion_repr(self, small_config):
        assert repr(padic_completion(5, small_config)) == "Complete(ℚ, v_5)"


class TestSearchDepthBoundary:
    """lim 2^30 and ι(2^30) are one point; depth 24 cannot separate the limit from 0."""

    @pytest.fixture
    def shallow(self, v2):
        return complete(v2, CompletionConfig(search_depth=24, law_check_levels=4))

    @pytest.fixture
    def deep(self, v2):
        return complete(v2, CompletionConfig(search_depth=40, law_check_levels=4))

    @staticmethod
    def _pair(field):
        lim = field.limit(lambda n: Fraction(2) ** 30, lambda gamma: 0, label="2^30")
        return lim, field.embed(Fraction(2) ** 30)

    def test_undecided_value_and_inverse_raise(self, shallow):
        lim, ex = self._pair(shallow)
        vhat = extend_valuation(shallow)
        assert shallow.eq(lim, ex)
        assert vhat(ex) == Fraction(1, 2 ** 30)
        assert vhat.try_value(lim) is None
        with pytest.raises(CompletionPrecisionError):
            vhat(lim)
        assert shallow.try_inv(lim) is None
        with pytest.raises(CompletionPrecisionError):
            shallow.inv(lim)
        with pytest.raises(CompletionPrecisionError):
            shallow.check_mul_inv_cancel(lim)

    def test_multiplicative_with_mixed_operand(self, shallow):
        lim, ex = self._pair(shallow)
        b = shallow.embed(Fraction(1, 2 ** 10))
        vhat = extend_valuation(shallow)
        assert vhat(lim * b) == Fraction(1, 2 ** 20)
        assert vhat(lim * b) == vhat(ex) * vhat(b)
        assert vhat(ex * b) == vhat(lim * b)

    def test_deep_enough_agrees(self, deep):
        lim, ex = self._pair(deep)
        vhat = extend_valuation(deep)
        assert vhat(lim) == vhat(ex)
        assert deep.check_mul_inv_cancel(lim)
        assert deep.eq(deep.inv(lim), deep.embed(Fraction(1, 2 ** 30)))

    def test_exact_zero_still_inverts_to_zero(self, shallow):
        assert shallow.inv(shallow.zero()).exact == 0


class TestLawStage:
    def test_unit_limit_is_inexact(self, q2):
        u = _unit_limit(q2)
        assert u.exact is None
        assert q2.eq(u, q2.one())
        assert q2.check_mul_inv_cancel(u)

    def test_trivial_valuation_unit_limit(self):
        k = complete(trivial_valuation(), CompletionConfig(search_depth=8, law_check_levels=3))
        u = _unit_limit(k)
        assert u.exact is None
        assert k.eq(u, k.one())

    def test_law_stage_reaches_inverse_extension(self, v2):
        def _blind(sequence, depth):
            return None

        with pytest.raises(CompletionUnavailableError) as exc:
            complete(v2, CompletionConfig(search_depth=8, law_check_levels=3), oracle=_blind)
        assert "precision" in exc.value.analysis
