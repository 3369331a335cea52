# -*- coding: utf-8 -*-
"""
完备化引擎自检

Runs the reference scenarios end to end and returns a JSON-safe verdict:

  1. InversionEstimate on ℚ with v_2: x=1, y=3, γ=1
  2. ι(1/3) ∈ ℚ_2: inv(ι(1/3)) = ι(3)
  3. v̂ ∘ ι = v on the sample of ℚ
  4. −1 ∈ ℚ_2 has every digit equal to 1
  5. √2 ∈ ℚ_7: s·s = 2, inv(s)·s = 1
  6. zero basis of v̂ = closure of ι B_γ
  7. non-separated map: no completion offered
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import Any, Callable, Dict, List, Optional, Tuple

from .completability import check_completable
from .config import CompletionConfig, default_config
from .exact import assert_no_float_or_complex, sha256_hex_of_dict
from .extension import ExtendedValuation
from .inversion import inversion_estimate
from .padic import padic_completion, padic_expansion, padic_series, padic_sqrt
from .valuation import Valuation, padic_valuation
from .value_group import DiscreteValueGroup

_logger = logging.getLogger(__name__)


def _check_inversion_scenario(config: CompletionConfig) -> Tuple[bool, str]:
    v2 = padic_valuation(2)
    cert = inversion_estimate(v2, Fraction(1), Fraction(3), Fraction(1))
    ok = (cert.hypothesis_holds and cert.radius == 1 and cert.v_diff == Fraction(1, 2)
          and cert.v_inv_diff == Fraction(1, 2) and cert.conclusion_holds)
    return ok, f"radius={cert.radius} v_diff={cert.v_diff} v_inv_diff={cert.v_inv_diff}"


def _check_inverse_round_trip(config: CompletionConfig) -> Tuple[bool, str]:
    q2 = padic_completion(2, config)
    third = q2.embed(Fraction(1, 3))
    inv = q2.inv(third)
    return bool(q2.eq(inv, q2.embed(3))), f"inv(ι(1/3)) = {inv!r}"


def _check_extension_agrees(config: CompletionConfig) -> Tuple[bool, str]:
    q2 = padic_completion(2, config)
    vhat = ExtendedValuation(q2)
    bad = [x for x in q2.base_field.sample_elements() if not vhat.extends(x)]
    return not bad, f"mismatches={len(bad)}"


def _check_minus_one_digits(config: CompletionConfig) -> Tuple[bool, str]:
    q2 = padic_completion(2, config)
    minus_one = padic_series(q2, lambda i: 1, label="Σ 2^i")
    ok = q2.eq_to_precision(minus_one, q2.embed(-1))
    exp = padic_expansion(q2, minus_one, 8)
    ok = ok and exp.order == 0 and all(int(d) == 1 for d in exp.digits)
    return ok, f"expansion={exp}"


def _check_sqrt_two(config: CompletionConfig) -> Tuple[bool, str]:
    q7 = padic_completion(7, config)
    s = padic_sqrt(q7, 2)
    ok = q7.eq_to_precision(s * s, q7.embed(2)) and q7.check_mul_inv_cancel(s)
    return ok, f"digits={padic_expansion(q7, s, 6)}"


def _check_zero_basis(config: CompletionConfig) -> Tuple[bool, str]:
    q3 = padic_completion(3, config)
    vhat = ExtendedValuation(q3)
    points = [q3.embed(Fraction(9, 2)), q3.embed(Fraction(1, 3)), padic_sqrt(q3, 7), q3.zero()]
    levels = [Fraction(1, 27), Fraction(1, 3), Fraction(1), Fraction(9)]
    bad = [(p, g) for p in points for g in levels if not vhat.zero_basis_agrees(p, g)]
    return not bad, f"disagreements={len(bad)}"


def _check_non_separated(config: CompletionConfig) -> Tuple[bool, str]:
    v2 = padic_valuation(2)

    # sends 2 to the zero of Γ₀: not a valuation on a field
    def _broken(x: Fraction) -> Fraction:
        return Fraction(0) if x == 0 or x == 2 else v2(x)

    broken = Valuation(v2.field, DiscreteValueGroup(2), _broken, name="broken")
    return check_completable(broken, config) is None, "completable=False expected"


_CHECKS: List[Tuple[str, Callable[[CompletionConfig], Tuple[bool, str]]]] = [
    ("inversion_estimate_2adic", _check_inversion_scenario),
    ("inverse_round_trip_q2", _check_inverse_round_trip),
    ("extension_agrees_on_embedding", _check_extension_agrees),
    ("minus_one_digits_q2", _check_minus_one_digits),
    ("sqrt_two_q7", _check_sqrt_two),
    ("zero_basis_closure_q3", _check_zero_basis),
    ("non_separated_not_completable", _check_non_separated),
]


def run_self_check(config: Optional[CompletionConfig] = None) -> Dict[str, Any]:
    config = config if config is not None else default_config()
    results: List[Dict[str, Any]] = []
    for name, check in _CHECKS:
        passed, detail = check(config)
        results.append({"test": name, "passed": bool(passed), "detail": detail})
        if not passed:
            _logger.error("SELF-TEST FAILED: %s - %s", name, detail)
    verdict = {
        "all_passed": all(r["passed"] for r in results),
        "total_tests": len(results),
        "results": results,
    }
    assert_no_float_or_complex(verdict)
    verdict["digest"] = sha256_hex_of_dict({"results": results})
    _logger.info("self-test: %d/%d passed", sum(r["passed"] for r in results), len(results))
    return verdict


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    verdict = run_self_check()
    for r in verdict["results"]:
        _logger.info("[SELF-CHECK] %s passed=%s %s", r["test"], r["passed"], r["detail"])
    return 0 if verdict["all_passed"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
