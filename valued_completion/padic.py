# -*- coding: utf-8 -*-
"""
===========================================================
p-adic 数域 ℚ_p = Complete(ℚ, v_p)
===========================================================
- 截断 p-adic 展开: x ≡ p^order · Σ d_i p^i  (mod p^(order + r))
- 精确构造: 有限位展开 → ι(ℚ) 中的点
- 无穷级数: 逐位给出的 Cauchy 序列
- Hensel 提升: 奇素数下单位平方根
===========================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import Callable, Optional, Sequence

import numpy as np

from .completion import CompletionPoint
from .completion_field import CompletionField, complete
from .config import CompletionConfig
from .errors import CompletionInputError
from .valuation import padic_order, padic_valuation
from .value_group import DiscreteValueGroup


__all__ = [
    "padic_completion",
    "PadicExpansion",
    "padic_expansion",
    "from_padic_digits",
    "padic_series",
    "padic_sqrt",
    "tonelli_shanks",
    "hensel_lift_sqrt",
]


def padic_completion(p: int, config: Optional[CompletionConfig] = None) -> CompletionField:
    """ℚ_p"""
    return complete(padic_valuation(p), config)


def _prime_of(field: CompletionField) -> int:
    group = field.valuation.value_group
    if not isinstance(group, DiscreteValueGroup):
        raise CompletionInputError(f"{field!r} is not discretely valued")
    return group.base


def _digit_dtype(p: int):
    return np.int64 if p < (1 << 62) else object


def _precision_exponent(group: DiscreteValueGroup, gamma: Fraction) -> int:
    """Smallest k with p^-k < γ."""
    largest_below = next(group.units_below(gamma, 1))
    return -group.exponent(largest_below)


def _residue_mod(x: Fraction, m: int) -> int:
    """a/b mod m for b invertible mod m."""
    return (x.numerator * pow(x.denominator, -1, m)) % m


# ===========================================================
# Section 1: 截断展开
# ===========================================================

@dataclass(frozen=True, eq=False)
class PadicExpansion:
    """
    order=None 表示零（在搜索深度内无法与 0 区分）
    digits[i] 是 p^(order + i) 的系数，范围 [0, p-1]
    """

    prime: int
    order: Optional[int]
    digits: np.ndarray

    @property
    def precision(self) -> int:
        return int(len(self.digits))

    def to_fraction(self) -> Fraction:
        """Truncation as an exact rational."""
        if self.order is None:
            return Fraction(0)
        total = 0
        pk = 1
        for d in self.digits:
            total += int(d) * pk
            pk *= self.prime
        return Fraction(total) * Fraction(self.prime) ** self.order

    def __str__(self) -> str:
        if self.order is None:
            return "0"
        body = "".join(str(int(d)) if self.prime <= 10 else f"[{int(d)}]" for d in reversed(self.digits))
        return f"...{body} × {self.prime}^{self.order}"


def padic_expansion(field: CompletionField, point: CompletionPoint, precision: int) -> PadicExpansion:
    """
    First ``precision`` digits of point, starting at its order.
    """
    if not isinstance(precision, int) or precision < 1:
        raise CompletionInputError(f"precision must be int >= 1, got {precision!r}")
    p = _prime_of(field)
    group = field.valuation.value_group
    point = field.coerce(point)

    bound = field.lower_bound(point)
    if bound is None:
        return PadicExpansion(p, None, np.zeros(0, dtype=_digit_dtype(p)))
    order = -group.exponent(bound.gamma0)

    # v(point − a) < p^-(order + precision − 1)  ⟹  ord(point − a) ≥ order + precision
    a = field.approx(point, group.from_exponent(-(order + precision - 1)))
    unit = a / Fraction(p) ** order
    residue = _residue_mod(unit, p ** precision)
    digits = []
    for _ in range(precision):
        digits.append(residue % p)
        residue //= p
    return PadicExpansion(p, order, np.asarray(digits, dtype=_digit_dtype(p)))


def from_padic_digits(field: CompletionField, order: int, digits: Sequence[int]) -> CompletionPoint:
    """ι(p^order · Σ d_i p^i)"""
    p = _prime_of(field)
    total = 0
    pk = 1
    for i, d in enumerate(digits):
        d = int(d)
        if not 0 <= d < p:
            raise CompletionInputError(f"digit {i} = {d} is outside [0, {p - 1}]")
        total += d * pk
        pk *= p
    return field.embed(Fraction(total) * Fraction(p) ** order)


# ===========================================================
# Section 2: 无穷级数
# ===========================================================

def padic_series(field: CompletionField, digit_fn: Callable[[int], int], order: int = 0,
                 label: str = "Σ d_i p^i") -> CompletionPoint:
    """
    lim_n p^order · Σ_{i<n} d_i p^i, digits from ``digit_fn``.

    x_m − x_n has order ≥ order + n for m > n, so modulus(γ) = max(0, k − order)
    with k the least integer such that p^-k < γ.
    """
    p = _prime_of(field)
    group = field.valuation.value_group
    scale = Fraction(p) ** order

    def _digit(i: int) -> int:
        d = int(digit_fn(i))
        if not 0 <= d < p:
            raise CompletionInputError(f"digit {i} = {d} is outside [0, {p - 1}]")
        return d

    def _term(n: int) -> Fraction:
        return scale * sum(_digit(i) * p ** i for i in range(n))

    def _modulus(gamma: Fraction) -> int:
        return max(0, _precision_exponent(group, gamma) - order)

    return field.limit(_term, _modulus, label=label)


# ===========================================================
# Section 3: Hensel 提升
# ===========================================================

def tonelli_shanks(n: int, p: int) -> Optional[int]:
    """Tonelli-Shanks算法求模p平方根"""
    n %= p
    if n == 0:
        return 0
    if pow(n, (p - 1) // 2, p) != 1:
        return None  # 非二次剩余

    # 特殊情况: p ≡ 3 (mod 4)
    if p % 4 == 3:
        return pow(n, (p + 1) // 4, p)

    q = p - 1
    s = 0
    while q % 2 == 0:
        q //= 2
        s += 1

    z = 2
    while pow(z, (p - 1) // 2, p) != p - 1:
        z += 1

    m = s
    c = pow(z, q, p)
    t = pow(n, q, p)
    r = pow(n, (q + 1) // 2, p)

    while t != 1:
        i = 1
        temp = pow(t, 2, p)
        while temp != 1:
            temp = pow(temp, 2, p)
            i += 1
            if i == m:
                return None
        b = pow(c, 1 << (m - i - 1), p)
        m = i
        c = pow(b, 2, p)
        t = (t * c) % p
        r = (r * b) % p
    return r


def hensel_lift_sqrt(y_mod_p: int, y_sq: int, p: int, target_precision: int) -> int:
    """
    Hensel提升：把 mod p 的平方根提升到 mod p^k

    核心公式: y ← y − (y² − a)·(2y)^-1  (mod p^(2^n))
    每次迭代精度翻倍。要求 p 奇且 y_mod_p ≠ 0。
    """
    y = y_mod_p % p
    current_precision = 1
    while current_precision < target_precision:
        next_precision = min(current_precision * 2, target_precision)
        pk = p ** next_precision
        two_y_inv = pow((2 * y) % pk, -1, pk)
        residue = (y * y - y_sq) % pk
        y = (y - residue * two_y_inv) % pk
        current_precision = next_precision
    return y % (p ** target_precision)


def padic_sqrt(field: CompletionField, n) -> CompletionPoint:
    """
    √n ∈ ℚ_p for odd p and n a p-adic unit that is a square mod p.

    x_k is the root mod p^(k+1) lifted from a fixed root mod p; lifts are
    unique, so x_m ≡ x_k (mod p^(k+1)) for m ≥ k.
    """
    p = _prime_of(field)
    if p == 2:
        raise CompletionInputError("Hensel square roots need an odd prime")
    n = field.base_field.coerce(n)
    if n == 0 or padic_order(n, p) != 0:
        raise CompletionInputError(f"{n} is not a {p}-adic unit")
    root = tonelli_shanks(_residue_mod(n, p), p)
    if root is None:
        raise CompletionInputError(f"{n} is not a square mod {p}")
    group = field.valuation.value_group

    def _term(k: int) -> Fraction:
        pk = p ** (k + 1)
        return Fraction(hensel_lift_sqrt(root, _residue_mod(n, pk), p, k + 1))

    def _modulus(gamma: Fraction) -> int:
        return max(0, _precision_exponent(group, gamma) - 1)

    return field.limit(_term, _modulus, label=f"√{n}")
