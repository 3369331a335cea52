"""确定性性质测试网格 (seeded, reproducible)."""

import random
from fractions import Fraction


def rational_grid(seed, count, max_num=200, max_den=60):
    """Seeded sample of nonzero rationals."""
    rng = random.Random(seed)
    out = []
    while len(out) < count:
        num = rng.randint(-max_num, max_num)
        den = rng.randint(1, max_den)
        if num == 0:
            continue
        out.append(Fraction(num, den))
    return out


def triples(seed, count, base=2):
    """(x, y, γ) with γ a power of ``base`` between base^-6 and base^3."""
    rng = random.Random(seed)
    xs = rational_grid(seed, count)
    ys = rational_grid(seed + 1, count)
    return [(x, y, Fraction(base) ** rng.randint(-6, 3)) for x, y in zip(xs, ys)]


def power_modulus(p):
    """γ ↦ least k with p^-k < γ: modulus of any sequence with ord(x_m − x_n) ≥ min(m, n)."""
    def _modulus(gamma):
        k = 0
        while Fraction(1, p ** k) >= gamma:
            k += 1
        return k
    return _modulus
