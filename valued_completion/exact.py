# -*- coding: utf-8 -*-
"""
Exact-arithmetic redline helpers.

Values, tolerances and field elements are ``fractions.Fraction``. Floats and
complex numbers never enter the engine: a float tolerance would make the
strict comparisons of the InversionEstimate meaningless.
"""

from __future__ import annotations

import hashlib
from fractions import Fraction
from typing import Any, Dict

from .errors import CompletionInputError


def as_fraction_strict(x: Any, *, name: str = "value") -> Fraction:
    """
    Convert a rational-like input to Fraction, rejecting float/complex.

    Accepted:
      - int / bool
      - Fraction
      - str (e.g. "3/2")
    """
    if isinstance(x, Fraction):
        return x
    if isinstance(x, bool):
        return Fraction(int(x))
    if isinstance(x, int):
        return Fraction(x)
    if isinstance(x, str):
        try:
            return Fraction(x)
        except (ValueError, ZeroDivisionError) as e:
            raise CompletionInputError(f"{name} must be a rational string like '3/2', got {x!r}") from e
    if isinstance(x, float):
        raise CompletionInputError(f"{name} must be rational (int/Fraction/str); float is forbidden: {x!r}")
    if isinstance(x, complex):
        raise CompletionInputError(f"{name} must be rational (int/Fraction/str); complex is forbidden: {x!r}")
    raise CompletionInputError(f"{name} must be int/Fraction/str, got {type(x).__name__}")


def assert_no_float_or_complex(obj: Any, *, path: str = "root") -> None:
    """Redline guard: forbid float/complex contamination in certificate output."""
    # bool is subclass of int; treat it explicitly as allowed.
    if obj is None or isinstance(obj, (str, bytes, bool, int, Fraction)):
        return
    if isinstance(obj, float):
        raise CompletionInputError(f"float contamination at {path}: {obj!r}")
    if isinstance(obj, complex):
        raise CompletionInputError(f"complex contamination at {path}: {obj!r}")
    if isinstance(obj, dict):
        for k, v in obj.items():
            assert_no_float_or_complex(k, path=f"{path}.<key>")
            assert_no_float_or_complex(v, path=f"{path}[{k!r}]")
        return
    if isinstance(obj, (list, tuple)):
        for i, v in enumerate(obj):
            assert_no_float_or_complex(v, path=f"{path}[{i}]")
        return
    if isinstance(obj, set):
        # Determinism: sets are forbidden in certificate output (unordered).
        raise CompletionInputError(f"unordered set in output at {path}")
    raise CompletionInputError(f"unsupported output type at {path}: {type(obj).__name__}")


def _serialize(obj: Any) -> str:
    if obj is None:
        return "null"
    if isinstance(obj, bool):
        return "true" if obj else "false"
    if isinstance(obj, int):
        return f"int:{obj}"
    if isinstance(obj, str):
        return f"str:{obj}"
    if isinstance(obj, Fraction):
        return f"frac:{obj.numerator}/{obj.denominator}"
    if isinstance(obj, (list, tuple)):
        parts = [_serialize(x) for x in obj]
        return f"list:[{','.join(parts)}]"
    if isinstance(obj, dict):
        items = sorted(obj.items(), key=lambda kv: str(kv[0]))
        parts = [f"{_serialize(k)}:{_serialize(v)}" for k, v in items]
        return f"dict:{{{','.join(parts)}}}"
    raise CompletionInputError(f"type {type(obj).__name__} is not serializable in a certificate")


def sha256_hex_of_dict(d: Dict[str, Any]) -> str:
    """
    SHA-256 commitment of a certificate dict (deterministic serialization).
    禁止 float/complex/set 以保证确定性.
    """
    assert_no_float_or_complex(d)
    return hashlib.sha256(_serialize(d).encode("utf-8")).hexdigest()


def fraction_to_str(x: Fraction) -> str:
    """'3/2' style rendering used in JSON-safe outputs."""
    if x.denominator == 1:
        return str(x.numerator)
    return f"{x.numerator}/{x.denominator}"
