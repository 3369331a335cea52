# -*- coding: utf-8 -*-
"""
完备化引擎配置

所有搜索深度都显式给出，禁止在算法内部硬编码阈值。
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompletionConfig:
    """
    search_depth:
        Number of tolerance levels the lower-bound oracle probes before it
        declares a Cauchy sequence indistinguishable from zero. A point whose
        extended value is ``base**-n`` is separated from zero once
        ``search_depth > n``.
    law_check_levels:
        Number of tolerance levels used by precision-bounded law checks
        (closed induction, x·inv(x) ∈ {1}).
    sample_span:
        Number of tail indices sampled by ``Tail.pairwise_within``.
    """

    search_depth: int = 64
    law_check_levels: int = 8
    sample_span: int = 6

    def __post_init__(self) -> None:
        for name in ("search_depth", "law_check_levels", "sample_span"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ValueError(f"{name} must be int >= 1, got {value!r}")

    def with_depth(self, search_depth: int) -> "CompletionConfig":
        return CompletionConfig(
            search_depth=search_depth,
            law_check_levels=self.law_check_levels,
            sample_span=self.sample_span,
        )


def default_config() -> CompletionConfig:
    """
    Default depth: 64 levels, i.e. one machine word of p-adic digits for p=2.
    """
    return CompletionConfig()
