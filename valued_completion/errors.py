# -*- coding: utf-8 -*-
"""
严格错误模型 (禁止静默降级)

Every failure that the completion engine can report at runtime derives from
``CompletionError``. Algebraic preconditions (valuation axioms, the
InversionEstimate hypothesis, completability) are NOT runtime faults: they are
checked once, or surfaced as ``False``/``None`` results, and only the explicit
assertion helpers raise.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CompletionError(RuntimeError):
    """赋值域完备化引擎基础异常"""


class CompletionInputError(CompletionError):
    """输入格式/类型错误（浮点污染、非正容差、跨完备化混用点）"""


class CompletionPrecisionError(CompletionError):
    """搜索深度不足 - 无法在当前深度下给出远离零的下界"""


class ValuationAxiomError(CompletionError):
    """赋值公理被违反（仅由 assert_axioms 抛出）"""
    def __init__(self, message: str, *, violations: Optional[list] = None):
        super().__init__(message)
        self.violations = list(violations or [])


class CompletionUnavailableError(CompletionError):
    """数学上不可行 - 赋值不可完备化（非分离），不提供构造"""
    def __init__(self, message: str, *, analysis: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.analysis: Dict[str, Any] = dict(analysis or {})
