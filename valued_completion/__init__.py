# -*- coding: utf-8 -*-
"""
赋值域完备化引擎 (valued-field completion engine)

核心架构（叶子在前）：
  1. value_group       - 有序值群 Γ₀
  2. valuation         - 赋值 v: K → Γ₀
  3. neighborhoods     - 零点邻域基 {B_γ}
  4. inversion         - 逆映射估计
  5. completability    - 可完备化判定 + 见证函数
  6. completion        - 一致完备化 K̂（Cauchy 序列模型）
  7. completion_field  - K̂ 上的域结构（全定义逆，inv(0)=0）
  8. extension         - 赋值延拓 v̂
  9. padic             - ℚ_p 展开、级数与 Hensel 提升
"""

from .cauchy import BoundAwayFromZero, CauchySequence, Tail, search_lower_bound
from .completability import CompletabilityWitness, check_completable, is_separated
from .completion import CompletionPoint, DensityExtension, UniformCompletion
from .completion_field import CompletionField, complete
from .config import CompletionConfig, default_config
from .errors import (
    CompletionError,
    CompletionInputError,
    CompletionPrecisionError,
    CompletionUnavailableError,
    ValuationAxiomError,
)
from .extension import ExtendedValuation, extend_valuation
from .field import Field, RationalField
from .inversion import InversionCertificate, inversion_estimate, inversion_radius
from .neighborhoods import Entourage, NeighborhoodBasis, ZeroBall
from .padic import (
    PadicExpansion,
    from_padic_digits,
    padic_completion,
    padic_expansion,
    padic_series,
    padic_sqrt,
)
from .valuation import AxiomViolation, Valuation, padic_valuation, trivial_valuation
from .value_group import DiscreteValueGroup, RationalValueGroup, ValueGroupWithZero

__version__ = "0.1.0"

__all__ = [
    "AxiomViolation",
    "BoundAwayFromZero",
    "CauchySequence",
    "CompletabilityWitness",
    "CompletionConfig",
    "CompletionError",
    "CompletionField",
    "CompletionInputError",
    "CompletionPoint",
    "CompletionPrecisionError",
    "CompletionUnavailableError",
    "DensityExtension",
    "DiscreteValueGroup",
    "Entourage",
    "ExtendedValuation",
    "Field",
    "InversionCertificate",
    "NeighborhoodBasis",
    "PadicExpansion",
    "RationalField",
    "RationalValueGroup",
    "Tail",
    "UniformCompletion",
    "Valuation",
    "ValuationAxiomError",
    "ValueGroupWithZero",
    "ZeroBall",
    "check_completable",
    "complete",
    "default_config",
    "extend_valuation",
    "from_padic_digits",
    "inversion_estimate",
    "inversion_radius",
    "is_separated",
    "padic_completion",
    "padic_expansion",
    "padic_series",
    "padic_sqrt",
    "padic_valuation",
    "search_lower_bound",
    "trivial_valuation",
]
