# File: svmredlight/core/config.py

"""
Typed learning and kernel configuration

Hyperparameters arrive as plain mappings (typically parsed from JSON or
built by a host application). This module turns them into frozen
``LearningConfig`` / ``KernelConfig`` instances in two passes:

1. a per-field pass driven by the option tables below: every recognised key
   is type-checked and coerced, missing or ``None`` keys take their default,
   and the first badly typed value raises ``ConfigTypeError``;
2. a cross-field pass (``check_consistency``) that derives unset values,
   normalises contradictory flags and rejects invalid combinations with
   ``ConfigConsistencyError``.

Defaults follow ``svm_learn``.
"""

import dataclasses
import logging
import math
import numbers
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import numpy as np

from ..exceptions import ConfigConsistencyError, ConfigTypeError

logger = logging.getLogger(__name__)


class KernelType(IntEnum):
    LINEAR = 0
    POLYNOMIAL = 1
    RBF = 2
    SIGMOID = 3
    CUSTOM = 4


class LearningType(IntEnum):
    CLASSIFICATION = 1
    REGRESSION = 2
    RANKING = 3
    OPTIMIZATION = 4


class ConsistencyRule(Enum):
    """Cross-field rules that can reject a configuration."""

    FINAL_OPT_CHECK_REQUIRED = "final_opt_check_required"
    QP_SIZE_RANGE = "qp_size_range"
    QP_SIZE_BELOW_NEW_VARIABLES = "qp_size_below_new_variables"
    SHRINK_ITERATIONS_RANGE = "shrink_iterations_range"
    NEGATIVE_COST = "negative_cost"
    POSITIVE_RATIO_RANGE = "positive_ratio_range"
    COST_RATIO_NOT_POSITIVE = "cost_ratio_not_positive"
    EPSILON_NOT_POSITIVE = "epsilon_not_positive"
    NEGATIVE_RHO = "negative_rho"
    XA_DEPTH_RANGE = "xa_depth_range"


# =============================================================================
# Per-field coercion
# =============================================================================

def _is_real(value: Any) -> bool:
    # bool is an int subclass but never a valid numeric option
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))


def _coerce_string(name: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    raise ConfigTypeError(name, "a string", value)


def _coerce_integer(name: str, value: Any) -> int:
    if _is_real(value) and math.isfinite(value):
        return int(value)
    raise ConfigTypeError(name, "a numeric", value)


def _coerce_float(name: str, value: Any) -> float:
    if _is_real(value) and math.isfinite(value):
        return float(value)
    raise ConfigTypeError(name, "a numeric", value)


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    raise ConfigTypeError(name, "true or false", value)


COERCERS: Dict[str, Callable[[str, Any], Any]] = {
    'string': _coerce_string,
    'integer': _coerce_integer,
    'float': _coerce_float,
    'bool': _coerce_bool,
}


@dataclass(frozen=True)
class Option:
    """One recognised key: its kind (a key of ``COERCERS``) and default."""

    name: str
    kind: str
    default: Any

    def coerce(self, value: Any) -> Any:
        if value is None:
            return self.default
        return COERCERS[self.kind](self.name, value)


def _table(*options: Option) -> Dict[str, Option]:
    return {option.name: option for option in options}


LEARNING_OPTIONS: Dict[str, Option] = _table(
    Option('predfile', 'string', 'trans_predictions'),
    Option('alphafile', 'string', ''),
    Option('biased_hyperplane', 'bool', True),
    Option('sharedslack', 'bool', False),
    Option('remove_inconsistent', 'bool', False),
    Option('skip_final_opt_check', 'bool', False),
    Option('compute_loo', 'bool', False),
    Option('svm_newvarsinqp', 'integer', 0),
    Option('svm_maxqpsize', 'integer', 10),
    Option('svm_iter_to_shrink', 'integer', None),
    Option('maxiter', 'integer', 100000),
    Option('kernel_cache_size', 'integer', 40),
    Option('xa_depth', 'integer', 0),
    Option('svm_c', 'float', 0.0),
    Option('eps', 'float', 0.1),
    Option('transduction_posratio', 'float', -1.0),
    Option('svm_costratio', 'float', 1.0),
    Option('svm_costratio_unlab', 'float', 1.0),
    Option('svm_unlabbound', 'float', 1e-05),
    Option('epsilon_crit', 'float', 0.001),
    Option('epsilon_a', 'float', 1e-15),
    Option('rho', 'float', 1.0),
)

KERNEL_OPTIONS: Dict[str, Option] = _table(
    Option('kernel_type', 'integer', int(KernelType.LINEAR)),
    Option('poly_degree', 'integer', 3),
    Option('rbf_gamma', 'float', 1.0),
    Option('coef_lin', 'float', 1.0),
    Option('coef_const', 'float', 1.0),
    Option('custom', 'string', 'empty'),
)


def coerce_options(params: Optional[Mapping[str, Any]],
                   options: Dict[str, Option],
                   section: str) -> Dict[str, Any]:
    """Run the per-field pass of ``options`` over ``params``.

    Returns a dict holding a value for every option. Stops at the first
    badly typed value.
    """
    if params is None:
        params = {}
    if not isinstance(params, Mapping):
        raise ConfigTypeError(section, "a mapping of option names to values", params)

    unknown = [key for key in params if key not in options]
    if unknown:
        logger.warning(f"Ignoring unrecognised {section} options: {sorted(map(str, unknown))}")

    return {name: option.coerce(params.get(name)) for name, option in options.items()}


# =============================================================================
# Configuration structures
# =============================================================================

@dataclass(frozen=True)
class LearningConfig:

    predfile: str = 'trans_predictions'
    alphafile: str = ''
    biased_hyperplane: bool = True
    sharedslack: bool = False
    remove_inconsistent: bool = False
    skip_final_opt_check: bool = False
    compute_loo: bool = False
    svm_newvarsinqp: int = 0
    svm_maxqpsize: int = 10
    svm_iter_to_shrink: Optional[int] = None
    maxiter: int = 100000
    kernel_cache_size: int = 40
    xa_depth: int = 0
    svm_c: float = 0.0
    eps: float = 0.1
    transduction_posratio: float = -1.0
    svm_costratio: float = 1.0
    svm_costratio_unlab: float = 1.0
    svm_unlabbound: float = 1e-05
    epsilon_crit: float = 0.001
    epsilon_a: float = 1e-15
    rho: float = 1.0
    type: LearningType = LearningType.CLASSIFICATION

    @classmethod
    def from_mapping(cls, params: Optional[Mapping[str, Any]]) -> 'LearningConfig':
        return cls(**coerce_options(params, LEARNING_OPTIONS, 'learning'))

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in LEARNING_OPTIONS}


@dataclass(frozen=True)
class KernelConfig:

    kernel_type: int = KernelType.LINEAR
    poly_degree: int = 3
    rbf_gamma: float = 1.0
    coef_lin: float = 1.0
    coef_const: float = 1.0
    custom: str = 'empty'

    @classmethod
    def from_mapping(cls, params: Optional[Mapping[str, Any]]) -> 'KernelConfig':
        return cls(**coerce_options(params, KERNEL_OPTIONS, 'kernel'))

    @property
    def is_linear(self) -> bool:
        return self.kernel_type == KernelType.LINEAR

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in KERNEL_OPTIONS}


# =============================================================================
# Cross-field consistency
# =============================================================================

def _reject(rule: ConsistencyRule, message: str, field: str, value: Any):
    raise ConfigConsistencyError(rule, message, field=field, value=value)


def check_consistency(learning: LearningConfig, kernel: KernelConfig) -> LearningConfig:
    """Derive, normalise and cross-check ``learning`` against ``kernel``.

    Returns the normalised learning config; raises ``ConfigConsistencyError``
    for the first violated rule.
    """
    changes: Dict[str, Any] = {}

    if learning.svm_iter_to_shrink is None:
        changes['svm_iter_to_shrink'] = 2 if kernel.is_linear else 100

    # Linear kernels always run the final optimality check
    if learning.skip_final_opt_check and kernel.is_linear:
        logger.debug("skip_final_opt_check ignored for linear kernel")
        changes['skip_final_opt_check'] = False

    if changes:
        learning = dataclasses.replace(learning, **changes)

    if learning.skip_final_opt_check and learning.remove_inconsistent:
        _reject(ConsistencyRule.FINAL_OPT_CHECK_REQUIRED,
                "It is necessary to do the final optimality check when removing "
                "inconsistent examples.",
                'skip_final_opt_check', True)

    if learning.svm_maxqpsize < 2:
        _reject(ConsistencyRule.QP_SIZE_RANGE,
                f"Maximum size of QP-subproblems not in valid range: "
                f"{learning.svm_maxqpsize} [2..]",
                'svm_maxqpsize', learning.svm_maxqpsize)

    if learning.svm_maxqpsize < learning.svm_newvarsinqp:
        _reject(ConsistencyRule.QP_SIZE_BELOW_NEW_VARIABLES,
                f"Maximum size of QP-subproblems [{learning.svm_maxqpsize}] must be larger "
                f"than the number of new variables [{learning.svm_newvarsinqp}] entering "
                f"the working set in each iteration.",
                'svm_maxqpsize', learning.svm_maxqpsize)

    if learning.svm_iter_to_shrink < 1:
        _reject(ConsistencyRule.SHRINK_ITERATIONS_RANGE,
                f"Maximum number of iterations for shrinking not in valid range: "
                f"{learning.svm_iter_to_shrink} [1,..]",
                'svm_iter_to_shrink', learning.svm_iter_to_shrink)

    if learning.svm_c < 0:
        _reject(ConsistencyRule.NEGATIVE_COST,
                "The C parameter must be greater than zero.",
                'svm_c', learning.svm_c)

    if learning.transduction_posratio > 1:
        _reject(ConsistencyRule.POSITIVE_RATIO_RANGE,
                "The fraction of unlabeled examples to classify as positives must be "
                "less than 1.0.",
                'transduction_posratio', learning.transduction_posratio)

    if learning.svm_costratio <= 0:
        _reject(ConsistencyRule.COST_RATIO_NOT_POSITIVE,
                "The COSTRATIO parameter must be greater than zero.",
                'svm_costratio', learning.svm_costratio)

    if learning.epsilon_crit <= 0:
        _reject(ConsistencyRule.EPSILON_NOT_POSITIVE,
                "The epsilon parameter must be greater than zero.",
                'epsilon_crit', learning.epsilon_crit)

    if learning.rho < 0:
        _reject(ConsistencyRule.NEGATIVE_RHO,
                "The parameter rho for xi/alpha-estimates and leave-one-out pruning must "
                "be greater than zero (typically 1.0 or 2.0, see T. Joachims, Estimating "
                "the Generalization Performance of an SVM Efficiently, ICML, 2000.)",
                'rho', learning.rho)

    if learning.xa_depth < 0 or learning.xa_depth > 100:
        _reject(ConsistencyRule.XA_DEPTH_RANGE,
                "The parameter depth for ext. xi/alpha-estimates must be in [0..100] "
                "(zero for switching to the conventional xa/estimates described in "
                "T. Joachims, Estimating the Generalization Performance of an SVM "
                "Efficiently, ICML, 2000.)",
                'xa_depth', learning.xa_depth)

    return learning


def build_configs(learn_params: Optional[Mapping[str, Any]],
                  kernel_params: Optional[Mapping[str, Any]],
                  force_linear: bool = False) -> Tuple[LearningConfig, KernelConfig]:
    """Validate both parameter maps and return consistent, frozen configs.

    With ``force_linear`` the kernel type is overridden to linear before the
    consistency pass, since only linear kernels can be trained.
    """
    learning = LearningConfig.from_mapping(learn_params)
    kernel = KernelConfig.from_mapping(kernel_params)

    if force_linear and not kernel.is_linear:
        logger.warning(f"Kernel type {kernel.kernel_type} requested, "
                       f"only linear kernels are supported; using linear")
    if force_linear:
        kernel = dataclasses.replace(kernel, kernel_type=KernelType.LINEAR)

    return check_consistency(learning, kernel), kernel
