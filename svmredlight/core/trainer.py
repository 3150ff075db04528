# File: svmredlight/core/trainer.py
"""
Training orchestration

``train_classifier`` is the only path from untyped user input to the solver.
It checks every precondition the solver relies on, in a fixed order, and
raises a typed error before any numeric work starts:

1. non-empty sequence of examples
2. warm-start alphas (length and numeric values)
3. learning / kernel options (per-field and cross-field)
4. (Document, label) pairs with usable labels
5. feature space width within ``MAX_FEATURES``

Only then is the solver called and its result wrapped as a ``Model``.
"""

import logging
import math
import numbers
import time
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .config import build_configs
from .document import Document
from .model import Model
from .solver import SMOSolver, Solver
from ..exceptions import (
    EmptyTrainingSetError, InvalidAlphaError, InvalidDocumentError,
    InvalidLabelError, FeatureSpaceOverflowError, SVMLightError
)

logger = logging.getLogger(__name__)

# Highest feature number the solver can index
MAX_FEATURES = 99999999


def _is_finite_real(value: Any) -> bool:
    return (isinstance(value, numbers.Real)
            and not isinstance(value, (bool, np.bool_))
            and math.isfinite(value))


def validate_alphas(alphas: Optional[Sequence[float]], totdoc: int) -> Optional[np.ndarray]:
    if alphas is None:
        return None

    if isinstance(alphas, (str, bytes)) or not isinstance(alphas, (Sequence, np.ndarray)):
        raise InvalidAlphaError("alpha must be a numeric array or None", value=alphas)

    if len(alphas) != totdoc:
        raise InvalidAlphaError(
            f"The alpha array has {len(alphas)} elements but there are {totdoc} examples",
            value=len(alphas))

    for position, value in enumerate(alphas):
        if not _is_finite_real(value):
            raise InvalidAlphaError(
                f"All elements of the alpha array must be numeric, "
                f"got {value!r} at position {position}",
                position=position, value=value)

    return np.asarray(alphas, dtype=np.float64)


def unpack_examples(examples: Sequence[Tuple[Document, float]]) -> Tuple[List[Document], np.ndarray]:
    """Split (Document, label) pairs, checking every document and label."""
    documents: List[Document] = []
    labels = np.empty(len(examples), dtype=np.float64)

    for position, example in enumerate(examples):
        if isinstance(example, (str, bytes)) or not isinstance(example, Sequence) or len(example) < 2:
            raise InvalidDocumentError(
                "All elements of documents and labels should be pairs, where the first "
                "element is a document and the second a number",
                position=position)

        document, label = example[0], example[1]
        if not isinstance(document, Document):
            raise InvalidDocumentError(
                f"Example {position} does not hold a Document, got {type(document).__name__}",
                position=position)

        if not _is_finite_real(label):
            raise InvalidLabelError(
                f"The label of example {position} must be numeric, got {label!r}",
                position=position, value=label)
        if label == 0:
            raise InvalidLabelError(
                f"The label of example {position} is 0: transductive training on unlabeled "
                f"examples (label 0) is not implemented",
                position=position, value=label)

        documents.append(document)
        labels[position] = label

    return documents, labels


def feature_space_width(documents: Sequence[Document], max_features: int = MAX_FEATURES) -> int:
    """Highest feature number over ``documents``; bounded by ``max_features``."""
    totwords = 0
    for document in documents:
        totwords = max(totwords, document.vector.max_index)
        if totwords > max_features:
            raise FeatureSpaceOverflowError(totwords, max_features)
    return totwords


def train_classifier(examples: Sequence[Tuple[Document, float]],
                     learn_params: Optional[Mapping[str, Any]] = None,
                     kernel_params: Optional[Mapping[str, Any]] = None,
                     warm_start_alphas: Optional[Sequence[float]] = None,
                     use_cache: bool = False,
                     solver: Optional[Solver] = None,
                     max_features: int = MAX_FEATURES) -> Model:
    """
    Train a linear SVM classifier.

    Args:
        examples: Sequence of (Document, label) pairs, labels conventionally +1/-1
        learn_params: Learning options, see ``LEARNING_OPTIONS``
        kernel_params: Kernel options, see ``KERNEL_OPTIONS``; the kernel is
            always trained as linear
        warm_start_alphas: Optional initial dual variables, one per example
        use_cache: Kernel cache switch, ignored for linear kernels
        solver: Solver to run, ``SMOSolver`` by default
        max_features: Upper bound on the highest feature number

    Returns:
        Trained Model referencing (not owning) the support vector documents
    """
    try:
        if examples is None:
            raise EmptyTrainingSetError()
        if isinstance(examples, (str, bytes)) or not isinstance(examples, (Sequence, np.ndarray)):
            raise InvalidDocumentError(
                f"Examples must be a sequence of (Document, label) pairs, "
                f"got {type(examples).__name__}")
        if len(examples) == 0:
            raise EmptyTrainingSetError()

        alphas = validate_alphas(warm_start_alphas, len(examples))

        learning, kernel = build_configs(learn_params, kernel_params, force_linear=True)
        if use_cache:
            logger.debug("Kernel cache requested; not used for linear kernels")

        documents, labels = unpack_examples(examples)
        totwords = feature_space_width(documents, max_features)

    except SVMLightError as e:
        logger.error(f"Training rejected: {e}")
        raise

    solver = solver or SMOSolver()

    logger.info(f"Training linear SVM on {len(documents)} documents with {totwords} features")
    start_time = time.time()

    result = solver.learn_classification(documents, labels, totwords, learning, kernel, alphas)

    alpha = np.asarray(result.alphas, dtype=np.float64)
    y = np.where(labels > 0, 1.0, -1.0)
    support = np.flatnonzero(alpha > learning.epsilon_a)

    model = Model(
        kernel=kernel,
        learning=learning,
        totwords=totwords,
        totdoc=len(documents),
        bias=result.bias,
        coefficients=alpha[support] * y[support],
        documents=[documents[k] for k in support],
        maxdiff=result.maxdiff,
        alphas=alpha,
        iterations=result.iterations,
    )

    logger.info(f"Training completed in {time.time() - start_time:.2f}s")
    logger.info(f"Support vectors: {len(support)}/{len(documents)}, maxdiff={result.maxdiff:.6g}, "
                f"converged={result.converged}")

    return model
