# File: svmredlight/core/model.py
"""
Trained SVM models

A ``Model`` is produced either by training (``Model.learn_classification``)
or by reading an SVM-light model file (``Model.read_from_file``). Linear
models carry a dense weight vector computed once at construction, so scoring
a document costs O(number of its features) regardless of how many support
vectors the model has.

Trained models do not own the documents they were trained on: support
vectors are held through weak references and documents stay freeable by
their owner. Models are immutable and safe to share between threads until
``release`` is called.
"""

import logging
import math
import weakref
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from joblib import Parallel, delayed
from scipy.sparse import csr_matrix

from .config import KernelConfig, LearningConfig
from .document import Document
from ..exceptions import InvalidDocumentError, ModelReleasedError, UnsupportedKernelError

logger = logging.getLogger(__name__)


class Model:
    """Opaque trained artifact: classification plus read-only statistics."""

    def __init__(self,
                 kernel: KernelConfig,
                 totwords: int,
                 totdoc: int,
                 bias: float,
                 coefficients: np.ndarray,
                 support_vectors: Optional[csr_matrix] = None,
                 documents: Optional[Sequence[Document]] = None,
                 learning: Optional[LearningConfig] = None,
                 maxdiff: float = math.nan,
                 alphas: Optional[np.ndarray] = None,
                 iterations: Optional[int] = None):
        """
        Args:
            kernel: Kernel configuration the model was trained with
            totwords: Highest feature number of the training data
            totdoc: Number of training documents
            bias: Threshold b; decision value is w.x - b
            coefficients: alpha_i * y_i for every support vector
            support_vectors: Owned support vector matrix (loaded models),
                column k holds feature number k
            documents: Borrowed support vector documents (trained models)
            learning: Learning configuration used for training, if known
            maxdiff: Largest KKT violation at the end of training
            alphas: Final dual variables for every training document
            iterations: Solver iterations
        """
        if not kernel.is_linear:
            raise UnsupportedKernelError(int(kernel.kernel_type))
        if (support_vectors is None) == (documents is None):
            raise ValueError("Exactly one of support_vectors or documents must be given")

        self._kernel = kernel
        self._learning = learning
        self._totwords = int(totwords)
        self._totdoc = int(totdoc)
        self._bias = float(bias)
        self._maxdiff = float(maxdiff)
        self._coefficients = np.asarray(coefficients, dtype=np.float64)
        self._alphas = None if alphas is None else np.asarray(alphas, dtype=np.float64)
        self._iterations = iterations

        self._support_vectors = support_vectors
        self._documents = None if documents is None else [weakref.ref(doc) for doc in documents]

        self._weights = self._linear_weights(documents)
        self._released = False

    def _linear_weights(self, documents: Optional[Sequence[Document]]) -> np.ndarray:
        weights = np.zeros(self._totwords + 1, dtype=np.float64)
        if documents is not None:
            for coefficient, doc in zip(self._coefficients, documents):
                in_range = doc.vector.indices <= self._totwords
                np.add.at(weights, doc.vector.indices[in_range],
                          coefficient * doc.vector.weights[in_range])
        elif self._support_vectors.shape[0]:
            sv = self._support_vectors
            weights[:sv.shape[1]] = np.asarray(sv.T @ self._coefficients).ravel()[:len(weights)]
        weights.setflags(write=False)
        return weights

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def read_from_file(cls, path) -> 'Model':
        """Load a model written by ``svm_learn``."""
        from ..data.model_reader import read_model
        return read_model(path)

    @classmethod
    def learn_classification(cls,
                             examples: Sequence[Tuple[Document, float]],
                             learn_params: Optional[Mapping[str, Any]] = None,
                             kernel_params: Optional[Mapping[str, Any]] = None,
                             use_cache: bool = False,
                             alphas: Optional[Sequence[float]] = None,
                             **kwargs) -> 'Model':
        """Train a linear classification model; see ``train_classifier``."""
        from .trainer import train_classifier
        return train_classifier(examples, learn_params, kernel_params, alphas,
                                use_cache=use_cache, **kwargs)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def release(self) -> None:
        """Drop the model's buffers. Documents are never touched."""
        self._released = True
        self._weights = None
        self._support_vectors = None
        self._documents = None
        self._alphas = None

    close = release

    @property
    def released(self) -> bool:
        return self._released

    def __enter__(self) -> 'Model':
        self._check_alive()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.release()
        return False

    def _check_alive(self):
        if self._released:
            raise ModelReleasedError()

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def classify(self, document: Document) -> float:
        """Decision value ``w.x - b`` of ``document``."""
        self._check_alive()
        if not isinstance(document, Document):
            raise InvalidDocumentError(
                f"classify expects a Document, got {type(document).__name__}")
        return document.vector.dot(self._weights) - self._bias

    def classify_many(self, documents: Sequence[Document], n_jobs: int = 1) -> np.ndarray:
        self._check_alive()
        if n_jobs == 1:
            scores = [self.classify(doc) for doc in documents]
        else:
            scores = Parallel(n_jobs=n_jobs, prefer="threads")(
                delayed(self.classify)(doc) for doc in documents
            )
        return np.asarray(scores, dtype=np.float64)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def support_vectors_count(self) -> int:
        self._check_alive()
        return len(self._coefficients)

    def total_words(self) -> int:
        self._check_alive()
        return self._totwords

    def total_docs(self) -> int:
        self._check_alive()
        return self._totdoc

    def max_diff(self) -> float:
        self._check_alive()
        return self._maxdiff

    @property
    def bias(self) -> float:
        self._check_alive()
        return self._bias

    @property
    def kernel_config(self) -> KernelConfig:
        self._check_alive()
        return self._kernel

    @property
    def learning_config(self) -> Optional[LearningConfig]:
        self._check_alive()
        return self._learning

    @property
    def iterations(self) -> Optional[int]:
        self._check_alive()
        return self._iterations

    @property
    def weight_vector(self) -> np.ndarray:
        self._check_alive()
        return self._weights.copy()

    @property
    def support_vector_coefficients(self) -> np.ndarray:
        self._check_alive()
        return self._coefficients.copy()

    @property
    def alphas(self) -> Optional[np.ndarray]:
        self._check_alive()
        return None if self._alphas is None else self._alphas.copy()

    def support_vector_documents(self) -> List[Document]:
        """Support vector documents still alive; empty for loaded models."""
        self._check_alive()
        if self._documents is None:
            return []
        return [doc for doc in (ref() for ref in self._documents) if doc is not None]

    def __repr__(self) -> str:
        if self._released:
            return "Model(released)"
        return (f"Model(sv={len(self._coefficients)}, totwords={self._totwords}, "
                f"totdoc={self._totdoc}, b={self._bias:.6g})")
