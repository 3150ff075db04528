# File: svmredlight/core/solver.py
"""
Quadratic-programming solvers for SVM classification

The training orchestrator hands validated configuration and documents to an
object implementing ``Solver``. ``SMOSolver`` is the bundled implementation:
a sequential minimal optimisation solver for the linear-kernel dual

    min_a  1/2 a'Qa - e'a
    s.t.   0 <= a_i <= U_i,   sum_i y_i a_i = 0   (biased hyperplane only)

with ``Q_ij = y_i y_j <x_i, x_j>``. The weight vector ``w = sum_i a_i y_i x_i``
is kept up to date so every iteration costs O(nnz) instead of O(n^2).

Working set selection follows the maximal violating pair rule (Keerthi et
al. 2001, Fan et al. 2005); the unbiased problem is solved by greedy
single-variable coordinate descent.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy.sparse import csr_matrix

from .config import KernelConfig, LearningConfig
from .document import Document

logger = logging.getLogger(__name__)

# Smallest curvature used for a pair update
TAU = 1e-12


@dataclass
class SolverResult:
    """Outcome of one training run."""

    alphas: np.ndarray       # dual variables, one per document
    bias: float              # threshold b, decision value is w.x - b
    maxdiff: float           # largest KKT violation at termination
    iterations: int
    converged: bool
    svm_c: float             # C actually used


class Solver(ABC):
    """Interface of the numeric engine behind ``train_classifier``.

    Implementations receive already validated input and may assume every
    document is non-empty with feature numbers in ``[1, totwords]``.
    """

    @abstractmethod
    def learn_classification(self,
                             documents: Sequence[Document],
                             labels: np.ndarray,
                             totwords: int,
                             learning: LearningConfig,
                             kernel: KernelConfig,
                             alphas: Optional[np.ndarray] = None) -> SolverResult:
        pass


def build_feature_matrix(documents: Sequence[Document], totwords: int) -> csr_matrix:
    """Stack document vectors into a CSR matrix; column k is feature number k."""
    lengths = [len(doc.vector) for doc in documents]
    indptr = np.zeros(len(documents) + 1, dtype=np.int64)
    np.cumsum(lengths, out=indptr[1:])

    indices = np.concatenate([doc.vector.indices for doc in documents])
    data = np.concatenate([doc.vector.weights for doc in documents])

    return csr_matrix((data, indices, indptr), shape=(len(documents), totwords + 1))


class SMOSolver(Solver):
    """Linear-kernel SMO solver.

    Honours ``svm_c`` (0 selects ``1 / mean(||x||)^2``), ``svm_costratio``,
    per-document cost factors, ``biased_hyperplane``, ``epsilon_crit``,
    ``epsilon_a``, ``maxiter`` and warm-start alphas.
    """

    UNSUPPORTED_FLAGS = ('sharedslack', 'remove_inconsistent', 'compute_loo')

    def learn_classification(self,
                             documents: Sequence[Document],
                             labels: np.ndarray,
                             totwords: int,
                             learning: LearningConfig,
                             kernel: KernelConfig,
                             alphas: Optional[np.ndarray] = None) -> SolverResult:

        if not kernel.is_linear:
            raise ValueError(f"SMOSolver only supports linear kernels, got {kernel.kernel_type}")

        self._log_ignored_options(learning)

        X = build_feature_matrix(documents, totwords)
        y = np.where(np.asarray(labels, dtype=np.float64) > 0, 1.0, -1.0)
        sq_norms = np.asarray(X.multiply(X).sum(axis=1)).ravel()

        svm_c = self._effective_c(learning, sq_norms)
        costfactors = np.array([doc.costfactor for doc in documents], dtype=np.float64)
        upper = svm_c * costfactors * np.where(y > 0, learning.svm_costratio, 1.0)

        alpha = self._initial_alphas(alphas, upper, y, learning.biased_hyperplane)
        w = np.asarray(X.T @ (alpha * y)).ravel()

        logger.debug(f"SMO on {len(documents)} documents, {totwords} features, C={svm_c:.6g}")

        iterations = 0
        converged = False
        while True:
            grad = y * (X @ w) - 1.0

            if learning.biased_hyperplane:
                i, j, maxdiff = self._select_pair(alpha, grad, y, upper)
            else:
                i, j, maxdiff = self._select_single(alpha, grad, upper)

            if maxdiff <= learning.epsilon_crit:
                converged = True
                break
            if iterations >= learning.maxiter:
                logger.warning(f"Maximum number of iterations ({learning.maxiter}) reached, "
                               f"stopping with maxdiff={maxdiff:.6g}")
                break

            if learning.biased_hyperplane:
                self._update_pair(X, w, alpha, grad, y, upper, sq_norms, i, j)
            else:
                self._update_single(X, w, alpha, grad, y, upper, sq_norms, i)
            iterations += 1

        margins = X @ w
        bias = self._compute_bias(alpha, margins, y, upper, learning) \
            if learning.biased_hyperplane else 0.0

        logger.debug(f"SMO finished after {iterations} iterations, maxdiff={maxdiff:.6g}")

        return SolverResult(
            alphas=alpha,
            bias=float(bias),
            maxdiff=float(max(maxdiff, 0.0)),
            iterations=iterations,
            converged=converged,
            svm_c=float(svm_c),
        )

    def _log_ignored_options(self, learning: LearningConfig):
        enabled = [flag for flag in self.UNSUPPORTED_FLAGS if getattr(learning, flag)]
        if enabled:
            logger.debug(f"Options not used by SMOSolver: {enabled}")

    @staticmethod
    def _effective_c(learning: LearningConfig, sq_norms: np.ndarray) -> float:
        if learning.svm_c > 0:
            return learning.svm_c
        mean_norm = float(np.mean(np.sqrt(sq_norms)))
        if mean_norm <= 0:
            return 1.0
        return 1.0 / (mean_norm * mean_norm)

    @staticmethod
    def _initial_alphas(alphas: Optional[np.ndarray], upper: np.ndarray,
                        y: np.ndarray, biased: bool) -> np.ndarray:
        if alphas is None:
            return np.zeros_like(upper)

        alpha = np.clip(np.asarray(alphas, dtype=np.float64), 0.0, upper)
        if biased:
            # Restore sum(y * alpha) == 0 by shrinking the heavier class
            positive, negative = y > 0, y < 0
            pos_sum, neg_sum = alpha[positive].sum(), alpha[negative].sum()
            if pos_sum > neg_sum:
                alpha[positive] *= neg_sum / pos_sum
            elif neg_sum > pos_sum:
                alpha[negative] *= pos_sum / neg_sum
        return alpha

    @staticmethod
    def _index_sets(alpha: np.ndarray, y: np.ndarray,
                    upper: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        at_upper = alpha >= upper
        at_lower = alpha <= 0.0
        up = ((y > 0) & ~at_upper) | ((y < 0) & ~at_lower)
        low = ((y > 0) & ~at_lower) | ((y < 0) & ~at_upper)
        return up, low

    def _select_pair(self, alpha, grad, y, upper) -> Tuple[int, int, float]:
        v = -y * grad
        up, low = self._index_sets(alpha, y, upper)
        if not up.any() or not low.any():
            return -1, -1, 0.0

        up_idx = np.flatnonzero(up)
        low_idx = np.flatnonzero(low)
        i = int(up_idx[np.argmax(v[up_idx])])
        j = int(low_idx[np.argmin(v[low_idx])])
        return i, j, float(v[i] - v[j])

    @staticmethod
    def _select_single(alpha, grad, upper) -> Tuple[int, int, float]:
        projected = grad.copy()
        projected[(alpha <= 0.0) & (grad > 0)] = 0.0
        projected[(alpha >= upper) & (grad < 0)] = 0.0
        k = int(np.argmax(np.abs(projected)))
        return k, -1, float(abs(projected[k]))

    @staticmethod
    def _row(X: csr_matrix, k: int) -> Tuple[np.ndarray, np.ndarray]:
        start, end = X.indptr[k], X.indptr[k + 1]
        return X.indices[start:end], X.data[start:end]

    def _update_pair(self, X, w, alpha, grad, y, upper, sq_norms, i, j):
        idx_i, val_i = self._row(X, i)
        idx_j, val_j = self._row(X, j)

        cross = float(X[i].multiply(X[j]).sum())
        eta = max(sq_norms[i] + sq_norms[j] - 2.0 * cross, TAU)

        v_i = -y[i] * grad[i]
        v_j = -y[j] * grad[j]
        step = (v_i - v_j) / eta

        # alpha_i moves by +y_i*step and alpha_j by -y_j*step
        limit_i = upper[i] - alpha[i] if y[i] > 0 else alpha[i]
        limit_j = alpha[j] if y[j] > 0 else upper[j] - alpha[j]
        step = min(step, limit_i, limit_j)

        alpha[i] = min(max(alpha[i] + y[i] * step, 0.0), upper[i])
        alpha[j] = min(max(alpha[j] - y[j] * step, 0.0), upper[j])

        w[idx_i] += step * val_i
        w[idx_j] -= step * val_j

    def _update_single(self, X, w, alpha, grad, y, upper, sq_norms, k):
        idx_k, val_k = self._row(X, k)

        if sq_norms[k] > 0:
            new_alpha = alpha[k] - grad[k] / sq_norms[k]
        else:
            new_alpha = upper[k] if grad[k] < 0 else 0.0
        new_alpha = min(max(new_alpha, 0.0), upper[k])

        delta = new_alpha - alpha[k]
        alpha[k] = new_alpha
        w[idx_k] += delta * y[k] * val_k

    def _compute_bias(self, alpha, margins, y, upper, learning: LearningConfig) -> float:
        free = (alpha > learning.epsilon_a) & (alpha < upper)
        if free.any():
            return float(np.mean(margins[free] - y[free]))

        # No free support vector: take the middle of the feasible interval
        v = y - margins
        up, low = self._index_sets(alpha, y, upper)
        bounds: List[float] = []
        if up.any():
            bounds.append(float(np.max(v[up])))
        if low.any():
            bounds.append(float(np.min(v[low])))
        if not bounds:
            return 0.0
        return -float(np.mean(bounds))
