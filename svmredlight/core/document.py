# File: svmredlight/core/document.py
"""
Sparse feature vectors and training/classification documents

A ``FeatureVector`` is an immutable sparse vector of (feature number, weight)
pairs sorted by feature number. A ``Document`` wraps one vector together with
its document number, query id, slack id and cost factor. Documents are only
built through ``Document.create`` which rejects anything the solver could not
consume.
"""

import math
import numbers
from dataclasses import dataclass
from typing import Any, Iterator, Sequence, Tuple

import numpy as np

from ..exceptions import DocumentConstructionError

# Flat layout of a vector: one record per word, terminated by wnum == 0
WORD_DTYPE = np.dtype([('wnum', np.int64), ('weight', np.float64)])


def _is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, (bool, np.bool_))


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))


def _rows_to_pairs(array: np.ndarray) -> list:
    """Turn an (n, 2) array of (feature number, weight) rows into pairs.

    Float arrays store feature numbers as floats; whole values become ints.
    """
    if array.ndim != 2 or array.shape[1] != 2:
        raise DocumentConstructionError(
            'malformed_feature',
            f"Feature array must have shape (n, 2), got {array.shape}",
            value=array)
    return [(int(wnum) if isinstance(wnum, float) and wnum.is_integer() else wnum, weight)
            for wnum, weight in array.tolist()]


@dataclass(frozen=True, eq=False)
class FeatureVector:
    """Sparse vector; ``indices`` strictly ascending and all > 0."""

    indices: np.ndarray
    weights: np.ndarray

    def __post_init__(self):
        self.indices.setflags(write=False)
        self.weights.setflags(write=False)

    def __len__(self) -> int:
        return len(self.indices)

    def __iter__(self) -> Iterator[Tuple[int, float]]:
        return zip(self.indices.tolist(), self.weights.tolist())

    @property
    def max_index(self) -> int:
        return int(self.indices[-1]) if len(self.indices) else 0

    @property
    def squared_norm(self) -> float:
        return float(np.dot(self.weights, self.weights))

    def dot(self, dense: np.ndarray) -> float:
        """Dot product with a dense array indexed by feature number.

        Features beyond the end of ``dense`` contribute nothing.
        """
        in_range = self.indices < len(dense)
        return float(np.dot(dense[self.indices[in_range]], self.weights[in_range]))

    def as_buffer(self) -> np.ndarray:
        buffer = np.zeros(len(self.indices) + 1, dtype=WORD_DTYPE)
        buffer['wnum'][:-1] = self.indices
        buffer['weight'][:-1] = self.weights
        return buffer

    @classmethod
    def from_pairs(cls, features: Sequence[Tuple[int, float]]) -> 'FeatureVector':
        """Validate and sort (index, weight) pairs."""
        if isinstance(features, np.ndarray):
            features = _rows_to_pairs(features)

        if isinstance(features, (str, bytes)) or not isinstance(features, Sequence):
            raise DocumentConstructionError(
                'malformed_feature',
                "Features must be a sequence of (feature number, weight) pairs",
                value=features)

        if len(features) == 0:
            raise DocumentConstructionError(
                'empty_features', "Cannot create Document from empty arrays")

        indices = np.empty(len(features), dtype=np.int64)
        weights = np.empty(len(features), dtype=np.float64)

        for position, pair in enumerate(features):
            if isinstance(pair, (str, bytes)) or not isinstance(pair, Sequence) or len(pair) != 2:
                raise DocumentConstructionError(
                    'malformed_feature',
                    f"Feature {position} must be a (feature number, weight) pair",
                    position=position, value=pair)

            wnum, weight = pair
            if not _is_integer(wnum):
                raise DocumentConstructionError(
                    'non_integer_index',
                    f"Feature number must be an integer, got {wnum!r} at position {position}",
                    position=position, value=wnum)
            if wnum <= 0:
                raise DocumentConstructionError(
                    'non_positive_index',
                    f"Feature number has to be greater than zero, got {wnum} at position {position}",
                    position=position, value=wnum)
            if not _is_real(weight) or not math.isfinite(weight):
                raise DocumentConstructionError(
                    'non_numeric_weight',
                    f"Feature weights must be numeric, got {weight!r} at position {position}",
                    position=position, value=weight)

            indices[position] = wnum
            weights[position] = weight

        order = np.argsort(indices, kind='stable')
        indices = indices[order]
        weights = weights[order]

        duplicated = np.flatnonzero(np.diff(indices) == 0)
        if len(duplicated):
            wnum = int(indices[duplicated[0]])
            raise DocumentConstructionError(
                'duplicate_index',
                f"Feature number {wnum} appears more than once",
                value=wnum)

        return cls(indices, weights)


class Document:
    """An immutable labeled-example payload.

    Models reference documents without owning them, so instances support
    weak references.
    """

    __slots__ = ('_docnum', '_queryid', '_slackid', '_costfactor', '_vector', '__weakref__')

    def __init__(self, docnum: int, queryid: int, slackid: int,
                 costfactor: float, vector: FeatureVector):
        self._docnum = docnum
        self._queryid = queryid
        self._slackid = slackid
        self._costfactor = costfactor
        self._vector = vector

    @classmethod
    def create(cls, docnum: int, cost: float, slackid: int, queryid: int,
               features: Sequence[Tuple[int, float]]) -> 'Document':
        """Build a document from ``[(feature number, weight), ...]``.

        ``docnum`` may be -1 when the document is only classified. ``cost``
        is the per-example cost factor and has no default.
        """
        for name, value in (('docnum', docnum), ('slackid', slackid), ('queryid', queryid)):
            if not _is_integer(value):
                raise DocumentConstructionError(
                    'non_integer_identifier',
                    f"The document {name} must be an integer, got {value!r}",
                    value=value)

        if not _is_real(cost) or not math.isfinite(cost) or cost <= 0:
            raise DocumentConstructionError(
                'invalid_cost',
                f"The document cost factor must be a positive number, got {cost!r}",
                value=cost)

        vector = FeatureVector.from_pairs(features)
        return cls(int(docnum), int(queryid), int(slackid), float(cost), vector)

    @property
    def docnum(self) -> int:
        return self._docnum

    @property
    def queryid(self) -> int:
        return self._queryid

    @property
    def slackid(self) -> int:
        return self._slackid

    @property
    def costfactor(self) -> float:
        return self._costfactor

    @property
    def vector(self) -> FeatureVector:
        return self._vector

    @property
    def features(self) -> list:
        return list(self._vector)

    def __repr__(self) -> str:
        return (f"Document(docnum={self._docnum}, queryid={self._queryid}, "
                f"slackid={self._slackid}, costfactor={self._costfactor}, "
                f"nnz={len(self._vector)})")
