# File: svmredlight/data/example_reader.py
"""
Reader for SVM-light example files (``label [qid:n] idx:val ... # comment``).
"""

import logging
from pathlib import Path
from typing import List, Tuple, Union

import numpy as np
from sklearn.datasets import load_svmlight_file

from ..core.document import Document

logger = logging.getLogger(__name__)


def read_examples(path: Union[str, Path], cost: float = 1.0) -> List[Tuple[Document, float]]:
    """
    Load an example file as (Document, label) pairs.

    Documents are numbered from 0 in file order and keep their ``qid``.
    Every example needs at least one feature.

    Args:
        path: Example file path
        cost: Cost factor given to every document

    Returns:
        List of (Document, label) pairs
    """
    X, labels, query_ids = load_svmlight_file(
        str(path), dtype=np.float64, zero_based=False, query_id=True
    )
    X = X.tocsr()
    # the qid array is only filled when the file carries qid tokens
    if len(query_ids) != X.shape[0]:
        query_ids = np.zeros(X.shape[0], dtype=np.int64)

    examples = []
    for row in range(X.shape[0]):
        start, end = X.indptr[row], X.indptr[row + 1]
        # zero_based=False shifts feature k to column k - 1
        features = list(zip((X.indices[start:end] + 1).tolist(), X.data[start:end].tolist()))
        document = Document.create(row, cost, 0, int(query_ids[row]), features)
        examples.append((document, float(labels[row])))

    logger.info(f"Read {len(examples)} examples from {path}")
    return examples
