# File: svmredlight/data/model_reader.py
"""
Reader for SVM-light model files

The text format written by ``svm_learn`` is a header of one value per line
(each followed by a ``#`` comment) and then one support vector per line:

    SVM-light Version V6.02
    0 # kernel type
    3 # kernel parameter -d
    1 # kernel parameter -g
    1 # kernel parameter -s
    1 # kernel parameter -r
    empty# kernel parameter -u
    9947 # highest feature index
    2000 # number of training documents
    879 # number of support vectors plus 1
    -0.19 # threshold b, each following line is a SV (starting with alpha*y)
    0.0195 1:0.0123 5:0.2 #

Support vector lines use the same syntax as SVM-light example files and are
parsed with scikit-learn's svmlight reader.
"""

import io
import logging
import math
from pathlib import Path
from typing import List, Tuple, Union

import numpy as np
from scipy.sparse import csr_matrix
from sklearn.datasets import load_svmlight_file

from ..core.config import KernelConfig, KernelType
from ..core.model import Model
from ..exceptions import ModelFormatError, UnsupportedKernelError

logger = logging.getLogger(__name__)

VERSION_PREFIX = "SVM-light Version"
KNOWN_VERSIONS = ("V6.01", "V6.02")

# (name, parser) for the header lines following the version line
HEADER_FIELDS = (
    ('kernel_type', int),
    ('poly_degree', int),
    ('rbf_gamma', float),
    ('coef_lin', float),
    ('coef_const', float),
    ('custom', str),
    ('totwords', int),
    ('totdoc', int),
    ('sv_num', int),
    ('b', float),
)


def _header_value(line: str) -> str:
    return line.partition("#")[0].strip()


def parse_header(lines: List[bytes], path: str) -> Tuple[str, dict]:
    if not lines:
        raise ModelFormatError("Model file is empty", path=path)

    first = lines[0].decode('utf-8', errors='replace').strip()
    if not first.startswith(VERSION_PREFIX):
        raise ModelFormatError(f"Not an SVM-light model file: {first!r}", path=path, line=1)

    version = first[len(VERSION_PREFIX):].strip()
    if version not in KNOWN_VERSIONS:
        logger.warning(f"Version of model file ({version}) does not match {KNOWN_VERSIONS}")

    if len(lines) < len(HEADER_FIELDS) + 1:
        raise ModelFormatError("Model file header is truncated", path=path)

    header = {}
    for offset, (name, parse) in enumerate(HEADER_FIELDS, start=1):
        raw = _header_value(lines[offset].decode("utf-8", errors="replace"))
        # numeric fields take the first token, the custom parameter keeps its text
        if parse is not str:
            raw = raw.split()[0] if raw.split() else ''
        try:
            header[name] = parse(raw)
        except ValueError:
            raise ModelFormatError(f"Invalid value {raw!r} for {name}",
                                   path=path, line=offset + 1) from None

    return version, header


def parse_support_vectors(lines: List[bytes], count: int, totwords: int,
                          path: str) -> Tuple[np.ndarray, csr_matrix]:
    """Parse ``count`` support vector lines into (alpha*y, matrix)."""
    if count == 0:
        return np.zeros(0), csr_matrix((0, totwords + 1))

    try:
        matrix, coefficients = load_svmlight_file(
            io.BytesIO(b"".join(lines)),
            n_features=totwords + 1,
            dtype=np.float64,
            zero_based=True,
        )
    except ValueError as e:
        raise ModelFormatError(f"Invalid support vector line: {e}", path=path) from e

    return coefficients, matrix.tocsr()


def read_model(path: Union[str, Path]) -> Model:
    """
    Load a model written by ``svm_learn``.

    Args:
        path: Model file path

    Returns:
        Model with its weight vector already computed

    Raises:
        FileNotFoundError: If ``path`` does not exist
        UnsupportedKernelError: If the model does not use a linear kernel
        ModelFormatError: If the file cannot be parsed
    """
    path = str(path)
    with open(path, 'rb') as f:
        lines = f.read().splitlines(keepends=True)

    version, header = parse_header(lines, path)

    if header['kernel_type'] != KernelType.LINEAR:
        raise UnsupportedKernelError(header['kernel_type'], path=path)

    sv_count = header['sv_num'] - 1
    if sv_count < 0:
        raise ModelFormatError(f"Invalid number of support vectors: {header['sv_num']}",
                               path=path, line=10)

    body = [line for line in lines[len(HEADER_FIELDS) + 1:] if line.strip()]
    if len(body) != sv_count:
        raise ModelFormatError(
            f"Expected {sv_count} support vectors, found {len(body)}", path=path)

    coefficients, support_vectors = parse_support_vectors(body, sv_count, header['totwords'], path)

    kernel = KernelConfig(
        kernel_type=KernelType(header['kernel_type']),
        poly_degree=header['poly_degree'],
        rbf_gamma=header['rbf_gamma'],
        coef_lin=header['coef_lin'],
        coef_const=header['coef_const'],
        custom=header['custom'],
    )

    model = Model(
        kernel=kernel,
        totwords=header['totwords'],
        totdoc=header['totdoc'],
        bias=header['b'],
        coefficients=coefficients,
        support_vectors=support_vectors,
        maxdiff=math.nan,
    )

    logger.info(f"Loaded SVM-light {version} model from {path}: {sv_count} support vectors, "
                f"{header['totwords']} features")
    return model
