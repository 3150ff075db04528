# File: svmredlight/scripts/classify_svmlight.py

"""
Classification script for svmredlight.
Scores an SVM-light example file with a model written by ``svm_learn`` and
writes one decision value per line, like ``svm_classify``.
"""

import argparse
import sys
from typing import List, Optional

import numpy as np

from svmredlight.core.model import Model
from svmredlight.data.example_reader import read_examples
from svmredlight.evaluation.metrics import evaluate_scores
from svmredlight.exceptions import SVMLightError
from svmredlight.utils.logging_utils import get_logger, setup_logger

logger = get_logger(__name__)


def classify_file(example_file: str, model_file: str, output_file: Optional[str] = None,
                  n_jobs: int = 1) -> np.ndarray:
    examples = read_examples(example_file)

    with Model.read_from_file(model_file) as model:
        scores = model.classify_many([doc for doc, _ in examples], n_jobs=n_jobs)

    if output_file:
        with open(output_file, 'w', encoding='utf-8') as f:
            for score in scores:
                f.write(f"{score:.8g}\n")
        logger.info(f"Wrote {len(scores)} predictions to {output_file}")

    labels = np.array([label for _, label in examples])
    if np.any(labels != 0):
        metrics = evaluate_scores(labels, scores)
        logger.info(f"Accuracy on test set: {metrics.accuracy * 100:.2f}% "
                    f"({metrics.n_correct} correct, {metrics.n_examples - metrics.n_correct} "
                    f"incorrect, {metrics.n_examples} total)")
        logger.info(f"Precision/recall on test set: {metrics.precision * 100:.2f}%/"
                    f"{metrics.recall * 100:.2f}%")

    return scores


def main(argv: Optional[List[str]] = None) -> int:

    parser = argparse.ArgumentParser(description='Classify examples with an SVM-light model')
    parser.add_argument('example_file', help='Examples in SVM-light format')
    parser.add_argument('model_file', help='Model file written by svm_learn')
    parser.add_argument('output_file', nargs='?', default=None,
                        help='Where to write decision values, stdout when omitted')
    parser.add_argument('--n-jobs', type=int, default=1, help='Classification threads')
    parser.add_argument('--log-dir', type=str, default=None, help='Log directory')
    parser.add_argument('--log-level', type=str, default='INFO', help='Logging level')

    args = parser.parse_args(argv)
    setup_logger("svmredlight-classify", args.log_dir, args.log_level)

    try:
        scores = classify_file(args.example_file, args.model_file, args.output_file, args.n_jobs)
    except (SVMLightError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not args.output_file:
        for score in scores:
            print(f"{score:.8g}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
