# File: svmredlight/scripts/train_svmlight.py

"""
Training script for svmredlight.
Reads an SVM-light example file and a JSON parameter file, trains a linear
classifier and reports model statistics and, optionally, test set metrics.
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

import numpy as np

from svmredlight.core.model import Model
from svmredlight.data.example_reader import read_examples
from svmredlight.evaluation.metrics import evaluate_scores
from svmredlight.exceptions import SVMLightError
from svmredlight.utils.config_loader import create_default_config, load_params
from svmredlight.utils.logging_utils import setup_logger


class SVMLightTrainer:
    """
    Runs one training job from files.

    Handles:
    - Example and parameter file loading
    - Warm-start alphas
    - Training
    - Test set evaluation
    """

    def __init__(self, config_path: Optional[str] = None, log_dir: Optional[str] = None,
                 log_level: str = "INFO"):
        self.logger = setup_logger("svmredlight-train", log_dir, log_level)
        self.learn_params, self.kernel_params = load_params(config_path)
        self.model: Optional[Model] = None

    @staticmethod
    def load_alphas(path: str) -> List[float]:
        """One alpha per line, as in an ``svm_learn -a`` file."""
        with open(path, 'r', encoding='utf-8') as f:
            return [float(line) for line in f if line.strip()]

    def train(self, example_file: str, alpha_file: Optional[str] = None) -> Model:
        examples = read_examples(example_file)
        alphas = self.load_alphas(alpha_file) if alpha_file else None
        if alphas is not None:
            self.logger.info(f"Warm start from {len(alphas)} alphas in {alpha_file}")

        self.model = Model.learn_classification(
            examples, self.learn_params, self.kernel_params, alphas=alphas
        )
        return self.model

    def evaluate(self, test_file: str) -> Dict[str, Any]:
        if self.model is None:
            raise ValueError("Model must be trained before evaluation")

        examples = read_examples(test_file)
        scores = self.model.classify_many([doc for doc, _ in examples])
        labels = np.array([label for _, label in examples])
        metrics = evaluate_scores(labels, scores)
        self.logger.info(f"Test accuracy: {metrics.accuracy * 100:.2f}% on {metrics.n_examples} examples")
        return metrics.to_dict()

    def summary(self) -> Dict[str, Any]:
        return {
            'support_vectors': self.model.support_vectors_count(),
            'total_words': self.model.total_words(),
            'total_docs': self.model.total_docs(),
            'maxdiff': self.model.max_diff(),
            'bias': self.model.bias,
            'iterations': self.model.iterations,
        }


def main(argv: Optional[List[str]] = None) -> int:

    parser = argparse.ArgumentParser(description='Train a linear SVM-light classifier')
    parser.add_argument('example_file', nargs='?', help='Training examples in SVM-light format')
    parser.add_argument('--config', type=str, help='JSON file with learning and kernel options')
    parser.add_argument('--alphas', type=str, help='File with one warm-start alpha per line')
    parser.add_argument('--test-file', type=str, help='Examples to evaluate the model on')
    parser.add_argument('--log-dir', type=str, default=None, help='Log directory')
    parser.add_argument('--log-level', type=str, default='INFO', help='Logging level')
    parser.add_argument('--print-default-config', action='store_true',
                        help='Print every option with its default and exit')

    args = parser.parse_args(argv)

    if args.print_default_config:
        print(json.dumps(create_default_config(), indent=2))
        return 0

    if not args.example_file:
        parser.error("example_file is required")

    try:
        trainer = SVMLightTrainer(args.config, args.log_dir, args.log_level)
        trainer.train(args.example_file, args.alphas)

        report = {'model': trainer.summary()}
        if args.test_file:
            report['test'] = trainer.evaluate(args.test_file)

    except (SVMLightError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(report, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
