# File: tests/test_training.py

"""
Unit tests for training orchestration, the SMO solver and trained models.
"""

import gc
import math
import unittest
import os
import sys
from unittest.mock import Mock

import numpy as np

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from svmredlight.core.config import KernelType
from svmredlight.core.document import Document
from svmredlight.core.model import Model
from svmredlight.core.solver import SMOSolver, Solver, SolverResult, build_feature_matrix
from svmredlight.core.trainer import MAX_FEATURES, feature_space_width, train_classifier
from svmredlight.exceptions import (
    ConfigConsistencyError, ConfigTypeError, EmptyTrainingSetError, FeatureSpaceOverflowError,
    InvalidAlphaError, InvalidDocumentError, InvalidLabelError, ModelReleasedError
)


def make_separable_examples():
    """Four two-feature documents, linearly separable through the origin."""
    return [
        (Document.create(1, 1.0, 0, 0, [(1, 2.0), (2, 2.0)]), 1),
        (Document.create(2, 1.0, 0, 0, [(1, 3.0), (2, 1.0)]), 1),
        (Document.create(3, 1.0, 0, 0, [(1, -2.0), (2, -2.0)]), -1),
        (Document.create(4, 1.0, 0, 0, [(1, -1.0), (2, -3.0)]), -1),
    ]


def make_spy_solver():
    return Mock(spec=Solver, wraps=SMOSolver())


class TestTrainingPreconditions(unittest.TestCase):
    """Every rejected input fails before the solver is reached."""

    def setUp(self):
        """Set up test fixtures."""
        self.examples = make_separable_examples()
        self.solver = make_spy_solver()

    def train(self, examples=None, learn=None, kernel=None, alphas=None, **kwargs):
        return train_classifier(self.examples if examples is None else examples,
                                learn or {}, kernel or {}, alphas,
                                solver=self.solver, **kwargs)

    def test_empty_examples(self):
        with self.assertRaises(EmptyTrainingSetError):
            self.train(examples=[])
        self.solver.learn_classification.assert_not_called()

    def test_empty_examples_checked_before_config(self):
        with self.assertRaises(EmptyTrainingSetError):
            self.train(examples=[], learn={'svm_c': 'bad'})

    def test_non_numeric_alpha(self):
        with self.assertRaises(InvalidAlphaError) as ctx:
            self.train(alphas=[0.1, 'x', 0.0, 0.0])
        self.assertEqual(ctx.exception.position, 1)
        self.solver.learn_classification.assert_not_called()

    def test_alpha_length_mismatch(self):
        with self.assertRaises(InvalidAlphaError):
            self.train(alphas=[0.1, 0.2])
        self.solver.learn_classification.assert_not_called()

    def test_alpha_not_a_sequence(self):
        with self.assertRaises(InvalidAlphaError):
            self.train(alphas=0.5)

    def test_config_errors_propagate_unchanged(self):
        with self.assertRaises(ConfigTypeError):
            self.train(learn={'maxiter': 'many'})
        with self.assertRaises(ConfigConsistencyError):
            self.train(learn={'svm_maxqpsize': 1})
        self.solver.learn_classification.assert_not_called()

    def test_non_numeric_label(self):
        examples = self.examples[:3] + [(self.examples[3][0], 'neg')]
        with self.assertRaises(InvalidLabelError) as ctx:
            self.train(examples=examples)
        self.assertEqual(ctx.exception.position, 3)
        self.solver.learn_classification.assert_not_called()

    def test_zero_label(self):
        examples = [(self.examples[0][0], 0)] + self.examples[1:]
        with self.assertRaises(InvalidLabelError) as ctx:
            self.train(examples=examples)
        self.assertEqual(ctx.exception.position, 0)
        self.assertIn('transductive training', str(ctx.exception))
        self.solver.learn_classification.assert_not_called()

    def test_examples_must_be_a_sequence(self):
        for examples in ((pair for pair in self.examples), iter(self.examples), 'examples'):
            with self.subTest(examples=type(examples).__name__):
                with self.assertRaises(InvalidDocumentError):
                    self.train(examples=examples)
        self.solver.learn_classification.assert_not_called()

    def test_nan_option_never_reaches_solver(self):
        with self.assertRaises(ConfigTypeError):
            self.train(learn={'epsilon_crit': float('nan')})
        self.solver.learn_classification.assert_not_called()

    def test_malformed_example(self):
        for example in ((self.examples[0][0],), ('not a document', 1), 42):
            with self.subTest(example=example):
                with self.assertRaises(InvalidDocumentError):
                    self.train(examples=self.examples[:3] + [example])
        self.solver.learn_classification.assert_not_called()

    def test_feature_space_overflow(self):
        wide = Document.create(5, 1.0, 0, 0, [(1, 1.0), (51, 1.0)])
        with self.assertRaises(FeatureSpaceOverflowError) as ctx:
            self.train(examples=self.examples + [(wide, 1)], max_features=50)
        self.assertEqual(ctx.exception.totwords, 51)
        self.assertEqual(ctx.exception.limit, 50)
        self.solver.learn_classification.assert_not_called()

    def test_width_at_limit_is_accepted(self):
        wide = Document.create(5, 1.0, 0, 0, [(50, 1.0)])
        model = self.train(examples=self.examples + [(wide, 1)], max_features=50)
        self.assertEqual(model.total_words(), 50)

    def test_default_limit(self):
        self.assertEqual(MAX_FEATURES, 99999999)


class TestTrainingOrchestration(unittest.TestCase):
    """Solver invocation and model wrapping."""

    def setUp(self):
        """Set up test fixtures."""
        self.examples = make_separable_examples()

    def test_feature_space_width(self):
        docs = [doc for doc, _ in self.examples]
        docs.append(Document.create(9, 1.0, 0, 0, [(3, 1.0), (17, 1.0)]))
        self.assertEqual(feature_space_width(docs), 17)

    def test_solver_receives_validated_input(self):
        solver = make_spy_solver()
        train_classifier(self.examples, {'svm_c': 1.0}, {'kernel_type': 1},
                         [0.0, 0.0, 0.0, 0.0], solver=solver)

        solver.learn_classification.assert_called_once()
        documents, labels, totwords, learning, kernel, alphas = \
            solver.learn_classification.call_args[0]
        self.assertEqual([doc.docnum for doc in documents], [1, 2, 3, 4])
        self.assertEqual(labels.tolist(), [1.0, 1.0, -1.0, -1.0])
        self.assertEqual(totwords, 2)
        self.assertEqual(learning.svm_c, 1.0)
        self.assertEqual(learning.svm_iter_to_shrink, 2)
        self.assertEqual(kernel.kernel_type, KernelType.LINEAR)
        self.assertEqual(alphas.tolist(), [0.0, 0.0, 0.0, 0.0])

    def test_model_wraps_solver_result(self):
        solver = Mock(spec=Solver)
        solver.learn_classification.return_value = SolverResult(
            alphas=np.array([0.5, 0.0, 0.5, 0.0]), bias=0.25, maxdiff=0.0005,
            iterations=3, converged=True, svm_c=1.0)

        model = train_classifier(self.examples, {}, {}, solver=solver)

        self.assertEqual(model.support_vectors_count(), 2)
        self.assertEqual(model.total_docs(), 4)
        self.assertEqual(model.total_words(), 2)
        self.assertAlmostEqual(model.max_diff(), 0.0005)
        self.assertEqual(model.iterations, 3)
        # w = 0.5 * (2, 2) - 0.5 * (-2, -2)
        np.testing.assert_allclose(model.weight_vector, [0.0, 2.0, 2.0])
        self.assertAlmostEqual(model.classify(self.examples[1][0]), 8.0 - 0.25)

    def test_learn_classification_entry_point(self):
        model = Model.learn_classification(self.examples, {'svm_c': 1.0}, {}, True, None)
        self.assertIsInstance(model, Model)


class TestSMOSolver(unittest.TestCase):
    """Round-trip training on small separable data."""

    def setUp(self):
        """Set up test fixtures."""
        self.examples = make_separable_examples()

    def assertSeparates(self, model, examples):
        for doc, label in examples:
            score = model.classify(doc)
            self.assertGreater(score * label, 0, f"document {doc.docnum} scored {score}")

    def test_separable_data_default_c(self):
        model = train_classifier(self.examples, {}, {})
        self.assertSeparates(model, self.examples)

    def test_separable_data_hard_margin(self):
        model = train_classifier(self.examples, {'svm_c': 100.0}, {})
        self.assertSeparates(model, self.examples)
        # every training point lies on or outside the margin
        for doc, label in self.examples:
            self.assertGreater(model.classify(doc) * label, 1.0 - 1e-2)
        self.assertLessEqual(model.max_diff(), 0.001)
        self.assertGreaterEqual(model.support_vectors_count(), 2)

    def test_unbiased_hyperplane(self):
        model = train_classifier(self.examples, {'biased_hyperplane': False, 'svm_c': 10.0}, {})
        self.assertEqual(model.bias, 0.0)
        self.assertSeparates(model, self.examples)

    def test_equality_constraint_holds(self):
        model = train_classifier(self.examples, {'svm_c': 10.0}, {})
        labels = np.array([label for _, label in self.examples], dtype=float)
        self.assertAlmostEqual(float(np.dot(model.alphas, labels)), 0.0, places=9)

    def test_alphas_within_box(self):
        model = train_classifier(self.examples, {'svm_c': 0.05}, {})
        self.assertTrue(np.all(model.alphas >= 0.0))
        self.assertTrue(np.all(model.alphas <= 0.05 + 1e-12))

    def test_cost_factor_scales_upper_bound(self):
        examples = [(Document.create(d.docnum, 2.0, 0, 0, d.features), y)
                    for d, y in self.examples]
        model = train_classifier(examples, {'svm_c': 0.05}, {})
        self.assertTrue(np.all(model.alphas <= 0.1 + 1e-12))

    def test_warm_start(self):
        cold = train_classifier(self.examples, {'svm_c': 10.0}, {})
        warm = train_classifier(self.examples, {'svm_c': 10.0}, {}, cold.alphas.tolist())
        self.assertLessEqual(warm.iterations, cold.iterations)
        self.assertSeparates(warm, self.examples)

    def test_maxiter_caps_training(self):
        with self.assertLogs('svmredlight.core.solver', level='WARNING'):
            model = train_classifier(self.examples, {'maxiter': 0, 'svm_c': 10.0}, {})
        self.assertEqual(model.iterations, 0)

    def test_single_class(self):
        examples = [(doc, 1) for doc, _ in self.examples]
        model = train_classifier(examples, {}, {})
        for doc, _ in examples:
            self.assertGreater(model.classify(doc), 0)

    def test_build_feature_matrix(self):
        matrix = build_feature_matrix([doc for doc, _ in self.examples], 2)
        self.assertEqual(matrix.shape, (4, 3))
        np.testing.assert_allclose(matrix.toarray()[2], [0.0, -2.0, -2.0])

    def test_solver_rejects_non_linear_kernel(self):
        from svmredlight.core.config import KernelConfig, LearningConfig
        docs = [doc for doc, _ in self.examples]
        with self.assertRaises(ValueError):
            SMOSolver().learn_classification(docs, np.ones(4), 2, LearningConfig(),
                                             KernelConfig(kernel_type=KernelType.RBF))


class TestModelBehaviour(unittest.TestCase):
    """Classification, ownership and lifecycle of trained models."""

    def setUp(self):
        """Set up test fixtures."""
        self.examples = make_separable_examples()
        self.model = train_classifier(self.examples, {'svm_c': 10.0}, {})

    def test_classification_is_deterministic(self):
        doc = Document.create(-1, 1.0, 0, 0, [(1, 0.3), (2, -0.7)])
        scores = {self.model.classify(doc) for _ in range(20)}
        self.assertEqual(len(scores), 1)

    def test_classify_features_beyond_model_width(self):
        doc = Document.create(-1, 1.0, 0, 0, [(1, 1.0), (2, 1.0)])
        wider = Document.create(-1, 1.0, 0, 0, [(1, 1.0), (2, 1.0), (40, 5.0)])
        self.assertEqual(self.model.classify(doc), self.model.classify(wider))

    def test_classify_many_matches_classify(self):
        docs = [doc for doc, _ in self.examples]
        expected = [self.model.classify(doc) for doc in docs]
        np.testing.assert_allclose(self.model.classify_many(docs), expected)
        np.testing.assert_allclose(self.model.classify_many(docs, n_jobs=2), expected)

    def test_classify_rejects_non_documents(self):
        with self.assertRaises(InvalidDocumentError):
            self.model.classify([(1, 1.0)])

    def test_documents_not_owned_by_model(self):
        examples = make_separable_examples()
        model = train_classifier(examples, {'svm_c': 10.0}, {})
        probe = Document.create(-1, 1.0, 0, 0, [(1, 1.0), (2, 1.0)])
        before = model.classify(probe)

        training_docs = [d for d, _ in examples]
        self.assertTrue(model.support_vector_documents())
        self.assertTrue(all(any(sv is d for d in training_docs)
                            for sv in model.support_vector_documents()))

        del examples, training_docs
        gc.collect()

        self.assertEqual(model.support_vector_documents(), [])
        self.assertEqual(model.classify(probe), before)

    def test_release_does_not_touch_documents(self):
        doc = self.examples[0][0]
        self.model.release()
        self.assertEqual(doc.features, [(1, 2.0), (2, 2.0)])
        self.assertTrue(self.model.released)

    def test_released_model_rejects_use(self):
        self.model.release()
        with self.assertRaises(ModelReleasedError):
            self.model.classify(self.examples[0][0])
        with self.assertRaises(ModelReleasedError):
            self.model.support_vectors_count()
        self.assertEqual(repr(self.model), "Model(released)")

    def test_context_manager_releases(self):
        with train_classifier(self.examples, {'svm_c': 10.0}, {}) as model:
            self.assertGreater(model.classify(self.examples[0][0]), 0)
        self.assertTrue(model.released)

    def test_weight_vector_is_a_copy(self):
        weights = self.model.weight_vector
        weights[:] = 0
        self.assertNotEqual(self.model.classify(self.examples[0][0]), -self.model.bias)

    def test_trained_model_statistics(self):
        self.assertEqual(self.model.total_docs(), 4)
        self.assertEqual(self.model.total_words(), 2)
        self.assertFalse(math.isnan(self.model.max_diff()))
        self.assertEqual(self.model.learning_config.svm_c, 10.0)


if __name__ == '__main__':
    unittest.main()
