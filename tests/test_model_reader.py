# File: tests/test_model_reader.py

"""
Unit tests for loading SVM-light model files.
"""

import math
import os
import shutil
import sys
import tempfile
import unittest

import numpy as np

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from svmredlight.core.document import Document
from svmredlight.core.model import Model
from svmredlight.data.model_reader import read_model
from svmredlight.exceptions import ModelFormatError, ModelReleasedError, UnsupportedKernelError

HEADER = [
    "SVM-light Version V6.02",
    "0 # kernel type",
    "3 # kernel parameter -d",
    "1 # kernel parameter -g",
    "1 # kernel parameter -s",
    "1 # kernel parameter -r",
    "empty# kernel parameter -u",
    "4 # highest feature index",
    "10 # number of training documents",
    "3 # number of support vectors plus 1",
    "0.5 # threshold b, each following line is a SV (starting with alpha*y)",
]

SUPPORT_VECTORS = [
    "0.25 1:1 3:2 #",
    "-0.5 2:1 4:0.5 #",
]


class TestReadModel(unittest.TestCase):
    """Test cases for read_model."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir)

    def write_model(self, header=None, support_vectors=None, name='model.txt'):
        lines = (HEADER if header is None else header) + \
                (SUPPORT_VECTORS if support_vectors is None else support_vectors)
        path = os.path.join(self.temp_dir, name)
        with open(path, 'w') as f:
            f.write("\n".join(lines) + "\n")
        return path

    def test_statistics(self):
        model = read_model(self.write_model())
        self.assertEqual(model.support_vectors_count(), 2)
        self.assertEqual(model.total_words(), 4)
        self.assertEqual(model.total_docs(), 10)
        self.assertTrue(math.isnan(model.max_diff()))
        self.assertEqual(model.bias, 0.5)
        self.assertEqual(model.kernel_config.custom, 'empty')
        self.assertIsNone(model.learning_config)

    def test_weight_vector(self):
        model = read_model(self.write_model())
        np.testing.assert_allclose(model.weight_vector, [0.0, 0.25, -0.5, 0.5, -0.25])
        np.testing.assert_allclose(model.support_vector_coefficients, [0.25, -0.5])

    def test_classify(self):
        model = read_model(self.write_model())
        cases = [
            ([(1, 2.0), (3, 1.0)], 0.5),
            ([(2, 1.0), (4, 2.0)], -1.5),
            # feature 7 lies outside the model and contributes nothing
            ([(1, 1.0), (7, 3.0)], -0.25),
        ]
        for features, expected in cases:
            with self.subTest(features=features):
                doc = Document.create(-1, 1.0, 0, 0, features)
                self.assertAlmostEqual(model.classify(doc), expected)

    def test_loaded_model_has_no_documents(self):
        model = read_model(self.write_model())
        self.assertEqual(model.support_vector_documents(), [])
        self.assertIsNone(model.alphas)

    def test_model_without_support_vectors(self):
        header = list(HEADER)
        header[9] = "1 # number of support vectors plus 1"
        model = read_model(self.write_model(header=header, support_vectors=[]))
        self.assertEqual(model.support_vectors_count(), 0)
        doc = Document.create(-1, 1.0, 0, 0, [(1, 1.0)])
        self.assertAlmostEqual(model.classify(doc), -0.5)

    def test_read_from_file_with_context_manager(self):
        with Model.read_from_file(self.write_model()) as model:
            doc = Document.create(-1, 1.0, 0, 0, [(1, 2.0), (3, 1.0)])
            self.assertAlmostEqual(model.classify(doc), 0.5)
        with self.assertRaises(ModelReleasedError):
            model.total_words()

    def test_older_version_accepted(self):
        header = ["SVM-light Version V6.01"] + HEADER[1:]
        model = read_model(self.write_model(header=header))
        self.assertEqual(model.total_words(), 4)

    def test_unknown_version_warns(self):
        header = ["SVM-light Version V5.00"] + HEADER[1:]
        with self.assertLogs('svmredlight.data.model_reader', level='WARNING'):
            read_model(self.write_model(header=header))

    def test_non_linear_kernel_rejected(self):
        header = list(HEADER)
        header[1] = "2 # kernel type"
        with self.assertRaises(UnsupportedKernelError) as ctx:
            read_model(self.write_model(header=header))
        self.assertEqual(ctx.exception.kernel_type, 2)

    def test_not_a_model_file(self):
        path = self.write_model(header=["1 1:0.5 2:0.5"], support_vectors=[])
        with self.assertRaises(ModelFormatError) as ctx:
            read_model(path)
        self.assertEqual(ctx.exception.line, 1)

    def test_empty_file(self):
        path = os.path.join(self.temp_dir, 'empty.txt')
        open(path, 'w').close()
        with self.assertRaises(ModelFormatError):
            read_model(path)

    def test_truncated_header(self):
        with self.assertRaises(ModelFormatError):
            read_model(self.write_model(header=HEADER[:6], support_vectors=[]))

    def test_invalid_header_value(self):
        header = list(HEADER)
        header[7] = "many # highest feature index"
        with self.assertRaises(ModelFormatError) as ctx:
            read_model(self.write_model(header=header))
        self.assertEqual(ctx.exception.line, 8)

    def test_support_vector_count_mismatch(self):
        with self.assertRaises(ModelFormatError):
            read_model(self.write_model(support_vectors=SUPPORT_VECTORS[:1]))

    def test_malformed_support_vector(self):
        with self.assertRaises(ModelFormatError):
            read_model(self.write_model(support_vectors=["0.25 1:1 3:2 #", "-0.5 two:1 #"]))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            read_model(os.path.join(self.temp_dir, 'missing.txt'))

    def test_format_error_is_io_error(self):
        header = list(HEADER)
        header[1] = "1 # kernel type"
        with self.assertRaises(OSError):
            Model.read_from_file(self.write_model(header=header))


if __name__ == '__main__':
    unittest.main()
