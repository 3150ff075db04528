"""SVM-light file readers."""

from .example_reader import read_examples
from .model_reader import read_model

__all__ = ['read_examples', 'read_model']
