# File: svmredlight/__init__.py

"""
svmredlight: validated training and classification for linear SVMs
===================================================================

Turns loosely typed hyperparameter maps and (document, label) pairs into
strongly typed configuration, checks every precondition of the solver up
front, and manages trained-model and document lifetimes.

Main Components:
---------------
- Configuration validation (LearningConfig, KernelConfig)
- Sparse documents (Document, FeatureVector)
- Training orchestration (train_classifier, SMOSolver)
- Models (Model) and SVM-light model file loading

Usage Example:
--------------
>>> from svmredlight import Document, Model
>>> examples = [
...     (Document.create(1, 1.0, 0, 0, [(1, 2.0), (2, 2.0)]), 1),
...     (Document.create(2, 1.0, 0, 0, [(1, 3.0), (2, 1.0)]), 1),
...     (Document.create(3, 1.0, 0, 0, [(1, -2.0), (2, -2.0)]), -1),
...     (Document.create(4, 1.0, 0, 0, [(1, -1.0), (2, -3.0)]), -1),
... ]
>>> model = Model.learn_classification(examples, {'svm_c': 1.0}, {})
>>> model.classify(examples[0][0]) > 0
True

"""

__version__ = "0.3.0"
__license__ = "MIT"

from .core.config import (
    ConsistencyRule, KernelConfig, KernelType, LearningConfig, LearningType, build_configs
)
from .core.document import Document, FeatureVector
from .core.model import Model
from .core.solver import SMOSolver, Solver, SolverResult
from .core.trainer import MAX_FEATURES, train_classifier
from .data.model_reader import read_model
from .exceptions import (
    SVMLightError, ConfigError, ConfigTypeError, ConfigConsistencyError,
    DocumentError, DocumentConstructionError, InvalidDocumentError,
    TrainingError, EmptyTrainingSetError, InvalidAlphaError, InvalidLabelError,
    FeatureSpaceOverflowError, ModelReleasedError, ModelFormatError, UnsupportedKernelError
)

__all__ = [
    # Configuration
    'LearningConfig',
    'KernelConfig',
    'KernelType',
    'LearningType',
    'ConsistencyRule',
    'build_configs',

    # Documents
    'Document',
    'FeatureVector',

    # Training and models
    'Model',
    'Solver',
    'SolverResult',
    'SMOSolver',
    'MAX_FEATURES',
    'train_classifier',
    'read_model',

    # Errors
    'SVMLightError',
    'ConfigError',
    'ConfigTypeError',
    'ConfigConsistencyError',
    'DocumentError',
    'DocumentConstructionError',
    'InvalidDocumentError',
    'TrainingError',
    'EmptyTrainingSetError',
    'InvalidAlphaError',
    'InvalidLabelError',
    'FeatureSpaceOverflowError',
    'ModelReleasedError',
    'ModelFormatError',
    'UnsupportedKernelError',
]
