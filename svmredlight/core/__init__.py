"""Configuration, documents, solver, training and models."""

from .config import KernelConfig, LearningConfig, build_configs
from .document import Document, FeatureVector
from .model import Model
from .solver import SMOSolver, Solver, SolverResult
from .trainer import MAX_FEATURES, train_classifier

__all__ = [
    'KernelConfig', 'LearningConfig', 'build_configs',
    'Document', 'FeatureVector',
    'Model',
    'SMOSolver', 'Solver', 'SolverResult',
    'MAX_FEATURES', 'train_classifier',
]
