# File: svmredlight/exceptions.py

"""
Exception hierarchy for svmredlight.

Every error raised while validating hyperparameters, building documents,
training or loading models derives from ``SVMLightError``. Errors carry the
offending field / position / value as attributes so callers can react
without parsing messages.
"""

from typing import Any, Optional


class SVMLightError(Exception):
    """Base class for all svmredlight errors."""


# Configuration errors

class ConfigError(SVMLightError):
    """A learning or kernel option could not be accepted."""


class ConfigTypeError(ConfigError, TypeError):

    def __init__(self, field: str, expected: str, value: Any = None):
        self.field = field
        self.expected = expected
        self.value = value
        super().__init__(
            f"The value of the option '{field}' must be {expected}, "
            f"got {type(value).__name__} ({value!r})"
        )


class ConfigConsistencyError(ConfigError, ValueError):

    def __init__(self, rule, message: str, field: Optional[str] = None, value: Any = None):
        self.rule = rule
        self.field = field
        self.value = value
        super().__init__(message)


# Document errors

class DocumentError(SVMLightError):
    """A document is malformed or is not a Document at all."""


class DocumentConstructionError(DocumentError, ValueError):

    def __init__(self, constraint: str, message: str,
                 position: Optional[int] = None, value: Any = None):
        self.constraint = constraint
        self.position = position
        self.value = value
        super().__init__(message)


class InvalidDocumentError(DocumentError, TypeError):

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        super().__init__(message)


# Training errors

class TrainingError(SVMLightError):
    """Training preconditions were not met."""


class EmptyTrainingSetError(TrainingError, ValueError):

    def __init__(self, message: str = "Cannot create Model from empty Documents array"):
        super().__init__(message)


class InvalidAlphaError(TrainingError, ValueError):

    def __init__(self, message: str, position: Optional[int] = None, value: Any = None):
        self.position = position
        self.value = value
        super().__init__(message)


class InvalidLabelError(TrainingError, ValueError):

    def __init__(self, message: str, position: Optional[int] = None, value: Any = None):
        self.position = position
        self.value = value
        super().__init__(message)


class FeatureSpaceOverflowError(TrainingError, ValueError):

    def __init__(self, totwords: int, limit: int):
        self.totwords = totwords
        self.limit = limit
        super().__init__(
            f"The number of features ({totwords}) exceeds MAX_FEATURES ({limit}), "
            f"the maximum number of features supported by the solver"
        )


# Model errors

class ModelReleasedError(SVMLightError, ValueError):

    def __init__(self, message: str = "Model has been released and can no longer be used"):
        super().__init__(message)


class ModelFormatError(SVMLightError, OSError):
    """A model file could not be parsed."""

    def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None):
        self.path = path
        self.line = line
        location = ""
        if path is not None:
            location = f" ({path}" + (f", line {line}" if line is not None else "") + ")"
        super().__init__(f"{message}{location}")


class UnsupportedKernelError(ModelFormatError):

    def __init__(self, kernel_type: int, path: Optional[str] = None):
        self.kernel_type = kernel_type
        super().__init__(
            f"Only linear kernel models are supported, model uses kernel type {kernel_type}",
            path=path,
        )
