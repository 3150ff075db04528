# File: svmredlight/utils/config_loader.py

"""
Hyperparameter files for the command-line scripts.

A parameter file is JSON with optional ``learning`` and ``kernel`` sections
holding the same keys the Python API accepts:

    {
        "learning": {"svm_c": 1.0, "biased_hyperplane": true},
        "kernel": {}
    }

Values are passed through untouched; type checking happens in
``svmredlight.core.config``.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from ..core.config import KERNEL_OPTIONS, LEARNING_OPTIONS
from ..exceptions import ConfigTypeError

SECTIONS = ('learning', 'kernel')


def create_default_config() -> Dict[str, Dict[str, Any]]:
    """Parameter file content listing every option with its default."""
    return {
        'learning': {name: option.default for name, option in LEARNING_OPTIONS.items()},
        'kernel': {name: option.default for name, option in KERNEL_OPTIONS.items()},
    }


def load_params(path: Optional[Union[str, Path]]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Read a parameter file.

    Args:
        path: JSON file path; None gives empty sections (all defaults)

    Returns:
        (learning params, kernel params)
    """
    if path is None:
        return {}, {}

    with open(path, 'r', encoding='utf-8') as f:
        config = json.load(f)

    if not isinstance(config, dict):
        raise ConfigTypeError(str(path), "a JSON object with 'learning' and 'kernel' sections",
                              config)

    sections = []
    for section in SECTIONS:
        params = config.get(section) or {}
        if not isinstance(params, dict):
            raise ConfigTypeError(section, "a JSON object", params)
        sections.append(params)

    return sections[0], sections[1]
