"""Utility modules.

Keep imports lightweight; the scripts import what they need directly.
"""

from .logging_utils import get_logger, setup_logger

__all__ = ['get_logger', 'setup_logger']
