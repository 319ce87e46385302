"""
Core module for the BMP toolkit.

This module provides the single source of truth for:
- Result objects (results.py)
- File-level compare/negate/inspect workflows (actions.py)

The CLI calls into this module rather than driving the codec directly.
"""

from .results import OperationResult
from .actions import (
    EXIT_EQUAL,
    EXIT_UNEQUAL,
    NEGATE_MODES,
    compare_files,
    negate_file,
    inspect_file,
)

__all__ = [
    # Results
    "OperationResult",
    # Actions
    "EXIT_EQUAL",
    "EXIT_UNEQUAL",
    "NEGATE_MODES",
    "compare_files",
    "negate_file",
    "inspect_file",
]
