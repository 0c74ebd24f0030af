"""
ortweb-e2e CLI module.

This module provides the command-line interface for ortweb-e2e.
"""

from .parser import CLI, main
from . import utils

__all__ = ["CLI", "main", "utils"]
