"""
Utility modules for the jobmatch engine.
"""

from .config import Config
from .logging_setup import configure_logging

__all__ = [
    "Config",
    "configure_logging",
]
