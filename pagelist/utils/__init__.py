"""
Utility helpers for epub-pagelist.
"""

from .logger import configure_logging, resolve_level, setup_logger

__all__ = ["configure_logging", "resolve_level", "setup_logger"]
