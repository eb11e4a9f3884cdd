"""
Configuration for epub-pagelist.
"""

from .settings import PageListConfig, DEFAULT_CONFIG, load_config

__all__ = ["PageListConfig", "DEFAULT_CONFIG", "load_config"]
