"""
Storage Layer.

This package handles local persistence: the optional configuration file and
the on-disk freshness checks for downloaded files.
"""

from .config_manager import ConfigManager, get_config_dir
from .files import is_fresh, set_modified_time

__all__ = ["ConfigManager", "get_config_dir", "is_fresh", "set_modified_time"]
