"""
Utility modules.
"""

from .logging import setup_logging, get_logger
from .config import load_config, ConfigError, DEFAULT_CONFIG

__all__ = ['setup_logging', 'get_logger', 'load_config', 'ConfigError', 'DEFAULT_CONFIG']
