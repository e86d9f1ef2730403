"""
Configuration loading.

Settings live in a YAML file (see ``configs/default.yaml``) that is merged
over :data:`DEFAULT_CONFIG`, so a user file only needs the keys it changes.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_CONFIG: Dict[str, Any] = {
    'precision': {
        'decimals': 3,
    },
    'logging': {
        'level': 'INFO',
        'file': None,
    },
    'runner': {
        # seconds; None runs the operation in-process without a worker
        'timeout': None,
    },
    'defaults': {
        'sequence': '(1,0), (0,-1), (2,3), (0,0)',
        'second_sequence': '(1,0), (1,0), (1,0), (1,0)',
    },
    'samples': {
        'basic': '(1,0), (0,-1), (2,3), (0,0)',
        'impulse': '(1,0), (0,0), (0,0), (0,0)',
        'step': '(1,0), (1,0), (1,0), (1,0)',
        'complex': '(1,1), (2,-1), (0,2), (-1,0)',
    },
}


class ConfigError(ValueError):
    """Configuration file is unreadable or holds invalid values."""


def _merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config: Dict) -> Dict:
    decimals = config['precision'].get('decimals')
    if not isinstance(decimals, int) or isinstance(decimals, bool) or not 0 <= decimals <= 12:
        raise ConfigError(f"precision.decimals must be an integer in [0, 12], got {decimals!r}")

    level = config['logging'].get('level')
    if not isinstance(level, int) and not isinstance(logging.getLevelName(str(level).upper()), int):
        raise ConfigError(f"logging.level must be a level name such as INFO, got {level!r}")

    timeout = config['runner'].get('timeout')
    if timeout is not None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError(f"runner.timeout must be a positive number or null, got {timeout!r}")

    samples = config.get('samples') or {}
    if not isinstance(samples, dict) or not all(isinstance(v, str) for v in samples.values()):
        raise ConfigError("samples must map names to sequence strings")

    return config


def load_config(config_path: Optional[str] = None) -> Dict:
    """Load configuration from YAML file, falling back to the defaults."""
    if config_path is None:
        return validate_config(copy.deepcopy(DEFAULT_CONFIG))

    path = Path(config_path)
    try:
        with open(path, 'r') as f:
            user_config = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(user_config, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    return validate_config(_merge(DEFAULT_CONFIG, user_config))
