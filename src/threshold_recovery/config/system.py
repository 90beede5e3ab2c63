"""Locating and loading the recovery configuration file."""

import os
from pathlib import Path
from typing import Optional

from .models import RecoveryConfig

CONFIG_ENV_VAR = "THRESHOLD_RECOVERY_CONFIG"


def resolve_config_path(explicit: Optional[Path] = None) -> Optional[Path]:
    """
    Resolve the config file path.

    An explicit path wins; otherwise THRESHOLD_RECOVERY_CONFIG is used, with
    relative values taken from the current directory. Returns None when neither
    is set.
    """
    if explicit:
        return Path(explicit).resolve()
    env_value = os.getenv(CONFIG_ENV_VAR)
    if env_value:
        candidate = Path(env_value)
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate
    return None


def load_config(explicit: Optional[Path] = None) -> RecoveryConfig:
    """
    Load the recovery config, falling back to defaults when no file is configured.

    Raises:
        FileNotFoundError: if an explicitly requested file does not exist.
        ValueError: if the file is invalid.
    """
    path = resolve_config_path(explicit)
    if path is None:
        return RecoveryConfig()
    if not path.exists():
        if explicit:
            raise FileNotFoundError(f"Config file {path} does not exist")
        return RecoveryConfig()
    return RecoveryConfig.from_file(path)
