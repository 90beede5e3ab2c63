from .models import RecoveryConfig
from .system import CONFIG_ENV_VAR, load_config, resolve_config_path

__all__ = ["RecoveryConfig", "CONFIG_ENV_VAR", "load_config", "resolve_config_path"]
