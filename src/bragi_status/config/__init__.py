"""bragi-status configuration system."""

from bragi_status.config.loader import find_config_file, load_config, load_env_config
from bragi_status.config.models import BragiEndpoint, ProbeConfig, ServiceConfig, StatusConfig

__all__ = [
    "BragiEndpoint",
    "ProbeConfig",
    "ServiceConfig",
    "StatusConfig",
    "load_config",
    "load_env_config",
    "find_config_file",
]
