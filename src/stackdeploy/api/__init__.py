"""stackdeploy.api — Control plane client + deploy config."""

from stackdeploy.api.client import DirectoryClient, NEW_CREATE_API_VERSION
from stackdeploy.api.config import (
    DeployConfig, load_config, config_path, CONFIG_FILENAME,
)

__all__ = [
    "DirectoryClient", "NEW_CREATE_API_VERSION",
    "DeployConfig", "load_config", "config_path", "CONFIG_FILENAME",
]
