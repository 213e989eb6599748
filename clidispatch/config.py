"""Utilities for reading clidispatch configuration from YAML."""

import os
from pathlib import Path
from typing import Any

import yaml
from hotlog import get_logger
from pydantic import BaseModel, ConfigDict, ValidationError

logger = get_logger(__name__)

DEFAULT_CONFIG_FILENAME = 'clidispatch.config.yaml'
CONFIG_ENV_VAR = 'CLIDISPATCH_CONFIG'


class ConfigError(RuntimeError):
    """Raised when clidispatch configuration is invalid."""


class DispatchConfig(BaseModel):
    """Settings that shape how commands are dispatched and failures reported."""

    model_config = ConfigDict(extra='forbid')

    program: str = 'clidispatch'
    api_key_env: str = 'CLIDISPATCH_API_KEY'
    help_command: str = 'help'
    version_command: str = 'version'
    login_command: str = 'login'
    timeout_message: str = (
        'API request timed out. Please try again, or contact support if this issue persists.'
    )
    verbose: bool = False


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        msg = f'configuration file not found: {config_path}'
        raise ConfigError(msg)

    logger.debug('loading_config', config=str(config_path))
    try:
        with config_path.open() as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        msg = f'failed to parse YAML: {exc}'
        raise ConfigError(msg) from exc

    if not isinstance(data, dict):
        msg = f'configuration root must be a mapping in {config_path}'
        raise ConfigError(msg)

    return data


def _default_config_path() -> Path | None:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    candidate = Path.cwd() / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.exists() else None


def load_config(config_path: Path | None = None) -> DispatchConfig:
    """Load dispatch configuration from YAML.

    Without an explicit path, ``$CLIDISPATCH_CONFIG`` is used, then
    ``clidispatch.config.yaml`` in the working directory. When neither
    exists the defaults apply.
    """
    path = config_path if config_path is not None else _default_config_path()
    if path is None:
        return DispatchConfig()

    config_data = _load_yaml_config(path)
    try:
        return DispatchConfig.model_validate(config_data)
    except ValidationError as exc:
        logger.exception('config_validation_failed', errors=[error['msg'] for error in exc.errors()])
        msg = 'invalid clidispatch configuration'
        raise ConfigError(msg) from exc


__all__ = [
    'CONFIG_ENV_VAR',
    'DEFAULT_CONFIG_FILENAME',
    'ConfigError',
    'DispatchConfig',
    'load_config',
]
