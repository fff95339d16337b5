"""Runtime settings for the downloader.

Settings are layered: built-in defaults from constants.py, then
config/downloader.yaml, then STORE_DOWNLOAD_* environment variables
(run.py loads a .env file into the environment before calling this).
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from store_download.shared.constants import HTTP, LOGGING

__all__ = [
    'DEFAULT_CONFIG_PATH',
    'DownloadSettings',
    'load_settings',
]


DEFAULT_CONFIG_PATH = "config/downloader.yaml"

ENV_TIMEOUT = 'STORE_DOWNLOAD_TIMEOUT'
ENV_USER_AGENT = 'STORE_DOWNLOAD_USER_AGENT'
ENV_LOG_FILE = 'STORE_DOWNLOAD_LOG_FILE'


@dataclass
class DownloadSettings:
    """Resolved runtime settings."""
    timeout: float = HTTP.TIMEOUT
    user_agent: Optional[str] = None
    log_to_file: bool = False
    log_file: str = LOGGING.LOG_FILE


def _read_yaml(config_path: str) -> Dict[str, Any]:
    """Read the YAML settings file, returning {} when absent or unusable."""
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        logging.debug(f"Settings file {config_path} not found, using defaults")
        return {}
    except yaml.YAMLError as e:
        logging.warning(f"Invalid YAML syntax in {config_path}: {e}")
        return {}

    # Empty YAML files load as None
    if not isinstance(config, dict):
        if config is not None:
            logging.warning(f"Settings file {config_path} must contain a mapping, ignoring it")
        return {}
    return config


def _parse_timeout(value: Any, source: str) -> Optional[float]:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        logging.warning(f"Ignoring invalid timeout {value!r} from {source}")
        return None
    if timeout <= 0:
        logging.warning(f"Ignoring non-positive timeout {value!r} from {source}")
        return None
    return timeout


def load_settings(config_path: str = DEFAULT_CONFIG_PATH) -> DownloadSettings:
    """Load settings from YAML and the environment.

    Args:
        config_path: Path to the downloader YAML file

    Returns:
        DownloadSettings with environment overrides applied
    """
    settings = DownloadSettings()
    config = _read_yaml(config_path)

    http_config = config.get('http') or {}
    if isinstance(http_config, dict):
        if 'timeout' in http_config:
            timeout = _parse_timeout(http_config['timeout'], config_path)
            if timeout is not None:
                settings.timeout = timeout
        if http_config.get('user_agent'):
            settings.user_agent = str(http_config['user_agent'])

    logging_config = config.get('logging') or {}
    if isinstance(logging_config, dict):
        settings.log_to_file = bool(logging_config.get('enabled', settings.log_to_file))
        if logging_config.get('log_file'):
            settings.log_file = str(logging_config['log_file'])

    env_timeout = os.getenv(ENV_TIMEOUT)
    if env_timeout:
        timeout = _parse_timeout(env_timeout, ENV_TIMEOUT)
        if timeout is not None:
            settings.timeout = timeout

    env_user_agent = os.getenv(ENV_USER_AGENT)
    if env_user_agent:
        settings.user_agent = env_user_agent

    env_log_file = os.getenv(ENV_LOG_FILE)
    if env_log_file:
        settings.log_file = env_log_file
        settings.log_to_file = True

    return settings
