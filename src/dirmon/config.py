"""Monitored-directory configuration for dirmon.

The config is a small JSON document ({"monitored_dirs": [...]}) stored in
/opt/dirmon_config.json when present, otherwise ~/.dirmon_config.json.
DIRMON_CONFIG overrides both.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from dirmon.models import MonitorConfig
from dirmon.walker import expand_path

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DIRMON_CONFIG"
SYSTEM_CONFIG_PATH = Path("/opt/dirmon_config.json")
USER_CONFIG_NAME = ".dirmon_config.json"

DEFAULT_WORKERS = 4


def get_config_path() -> Path:
    """Resolve where the config file lives."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return expand_path(override)
    if SYSTEM_CONFIG_PATH.exists():
        return SYSTEM_CONFIG_PATH
    return Path.home() / USER_CONFIG_NAME


def load_config(path: Optional[Path] = None) -> MonitorConfig:
    """
    Load the config, falling back to an empty one.

    A missing file is normal on first run. A corrupt file is reported
    and replaced by an empty config in memory (the file is left untouched).
    """
    config_path = path or get_config_path()

    try:
        data = config_path.read_text()
    except FileNotFoundError:
        return MonitorConfig()
    except OSError as e:
        logger.warning("Could not read config %s: %s", config_path, e)
        return MonitorConfig()

    try:
        return MonitorConfig.model_validate_json(data)
    except ValidationError as e:
        logger.warning("Error loading config %s: %s", config_path, e)
        return MonitorConfig()


def save_config(config: MonitorConfig, path: Optional[Path] = None) -> Path:
    """Write the config as indented JSON and return the path written."""
    config_path = path or get_config_path()
    config_path.write_text(config.model_dump_json(indent=2))
    return config_path


def add_directory(config: MonitorConfig, directory: str) -> tuple[MonitorConfig, bool]:
    """
    Add a directory to the monitored list.

    Args:
        config: Current config
        directory: Directory path (may be relative or contain ~)

    Returns:
        Tuple of (new config, whether it was added)

    Raises:
        FileNotFoundError: If the path does not exist
        NotADirectoryError: If the path is not a directory
    """
    abs_path = expand_path(directory).absolute()

    if not abs_path.exists():
        raise FileNotFoundError(f"{abs_path} does not exist")
    if not abs_path.is_dir():
        raise NotADirectoryError(f"{abs_path} is not a directory")

    if str(abs_path) in config.monitored_dirs:
        return config, False

    return MonitorConfig(monitored_dirs=[*config.monitored_dirs, str(abs_path)]), True


def remove_directory(config: MonitorConfig, index: int) -> tuple[MonitorConfig, str | None]:
    """
    Remove a directory by its 1-based position in the list.

    Returns:
        Tuple of (new config, removed path or None if the index is out of range)
    """
    if index < 1 or index > len(config.monitored_dirs):
        return config, None

    dirs = list(config.monitored_dirs)
    removed = dirs.pop(index - 1)
    return MonitorConfig(monitored_dirs=dirs), removed
