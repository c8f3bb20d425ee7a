# promptsync/config/loader.py
import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError
from loguru import logger

from .schema import AppConfig
from .paths import get_user_config_file

_cached_config: Optional[AppConfig] = None

# Environment variable -> config field
ENV_OVERRIDES = {
    "PROMPTSYNC_MATCH_MODE": "match_mode",
    "PROMPTSYNC_LOG_LEVEL": "log_level",
}


def _backup_corrupted(config_path: Path) -> None:
    backup_path = config_path.with_suffix(".json.corrupted")
    try:
        backup_path.unlink(missing_ok=True)
        config_path.rename(backup_path)
        logger.info(f"Backed up corrupted config to: {backup_path}")
    except OSError as backup_err:
        logger.error(f"Failed to backup corrupted config: {backup_err}")


def _apply_env_overrides(data: dict) -> dict:
    for env_name, field in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            logger.debug(f"Config override from {env_name}: {field}={value}")
            data[field] = value
    return data


def load_config() -> AppConfig:
    """Loads the user configuration, falling back to defaults on any problem."""
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    config_path = get_user_config_file()
    loaded_data = {}

    if config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                loaded_data = json.load(f)
            if not isinstance(loaded_data, dict):
                raise ValueError("top-level JSON value is not an object")
        except (json.JSONDecodeError, ValueError, OSError) as e:
            logger.error(f"Failed to load config file {config_path}: {e}")
            _backup_corrupted(config_path)
            loaded_data = {}
    else:
        logger.info("No config file found. Using default settings.")

    loaded_data = _apply_env_overrides(loaded_data)

    try:
        _cached_config = AppConfig(**loaded_data)
        logger.debug("Configuration loaded successfully.")
    except ValidationError as e:
        logger.error(f"Configuration validation failed: {e}")
        logger.warning("Falling back to default configuration.")
        _cached_config = AppConfig()
    return _cached_config


def save_config(config: AppConfig) -> bool:
    """Writes the configuration atomically. Returns False if it could not be saved."""
    config_path = get_user_config_file()
    logger.info(f"Saving configuration to: {config_path}")
    temp_file_path: Optional[Path] = None
    try:
        # Temp file in the same directory so os.replace stays atomic
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=config_path.parent,
            prefix=f".{config_path.name}_tmp",
            suffix=".json",
            delete=False,
        ) as temp_f:
            temp_file_path = Path(temp_f.name)
            temp_f.write(config.model_dump_json(indent=4))
            temp_f.flush()
            os.fsync(temp_f.fileno())

        os.replace(temp_file_path, config_path)
        temp_file_path = None
        logger.info("Configuration saved successfully.")
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Failed to save configuration to {config_path}: {e}")
        return False
    finally:
        if temp_file_path is not None and temp_file_path.exists():
            logger.warning(f"Cleaning up temporary config file: {temp_file_path}")
            try:
                temp_file_path.unlink()
            except OSError as unlink_err:
                logger.error(f"Failed to remove temporary config file {temp_file_path}: {unlink_err}")


def get_config() -> AppConfig:
    """Returns the cached configuration, loading it if necessary."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config_cache() -> None:
    global _cached_config
    _cached_config = None
