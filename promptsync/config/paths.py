# promptsync/config/paths.py
import os
import sys
from pathlib import Path


def _get_app_name() -> str:
    return "PromptSync"


def get_user_data_dir() -> Path:
    """
    Directory for config and logs.
    PROMPTSYNC_HOME wins, then %APPDATA% on Windows, then $XDG_CONFIG_HOME.
    """
    override = os.environ.get("PROMPTSYNC_HOME")
    if override:
        path = Path(override)
    elif sys.platform == "win32":
        appdata_path = os.environ.get("APPDATA")
        base = Path(appdata_path) if appdata_path else Path.home() / "AppData/Roaming"
        path = base / _get_app_name()
    else:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else Path.home() / ".config"
        path = base / _get_app_name().lower()

    path.mkdir(parents=True, exist_ok=True)
    return path


def get_user_config_file() -> Path:
    return get_user_data_dir() / "config.json"


def get_user_log_dir() -> Path:
    path = get_user_data_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path
