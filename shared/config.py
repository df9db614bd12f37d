"""
Configuration loading.

Settings come from ``config.json`` in the config directory, with
``TUNENOODLE_*`` environment variables (and a ``.env`` file) taking
precedence. Having no configuration at all is a valid state: the player
then runs on the bundled demo catalog.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from shared.constants import DEFAULT_CONFIG_DIR, CONFIG_FILENAME, DEFAULT_BUCKET
from shared.exceptions import ConfigurationError
from shared.models import PlayerConfig, StorageProvider

logger = logging.getLogger(__name__)

load_dotenv()

ENV_PREFIX = "TUNENOODLE_"


def config_dir() -> Path:
    return Path(os.getenv(f"{ENV_PREFIX}CONFIG_DIR", DEFAULT_CONFIG_DIR)).expanduser()


def config_path() -> Path:
    return config_dir() / CONFIG_FILENAME


def _env(name: str) -> Optional[str]:
    value = os.getenv(ENV_PREFIX + name)
    return value.strip() if value and value.strip() else None


def _config_from_env() -> Optional[PlayerConfig]:
    provider = _env("PROVIDER")
    if not provider:
        return None
    try:
        provider_type = StorageProvider(provider.lower())
    except ValueError:
        raise ConfigurationError("Unknown storage provider", parameter=f"{ENV_PREFIX}PROVIDER",
                                 details=provider)
    return PlayerConfig(
        provider=provider_type,
        bucket=_env("BUCKET") or DEFAULT_BUCKET,
        endpoint=_env("ENDPOINT"),
        access_key_id=_env("ACCESS_KEY_ID"),
        secret_access_key=_env("SECRET_ACCESS_KEY"),
        region=_env("REGION"),
    )


def load_player_config(path: Optional[Path] = None) -> Optional[PlayerConfig]:
    """
    Resolve the player configuration.

    Returns:
        PlayerConfig, or None when neither the environment nor the config
        file describe a storage provider.
    """
    try:
        config = _config_from_env()
    except ConfigurationError as e:
        logger.warning(f"Ignoring environment configuration: {e}")
        config = None
    if config:
        return config

    path = path or config_path()
    if not path.exists():
        logger.warning(
            f"No storage configuration found at {path}; "
            f"set {ENV_PREFIX}PROVIDER or run 'python -m setup_tool init'."
        )
        return None

    try:
        return PlayerConfig.from_json(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
        logger.warning(f"Error loading config from {path}: {e}")
        return None


def save_player_config(config: PlayerConfig, path: Optional[Path] = None) -> Path:
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.to_json(), encoding="utf-8")
    return path
