"""
Configuration module for changelog-env
Handles environment settings and the persisted global step options
"""

import os
import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from platformdirs import user_config_dir
from pydantic import BaseModel, ValidationError

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()

# Configuration constants
APP_NAME = "changelog-env"
GLOBAL_CONFIG_NAME = "global"
CHANGELOG_FILE_NAME = "changelog.xml"
CHANGELOG_ENV_VAR = "CHANGELOG"
COMMIT_SEPARATOR = "\n----\n"


class AppConfig:
  """Application configuration settings"""

  # Logging
  LOG_LEVEL = os.getenv("CHANGELOG_ENV_LOG_LEVEL", "INFO")

  # Where the global step configuration is persisted
  CONFIG_DIR = os.getenv("CHANGELOG_ENV_CONFIG_DIR")

  # Default dotenv file receiving injected variables
  ENV_FILE = os.getenv("CHANGELOG_ENV_FILE")


def default_config_dir() -> Path:
  """Config directory: $CHANGELOG_ENV_CONFIG_DIR, else the user config dir"""
  configured = os.getenv("CHANGELOG_ENV_CONFIG_DIR", AppConfig.CONFIG_DIR)
  if configured:
    return Path(configured)
  return Path(user_config_dir(APP_NAME))


class GlobalConfig(BaseModel):
  """Global options shared by every changelog step"""

  use_french: bool = False


class ConfigStorage:
  """Configuration storage using a YAML file in the config directory"""

  def __init__(self, config_name: str = GLOBAL_CONFIG_NAME, config_dir: Optional[Path] = None):
    self.config_dir = Path(config_dir) if config_dir else default_config_dir()
    self.config_file = self.config_dir / f"{config_name}.yaml"
    self._config: dict = {}
    self._load_config()

  def _load_config(self) -> None:
    """Load configuration from disk"""
    if not self.config_file.exists():
      self._config = {}
      return

    try:
      with open(self.config_file, "r", encoding="utf-8") as f:
        loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
      raise ConfigError.from_exception(
        e, context=f"Failed to load config from {self.config_file}"
      ) from e

    if loaded is None:
      loaded = {}
    if not isinstance(loaded, dict):
      raise ConfigError(
        f"Config file {self.config_file} must contain a mapping, got {type(loaded).__name__}"
      )
    self._config = loaded
    logger.debug(f"Loaded config from {self.config_file}")

  def load(self) -> dict:
    """Load configuration from storage"""
    self._load_config()
    return self._config.copy()

  def save(self, config: dict) -> None:
    """Save configuration to storage"""
    self._config = config.copy()
    try:
      self.config_dir.mkdir(parents=True, exist_ok=True)
      with open(self.config_file, "w", encoding="utf-8") as f:
        yaml.safe_dump(self._config, f, default_flow_style=False)
    except OSError as e:
      raise ConfigError.from_exception(
        e, context=f"Failed to save config to {self.config_file}"
      ) from e
    logger.debug(f"Saved config to {self.config_file}")

  def get(self, key: str, default: Any = None) -> Any:
    """Get a configuration value by key"""
    return self._config.get(key, default)

  def set(self, key: str, value: Any) -> None:
    """Set a configuration value"""
    self._config[key] = value
    self.save(self._config)


def load_global_config(storage: Optional[ConfigStorage] = None) -> GlobalConfig:
  """
  Load the global step configuration

  Raises:
    ConfigError: If the stored values don't match the schema
  """
  storage = storage or ConfigStorage()
  try:
    return GlobalConfig(**storage.load())
  except ValidationError as e:
    raise ConfigError.from_exception(e, context="Invalid global configuration") from e


def save_global_config(config: GlobalConfig, storage: Optional[ConfigStorage] = None) -> None:
  storage = storage or ConfigStorage()
  storage.save(config.model_dump())
  logger.info(f"Global configuration saved to {storage.config_file}")


def _as_bool(value: Any) -> bool:
  """Coerce a submitted form value the way a checkbox is read"""
  match value:
    case bool():
      return value
    case str():
      return value.strip().lower() in ("true", "on", "1", "yes")
    case None:
      return False
    case _:
      return bool(value)


def configure(form_data: dict, storage: Optional[ConfigStorage] = None) -> GlobalConfig:
  """
  Apply a submitted global configuration form and persist it

  Args:
    form_data: Submitted form values, e.g. {"useFrench": True}
    storage: Where to persist; defaults to the user config directory

  Returns:
    The saved GlobalConfig
  """
  config = GlobalConfig(use_french=_as_bool(form_data.get("useFrench")))
  save_global_config(config, storage)
  return config
