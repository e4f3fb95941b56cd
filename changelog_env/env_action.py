"""
Environment propagation for build steps
Variables added by a step are merged into the build environment and can be
written to a dotenv file for processes started later in the build
"""

import logging
from pathlib import Path

from dotenv import dotenv_values, set_key

logger = logging.getLogger(__name__)


class EnvAction:
  """Build action contributing environment variables to later steps"""

  def __init__(self):
    self._data: dict[str, str] = {}

  def add(self, key: str, value: str) -> None:
    self._data[key] = value

  @property
  def data(self) -> dict[str, str]:
    return dict(self._data)

  def build_env_vars(self, env: dict[str, str]) -> None:
    """Merge this action's variables into the build environment"""
    env.update(self._data)


def write_env_file(path: Path | str, values: dict[str, str]) -> Path:
  """
  Write variables to a dotenv file, keeping unrelated entries

  Args:
    path: Target dotenv file, created if missing
    values: Variables to set

  Returns:
    The path written
  """
  path = Path(path)
  path.parent.mkdir(parents=True, exist_ok=True)
  path.touch(exist_ok=True)

  for key, value in values.items():
    set_key(path, key, value, quote_mode="always")
    logger.debug(f"Wrote {key} to {path}")

  return path


def read_env_file(path: Path | str) -> dict[str, str]:
  """Load variables from a dotenv file"""
  return {k: v for k, v in dotenv_values(path).items() if v is not None}
