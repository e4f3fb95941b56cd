"""Build step interface and the registry the host discovers steps through"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from .exceptions import ErrorReport

logger = logging.getLogger(__name__)


@dataclass
class BuildContext:
  """State of one build as seen by its steps

  Attributes:
      build_dir: Directory of this build (holds changelog.xml)
      env: Environment visible to the next step
      actions: Actions contributed by steps so far
      log: Build console printer
  """

  build_dir: Path
  env: dict[str, str] = field(default_factory=dict)
  actions: list[Any] = field(default_factory=list)
  log: Callable[[str], None] = print

  @property
  def artifacts_dir(self) -> Path:
    return self.build_dir / "archive"

  def add_action(self, action: Any) -> None:
    self.actions.append(action)


@dataclass
class StepResult:
  success: bool
  message: str = ""
  error: Optional[ErrorReport] = None


class BuildStep(ABC):
  """Abstract base class for build steps"""

  display_name: str = ""

  def is_applicable(self, project_type: str) -> bool:
    """Whether this step can be added to the given kind of project"""
    return True

  @abstractmethod
  def execute(self, context: BuildContext) -> StepResult:
    """Run the step against a build

    Args:
      context: The build being performed

    Returns:
      Outcome of the step; a failed result stops the build
    """
    raise NotImplementedError


class StepRegistry:
  """Named build step classes available to the host"""

  def __init__(self):
    self._steps: dict[str, type[BuildStep]] = {}

  def register(self, name: str) -> Callable[[type[BuildStep]], type[BuildStep]]:
    """Class decorator registering a step under `name`"""

    def decorator(step_cls: type[BuildStep]) -> type[BuildStep]:
      if name in self._steps:
        raise ValueError(f"Build step '{name}' is already registered")
      self._steps[name] = step_cls
      logger.debug(f"Registered build step '{name}' ({step_cls.__name__})")
      return step_cls

    return decorator

  def get(self, name: str) -> type[BuildStep]:
    try:
      return self._steps[name]
    except KeyError:
      raise KeyError(f"Unknown build step '{name}'") from None

  def names(self) -> list[str]:
    return sorted(self._steps)

  def create(self, name: str, /, **kwargs) -> BuildStep:
    return self.get(name)(**kwargs)


registry = StepRegistry()


def run_steps(steps: list[BuildStep], context: BuildContext) -> list[StepResult]:
  """
  Run steps in order against one build.

  Environment contributed by a step's actions is applied to `context.env`
  before the next step runs. Stops after the first failed step.
  """
  results = []
  for step in steps:
    logger.info(f"Running build step: {step.display_name or type(step).__name__}")
    seen = len(context.actions)
    result = step.execute(context)
    results.append(result)

    for action in context.actions[seen:]:
      build_env_vars = getattr(action, "build_env_vars", None)
      if build_env_vars is not None:
        build_env_vars(context.env)

    if not result.success:
      logger.error(f"Build step failed: {result.message}")
      break

  return results
