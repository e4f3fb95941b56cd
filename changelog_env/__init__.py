"""changelog-env: expose a build's changelog to later steps as $CHANGELOG"""

from .build_step import BuildContext, BuildStep, StepRegistry, StepResult, registry, run_steps
from .changelog_parser import (
  ChangelogParser,
  CommitRecord,
  changelog_to_text,
  join_commits,
  read_changelog_lines,
)
from .changelog_step import ChangelogToEnvStep
from .config import GlobalConfig
from .env_action import EnvAction
from .exceptions import (
  ChangelogEnvError,
  ConfigError,
  MalformedSequence,
  SourceNotFound,
  SourceReadFailure,
)

__all__ = [
  "BuildContext",
  "BuildStep",
  "StepRegistry",
  "StepResult",
  "registry",
  "run_steps",
  "ChangelogParser",
  "CommitRecord",
  "changelog_to_text",
  "join_commits",
  "read_changelog_lines",
  "ChangelogToEnvStep",
  "GlobalConfig",
  "EnvAction",
  "ChangelogEnvError",
  "ConfigError",
  "MalformedSequence",
  "SourceNotFound",
  "SourceReadFailure",
]
