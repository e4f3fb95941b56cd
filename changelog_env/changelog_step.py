"""The "Changelog to ENV" build step.

Reads the build's changelog.xml, joins the commit messages with their
committers, and exposes the result to later steps as $CHANGELOG.
"""

import logging
from typing import Optional

from .build_step import BuildContext, BuildStep, StepResult, registry
from .changelog_parser import ChangelogParser, join_commits, read_changelog_lines
from .config import CHANGELOG_ENV_VAR, CHANGELOG_FILE_NAME, GlobalConfig
from .env_action import EnvAction
from .exceptions import ChangelogEnvError
from .validation import check_name

logger = logging.getLogger(__name__)

STEP_NAME = "changelog-to-env"


@registry.register(STEP_NAME)
class ChangelogToEnvStep(BuildStep):
  """Inject the build's changelog into the environment

  Args:
      name: Name greeted in the build log
      global_config: Host-owned global options; defaults to GlobalConfig()
      strict: Fail on message lines that precede any committer line
      fail_on_unavailable: Fail the step when the changelog can't be read
          instead of continuing without $CHANGELOG
  """

  display_name = "Changelog to ENV"

  def __init__(
    self,
    name: str,
    global_config: Optional[GlobalConfig] = None,
    strict: bool = False,
    fail_on_unavailable: bool = False,
  ):
    validation = check_name(name)
    if validation.kind != "ok":
      logger.warning(f"Step name '{name}': {validation.message}")
    self.name = name
    self.global_config = global_config or GlobalConfig()
    self.strict = strict
    self.fail_on_unavailable = fail_on_unavailable

  def greeting(self) -> str:
    if self.global_config.use_french:
      return f"Bonjour, {self.name}!"
    return f"Hello, {self.name}!"

  def execute(self, context: BuildContext) -> StepResult:
    changelog_path = context.artifacts_dir.parent / CHANGELOG_FILE_NAME
    logger.info(f"Reading changelog from {changelog_path}")

    try:
      lines = read_changelog_lines(changelog_path)
      records = ChangelogParser(strict=self.strict).parse(lines, printer=context.log)
    except ChangelogEnvError as e:
      logger.warning(f"[{e.source}] {e.name}: {e.description}")
      context.log(f"Changelog unavailable: {e.description}")
      context.log(self.greeting())
      if self.fail_on_unavailable:
        return StepResult(
          success=False, message="Changelog unavailable", error=e.to_report()
        )
      return StepResult(success=True, message="Changelog unavailable; CHANGELOG not set")

    changelog = join_commits(records)
    context.log("MSG:")
    context.log(changelog)

    env_action = EnvAction()
    env_action.add(CHANGELOG_ENV_VAR, changelog)
    context.add_action(env_action)

    context.log(self.greeting())
    return StepResult(
      success=True, message=f"Injected {len(records)} commits into {CHANGELOG_ENV_VAR}"
    )
