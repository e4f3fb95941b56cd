"""Produce a build changelog from a git repository using GitPython.

Writes the same raw log format the SCM checkout of a build leaves in
changelog.xml, so the changelog step can run outside a build host.
"""

import logging
from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from .exceptions import ChangelogEnvError

logger = logging.getLogger(__name__)

# Raw commit header followed by the message body indented by four spaces
RAW_LOG_FORMAT = (
  "commit %H%n"
  "tree %T%n"
  "parent %P%n"
  "author %aN <%aE> %ai%n"
  "committer %cN <%cE> %ci%n"
  "%n"
  "%w(0,4,4)%B"
)


def generate_changelog(repo_path: Path | str = ".", rev_range: str = "HEAD") -> str:
  """Return the raw changelog text for `rev_range` (e.g. "v1.0..HEAD")

  Raises:
      ChangelogEnvError: If the path isn't a git repository or git fails
  """
  try:
    repo = Repo(repo_path)
    return repo.git.log(
      rev_range, "--raw", "--no-abbrev", "-M", f"--format={RAW_LOG_FORMAT}"
    )
  except (InvalidGitRepositoryError, NoSuchPathError) as e:
    raise ChangelogEnvError.from_exception(
      e, name="NOT_A_GIT_REPOSITORY", source="git",
      context=f"Not a git repository: {repo_path}",
    ) from e
  except GitCommandError as e:
    raise ChangelogEnvError.from_exception(
      e, name="GIT_LOG_FAILED", source="git",
      context=f"git log {rev_range} failed",
    ) from e


def write_changelog_from_repo(
  repo_path: Path | str, target: Path | str, rev_range: str = "HEAD"
) -> Path:
  """Write the changelog for `rev_range` to `target`

  Args:
      repo_path: Path to the git repository
      target: File to write, usually <build_dir>/changelog.xml
      rev_range: Revisions included in the build

  Returns:
      The written path
  """
  target = Path(target)
  text = generate_changelog(repo_path, rev_range)
  target.parent.mkdir(parents=True, exist_ok=True)
  target.write_text(text + "\n" if text else "", encoding="utf-8")
  logger.info(f"Wrote changelog for {rev_range} to {target}")
  return target
