"""Parser for the changelog file written by the SCM step of a build.

The changelog uses git's raw log format: a `committer Name <email> ...` header
per commit, followed by the commit message indented with four spaces, then the
raw file-change lines.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from .config import COMMIT_SEPARATOR
from .exceptions import MalformedSequence, SourceNotFound, SourceReadFailure

logger = logging.getLogger(__name__)

MESSAGE_INDENT = "    "


@dataclass(frozen=True)
class CommitRecord:
  """One commit's message text and its committer's display name."""

  message: str
  committer: str

  def format(self) -> str:
    return f"{self.message} - {self.committer}"


class ChangelogParser:
  """
  Scan changelog lines into commit records, one per committer line.

  Message lines of a commit are concatenated without a separator. Lines that
  are neither committer lines nor indented message lines are ignored.

  Args:
      strict: Raise MalformedSequence for a message line that appears before
          any committer line instead of ignoring it.
  """

  COMMITTER_RE = re.compile(r"committer (.*?) <")

  def __init__(self, strict: bool = False) -> None:
    self.strict = strict

  def parse(
    self,
    lines: Iterable[Optional[str]],
    printer: Optional[Callable[[str], None]] = None,
  ) -> list[CommitRecord]:
    """
    Parse changelog lines.

    Args:
        lines: Changelog content split at newlines. A None entry marks the
            end of input; anything after it is not read.
        printer: Optional callback receiving each committer name and each
            raw message line as they are matched

    Returns:
        Commit records in the order their committer lines appeared
    """
    records: list[CommitRecord] = []
    committer: Optional[str] = None
    buffer: Optional[list[str]] = None

    for line_no, line in enumerate(lines, start=1):
      if line is None:
        break

      match = self.COMMITTER_RE.search(line)
      if match:
        if buffer is not None:
          records.append(CommitRecord(message="".join(buffer), committer=committer))
        committer = match.group(1)
        buffer = []
        if printer:
          printer(committer)
      elif line.startswith(MESSAGE_INDENT):
        if buffer is None:
          if self.strict:
            raise MalformedSequence(
              f"Message line {line_no} appears before any committer line"
            )
          logger.debug(f"Ignoring message line {line_no} with no open commit")
          continue
        if printer:
          printer(line)
        buffer.append(line[len(MESSAGE_INDENT):])

    if buffer is not None:
      records.append(CommitRecord(message="".join(buffer), committer=committer))

    logger.debug(f"Parsed {len(records)} commit records")
    return records


def join_commits(records: Iterable[CommitRecord]) -> str:
  """Join records as 'message - committer' blocks separated by COMMIT_SEPARATOR"""
  return COMMIT_SEPARATOR.join(record.format() for record in records)


def read_changelog_lines(path: Path | str) -> list[str]:
  """
  Read a changelog file as UTF-8 lines without line terminators.

  Raises:
      SourceNotFound: If the path is missing or not a regular file
      SourceReadFailure: If reading or decoding fails
  """
  path = Path(path)

  if not path.is_file():
    raise SourceNotFound(f"Changelog file not found: {path}")

  try:
    with open(path, "r", encoding="utf-8", newline="") as f:
      return [line.rstrip("\r\n") for line in f]
  except (OSError, UnicodeDecodeError) as e:
    raise SourceReadFailure.from_exception(
      e, context=f"Failed to read changelog {path}"
    ) from e


def changelog_to_text(
  path: Path | str,
  strict: bool = False,
  printer: Optional[Callable[[str], None]] = None,
) -> str:
  """Read, parse and join a changelog file in one go"""
  lines = read_changelog_lines(path)
  records = ChangelogParser(strict=strict).parse(lines, printer=printer)
  return join_commits(records)
