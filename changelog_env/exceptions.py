"""
Custom exceptions for changelog-env
"""

from typing import Literal, Optional, cast
from pydantic import BaseModel, Field


# All possible error sources in the application
ErrorSource = Literal[
  "source",  # Changelog file lookup and reading
  "parse",  # Changelog line scanning
  "config",  # Global configuration load/save
  "validation",  # Form field checks
  "step",  # Build step execution
  "git",  # Repository access when producing a changelog
  "unknown",  # Uncategorized errors
]


def get_exit_code(source: ErrorSource) -> int:
  """Determine CLI exit status based on error source"""
  if source in ["validation", "config"]:
    return 2  # Usage / configuration problem
  return 1


class ErrorReport(BaseModel):
  """Standardized error report model"""

  description: str = Field(..., description="Human-readable error message")
  name: str = Field(..., description="Unique error identifier")
  source: ErrorSource = Field(..., description="Where the error originated")
  caused_by: Optional[str] = Field(
    None, description="Original error details if this is a chained error"
  )


class ChangelogEnvError(Exception):
  """
  Base exception for changelog-env errors.
  Errors crossing a module boundary are converted to this format.
  """

  default_name: str = "CHANGELOG_ENV_ERROR"
  default_source: ErrorSource = "unknown"

  def __init__(
    self,
    description: str,
    name: Optional[str] = None,
    source: Optional[ErrorSource] = None,
    caused_by: Optional[str] = None,
  ):
    """
    Initialize an error

    Args:
        description: Human-readable error message
        name: Unique error identifier (e.g., "SOURCE_NOT_FOUND")
        source: Where the error originated from
        caused_by: Original error details if this wraps another error
    """
    self.description: str = description
    self.name: str = name or self.default_name
    self.source: ErrorSource = source or self.default_source
    self.caused_by: Optional[str] = caused_by
    super().__init__(description)

  def to_report(self) -> ErrorReport:
    """Convert to ErrorReport model for build results"""
    return ErrorReport(
      description=self.description,
      name=self.name,
      source=cast(ErrorSource, self.source),
      caused_by=self.caused_by,
    )

  @classmethod
  def from_exception(
    cls,
    e: Exception,
    name: Optional[str] = None,
    source: Optional[ErrorSource] = None,
    context: Optional[str] = None,
  ) -> "ChangelogEnvError":
    """
    Create an error from an existing exception

    Args:
        e: The original exception
        name: Error identifier for this error
        source: Where this error originated
        context: Additional context to prepend to the description

    Returns:
        Error with original exception details preserved
    """
    original_msg = str(e)
    description = f"{context}: {original_msg}" if context else original_msg

    return cls(
      description=description,
      name=name,
      source=source,
      caused_by=f"{e.__class__.__name__}: {original_msg}",
    )


class SourceNotFound(ChangelogEnvError):
  """The changelog path does not resolve to a readable file"""

  default_name = "SOURCE_NOT_FOUND"
  default_source = "source"


class SourceReadFailure(ChangelogEnvError):
  """An I/O or decoding failure occurred while reading the changelog"""

  default_name = "SOURCE_READ_FAILURE"
  default_source = "source"


class MalformedSequence(ChangelogEnvError):
  """A message line appeared before any committer line"""

  default_name = "MALFORMED_SEQUENCE"
  default_source = "parse"


class ConfigError(ChangelogEnvError):
  default_name = "CONFIG_ERROR"
  default_source = "config"
