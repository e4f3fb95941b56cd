"""Form field validation for the changelog step"""

from typing import Literal, Optional

from pydantic import BaseModel

ValidationKind = Literal["ok", "warning", "error"]


class FormValidation(BaseModel):
  """Outcome of checking a single form field"""

  kind: ValidationKind
  message: Optional[str] = None

  @classmethod
  def ok(cls) -> "FormValidation":
    return cls(kind="ok")

  @classmethod
  def warning(cls, message: str) -> "FormValidation":
    return cls(kind="warning", message=message)

  @classmethod
  def error(cls, message: str) -> "FormValidation":
    return cls(kind="error", message=message)

  @property
  def is_error(self) -> bool:
    return self.kind == "error"


def check_name(value: Optional[str]) -> FormValidation:
  """Check the 'name' field the user typed into the step configuration"""
  if not value:
    return FormValidation.error("Please set a name")
  if len(value) < 4:
    return FormValidation.warning("Isn't the name too short?")
  return FormValidation.ok()
