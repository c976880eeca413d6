"""Error taxonomy for the conversion engine.

All errors are raised synchronously and never recovered inside the engine.
A failing batch produces no output at all.
"""

from typing import Iterable, Optional


class PnameError(Exception):
    """Base class for every conversion engine error."""

    error_code = "pname_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidCasingStyle(PnameError, ValueError):
    """Raised when the requested casing style is not one of the known styles."""

    error_code = "invalid_casing_style"

    def __init__(self, value: object, allowed: Optional[Iterable[str]] = None):
        self.value = value
        self.allowed = list(allowed or [])
        message = f"Invalid casing style: {value!r}"
        if self.allowed:
            message += f" (expected one of {', '.join(self.allowed)})"
        super().__init__(message)


class MissingInput(PnameError, ValueError):
    """Raised when the logical-name field is absent (not merely empty)."""

    error_code = "missing_input"

    def __init__(self, field: str = "ln"):
        self.field = field
        super().__init__(f"Missing required field: {field}")


class DictionaryFormatError(PnameError):
    """Raised when dictionary data cannot be parsed."""

    error_code = "dictionary_format_error"
