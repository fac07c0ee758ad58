"""Custom exceptions for terraconf."""

from typing import Any


class TerraconfError(Exception):
    """Base class for all terraconf errors."""


class FormatError(TerraconfError):
    """Raised when raw block text cannot be formatted.

    The unformatted text is kept so callers can still emit something and
    report the fault instead of losing the resource.

    Attributes:
        raw_text: The block text handed to the formatter
        reason: Human-readable description of the failure
        line: 1-based line number where the failure was detected (if known)
    """

    def __init__(self, raw_text: str, reason: str, line: int | None = None):
        """Initialize FormatError.

        Args:
            raw_text: The block text handed to the formatter
            reason: Human-readable description of the failure
            line: 1-based line number where the failure was detected
        """
        self.raw_text = raw_text
        self.reason = reason
        self.line = line
        location = f" (line {line})" if line is not None else ""
        super().__init__(f"Failed to format block{location}: {reason}")


class UnsupportedValueError(TerraconfError):
    """Raised in strict mode when a value is not a string, bool, int, list or map."""

    def __init__(self, name: str, value: Any):
        self.name = name
        self.value = value
        super().__init__(
            f"Unsupported value for attribute '{name}': "
            f"{type(value).__name__} {value!r}"
        )


class MalformedListError(TerraconfError):
    """Raised in strict mode when list elements do not share the first element's shape."""

    def __init__(self, name: str, index: int, expected: str):
        self.name = name
        self.index = index
        self.expected = expected
        super().__init__(
            f"List attribute '{name}' element {index} is not a {expected} "
            f"like the first element"
        )


class FlatmapError(TerraconfError, ValueError):
    """Raised when a flat attribute map does not follow the flatmap encoding."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"{message}: {key}")


class StateReadError(TerraconfError):
    """Raised when a state document cannot be read or validated.

    Attributes:
        path: Source of the document (file path or "<string>")
    """

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class UnsupportedStateVersionError(StateReadError):
    """Raised for state documents whose schema version is not 1, 2 or 3."""

    def __init__(self, path: str, version: Any):
        self.version = version
        super().__init__(path, f"Unsupported state version {version!r}")
