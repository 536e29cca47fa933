"""
Error types for package manifest parsing.

Every error is terminal: the parser stops at the first violation and no
partial target list is returned.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class ManifestError(Exception):
    """Base exception for all manifest errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with location if available."""
        if self.context:
            return f"Error parsing {self.context.format()}: {self.message}"
        return self.message


class ManifestSyntaxError(ManifestError):
    """
    Raised when the event source reports a malformed token stream.

    Examples:
    - Unterminated section header
    - Unterminated quoted value
    - Junk after a quoted value
    """

    pass


class SectionOrderError(ManifestError):
    """Raised when [package] is declared after another section."""

    pass


class DuplicateSectionError(ManifestError):
    """Raised when more than one [package] section is declared."""

    pass


class SectionScopeError(ManifestError):
    """
    Raised when a dotted subsection is used outside its parent.

    Examples:
    - [package.sources] after a [target] section
    - [target.rules] before any [target] section
    """

    pass


class UnknownSectionError(ManifestError):
    """Raised when a section name is not one of the accepted names."""

    pass


class InvalidKeyError(ManifestError):
    """Raised when a [sources] subsection contains an unrecognized key."""

    pass


class UnnamedTargetError(ManifestError):
    """Raised when a target is closed without a name."""

    pass


class InvalidTargetNameError(ManifestError):
    """Raised when a target name has invalid characters or is reserved."""

    pass


class ManifestFileError(ManifestError):
    """Raised when a manifest file cannot be opened or read."""

    pass


class TargetNotFoundError(ManifestError):
    """Raised when a requested target name is not defined in the manifest."""

    pass


@dataclass
class ErrorContext:
    """
    Source location of an error.

    Attributes:
        file: Source name (a path, or a label such as "[stream]")
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    file: Path | str
    line: int
    column: int

    def format(self) -> str:
        """
        Format the location as a human-readable string.

        Returns:
            Formatted string like: "package.cfg(10:5)"
        """
        return f"{self.file}({self.line}:{self.column})"


def make_manifest_error(
    error_cls: type[ManifestError],
    message: str,
    file: Path | str,
    line: int,
    column: int,
) -> ManifestError:
    """
    Helper to create a located manifest error.

    Args:
        error_cls: ManifestError subclass to instantiate
        message: Error description
        file: Source name
        line: Line number (1-indexed)
        column: Column number (1-indexed)

    Returns:
        Instance of error_cls with context attached
    """
    context = ErrorContext(file=file, line=line, column=column)
    return error_cls(message, context)
