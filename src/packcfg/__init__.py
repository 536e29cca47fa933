"""
packcfg - Package manifest parser.

Reads INI-like package manifests and resolves them into an ordered list of
build targets with package-level defaults applied.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# Re-export commonly used types for convenience
from .core import ir
from .core.errors import (
    DuplicateSectionError,
    InvalidKeyError,
    InvalidTargetNameError,
    ManifestError,
    ManifestFileError,
    ManifestSyntaxError,
    SectionOrderError,
    SectionScopeError,
    TargetNotFoundError,
    UnknownSectionError,
    UnnamedTargetError,
)
from .core.ir import Target, UnpackRule
from .core.merge import select_targets
from .core.parser import parse_manifest_file, parse_manifest_stream, parse_manifest_string

try:
    __version__ = version("packcfg")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "ir",
    "Target",
    "UnpackRule",
    "parse_manifest_stream",
    "parse_manifest_string",
    "parse_manifest_file",
    "select_targets",
    "ManifestError",
    "ManifestSyntaxError",
    "SectionOrderError",
    "DuplicateSectionError",
    "SectionScopeError",
    "UnknownSectionError",
    "InvalidKeyError",
    "UnnamedTargetError",
    "InvalidTargetNameError",
    "ManifestFileError",
    "TargetNotFoundError",
]
