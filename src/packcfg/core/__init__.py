"""Core packcfg functionality: event source, target model, merge engine, parser."""

from . import ir
from .config import ParserConfig, configure_logging
from .errors import (
    DuplicateSectionError,
    ErrorContext,
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
from .ir import Target, UnpackRule
from .lexer import Event, EventKind, Lexer, tokenize
from .merge import select_targets
from .parser import (
    ManifestParser,
    parse_manifest_file,
    parse_manifest_stream,
    parse_manifest_string,
)

__all__ = [
    "ir",
    "Target",
    "UnpackRule",
    "Event",
    "EventKind",
    "Lexer",
    "tokenize",
    "ManifestParser",
    "parse_manifest_stream",
    "parse_manifest_string",
    "parse_manifest_file",
    "select_targets",
    "ParserConfig",
    "configure_logging",
    "ErrorContext",
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
