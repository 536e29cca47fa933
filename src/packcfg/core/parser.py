"""
Package manifest parser.

Consumes lexer events in a single pass and builds the list of targets:

    [package]            defaults shared by every target
    file = "demo.mod"
      [package.sources]
      include = "src/**/*"

    [target]             one target per section, in declaration order
    name = "demo"
      [target.aliases]
      utils = "../utils/src"

Entry points:
    parse_manifest_stream(stream, source_name) -> list[Target]
    parse_manifest_string(text, source_name) -> list[Target]
    parse_manifest_file(path) -> list[Target]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from pathlib import Path
from typing import TextIO

from .config import DEFAULT_SOURCE_NAME, ParserConfig
from .errors import (
    DuplicateSectionError,
    InvalidKeyError,
    InvalidTargetNameError,
    ManifestError,
    ManifestFileError,
    ManifestSyntaxError,
    SectionOrderError,
    SectionScopeError,
    UnknownSectionError,
    make_manifest_error,
)
from .ir import Target, UnpackRule
from .lexer import Event, EventKind, Lexer
from .merge import close_target, is_valid_target_name, normalize_target_name

logger = logging.getLogger(__name__)


class ParserState(Enum):
    """Which top-level section the parser is in."""

    INITIAL = "initial"
    IN_PACKAGE = "package"
    IN_TARGET = "target"


class Section(Enum):
    """Section that key-value pairs are routed to."""

    NONE = ""
    PACKAGE = "package"
    TARGET = "target"
    SOURCES = "sources"
    RULES = "rules"
    ALIASES = "aliases"


SUBSECTIONS = ("sources", "rules", "aliases")
PACKAGE_SUBSECTIONS = tuple(f"package.{name}" for name in SUBSECTIONS)
TARGET_SUBSECTIONS = tuple(f"target.{name}" for name in SUBSECTIONS)

# Keys under [package] / [target]
SCALAR_KEYS = {
    "file": "file",
    "branch": "branch",
    "modName": "mod_name",
    "modMinGameVersion": "mod_min_game_version",
}
LIST_KEYS = {
    "flags": "flags",
    "source": "includes",
    "include": "includes",
    "exclude": "excludes",
    "filter": "filters",
}
TARGET_ONLY_KEYS = frozenset({"name", "description"})
LEGACY_KEYS = frozenset({"version", "url", "author"})

# Keys under [sources]
SOURCE_KEYS = {
    "include": "includes",
    "exclude": "excludes",
    "filter": "filters",
}


class ManifestParser:
    """
    State machine over manifest events.

    A parser instance owns its accumulator and is meant for a single
    parse() call. While in package context (or before any [target]) the
    accumulator collects package defaults; each [target] section opens a
    fresh Target that is merged with those defaults when it is closed.
    """

    def __init__(self, source_name: Path | str = DEFAULT_SOURCE_NAME):
        """
        Initialize parser.

        Args:
            source_name: Source name (for error reporting)
        """
        self.source_name = source_name
        self.state = ParserState.INITIAL
        self.section = Section.NONE
        self.seen_package = False
        self.seen_section = False
        self.defaults = Target()
        self.target = Target()
        self.targets: list[Target] = []

    def error(self, error_cls: type[ManifestError], message: str, event: Event) -> ManifestError:
        """Create a located error for event."""
        return make_manifest_error(error_cls, message, self.source_name, event.line, event.column)

    def parse(self, events: Iterable[Event]) -> list[Target]:
        """
        Consume events and return the targets in declaration order.

        Raises:
            ManifestError: On the first syntax or semantic violation
        """
        for event in events:
            if event.kind == EventKind.SECTION_START:
                self.start_section(event)
            elif event.kind == EventKind.KEY_VALUE:
                self.handle_key_value(event)
            elif event.kind == EventKind.ERROR:
                raise self.error(ManifestSyntaxError, event.message, event)
            else:
                break

        if self.state == ParserState.IN_TARGET:
            close_target(self.targets, self.target, self.defaults)

        logger.info("Parsed %d target(s) from %s", len(self.targets), self.source_name)
        return self.targets

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def start_section(self, event: Event) -> None:
        name = event.section.lower()

        if name == "package":
            if self.seen_package:
                raise self.error(DuplicateSectionError, "duplicate [package] section", event)
            if self.seen_section:
                raise self.error(
                    SectionOrderError,
                    "[package] section must be declared before other sections",
                    event,
                )
            self.seen_package = True
            self.state = ParserState.IN_PACKAGE
        elif name == "target":
            self.open_target()
        elif name in SUBSECTIONS:
            pass
        elif name in PACKAGE_SUBSECTIONS:
            if self.state == ParserState.IN_TARGET:
                raise self.error(
                    SectionScopeError, f"[{name}] must be declared within [package]", event
                )
        elif name in TARGET_SUBSECTIONS:
            if self.state != ParserState.IN_TARGET:
                raise self.error(
                    SectionScopeError, f"[{name}] must be declared within [target]", event
                )
        else:
            raise self.error(UnknownSectionError, f"invalid section [{event.section}]", event)

        self.seen_section = True
        # Subsections route by their last component
        self.section = Section(name.rsplit(".", maxsplit=1)[-1])
        logger.debug("Entered [%s] at %d:%d", name, event.line, event.column)

    def open_target(self) -> None:
        """Close the target in progress (or freeze the defaults) and start a new one."""
        if self.state == ParserState.IN_TARGET:
            close_target(self.targets, self.target, self.defaults)
        else:
            self.defaults = self.target.snapshot()
        self.target = Target()
        self.state = ParserState.IN_TARGET

    @property
    def context_name(self) -> str:
        """Name of the enclosing top-level section, for messages."""
        return "target" if self.state == ParserState.IN_TARGET else "package"

    # -------------------------------------------------------------------------
    # Key-value routing
    # -------------------------------------------------------------------------

    def handle_key_value(self, event: Event) -> None:
        if self.section in (Section.PACKAGE, Section.TARGET):
            self.set_field(event)
        elif self.section == Section.SOURCES:
            self.add_source(event)
        elif self.section == Section.RULES:
            self.add_rule(event.key, event.value)
        elif self.section == Section.ALIASES:
            self.target.aliases[event.key] = event.value
        else:
            logger.warning(
                "Ignoring key '%s' outside of any section at %s(%d:%d)",
                event.key,
                self.source_name,
                event.line,
                event.column,
            )

    def set_field(self, event: Event) -> None:
        """Route a key-value pair found directly under [package] or [target]."""
        key, value = event.key, event.value

        if key in TARGET_ONLY_KEYS:
            if self.section == Section.TARGET:
                self.set_target_only(event)
            else:
                logger.debug("Ignoring '%s' in [package]: not inherited", key)
        elif key in SCALAR_KEYS:
            setattr(self.target, SCALAR_KEYS[key], value)
        elif key in LIST_KEYS:
            getattr(self.target, LIST_KEYS[key]).append(value)
        elif key in LEGACY_KEYS:
            logger.debug("Ignoring legacy key '%s'", key)
        else:
            # Unknown keys are unpack rules
            self.add_rule(key, value)

    def set_target_only(self, event: Event) -> None:
        if event.key == "description":
            self.target.description = event.value
            return

        name = normalize_target_name(event.value)
        if not is_valid_target_name(name):
            raise self.error(InvalidTargetNameError, f"invalid target name '{name}'", event)
        self.target.name = name

    def add_source(self, event: Event) -> None:
        if event.key not in SOURCE_KEYS:
            raise self.error(
                InvalidKeyError,
                f"invalid key '{event.key}' for section [{self.context_name}.sources]",
                event,
            )
        getattr(self.target, SOURCE_KEYS[event.key]).append(event.value)

    def add_rule(self, pattern: str, dest: str) -> None:
        self.target.rules.append(UnpackRule(pattern, dest))


def parse_manifest_stream(stream: TextIO, source_name: Path | str) -> list[Target]:
    """
    Parse a manifest from a text stream.

    Args:
        stream: Readable text stream
        source_name: Name used in error locations

    Returns:
        Targets in declaration order

    Raises:
        ManifestError: On the first syntax or semantic violation
    """
    lexer = Lexer(stream, source_name)
    return ManifestParser(source_name).parse(lexer.events())


def parse_manifest_string(text: str, source_name: Path | str | None = None) -> list[Target]:
    """Parse a manifest held in a string.

    Without a source_name, PACKCFG_SOURCE_NAME (default "[stream]") is used.
    """
    if source_name is None:
        source_name = ParserConfig.from_env().source_name
    lexer = Lexer(text, source_name)
    return ManifestParser(source_name).parse(lexer.events())


def parse_manifest_file(path: Path | str, config: ParserConfig | None = None) -> list[Target]:
    """
    Parse a manifest file.

    Args:
        path: Path to the manifest
        config: Parser settings (defaults to ParserConfig.from_env())

    Returns:
        Targets in declaration order

    Raises:
        ManifestFileError: If the file cannot be opened or decoded
        ManifestError: On the first syntax or semantic violation
    """
    config = config or ParserConfig.from_env()
    path = Path(path)
    try:
        with path.open(encoding=config.encoding) as stream:
            return parse_manifest_stream(stream, path)
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestFileError(f"Could not load package file {path}") from e
