"""
Target model for parsed package manifests.

A Target is one named packaging configuration. The parser fills a Target
while it reads a [target] section and then merges it with the package
defaults.
"""

from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class UnpackRule(NamedTuple):
    """Maps files matching a pattern to a destination directory."""

    pattern: str
    dest: str


class Target(BaseModel):
    """
    A named packaging configuration.

    Attributes:
        name: Lowercase target name ([a-z0-9_-]+, never "all")
        description: Human-readable description (not inherited)
        file: Output file name
        branch: Source control branch to build from
        mod_name: Module name written into the output
        mod_min_game_version: Minimum game version for the module
        includes: Glob patterns of files to include, in declaration order
        excludes: Glob patterns of files to exclude
        filters: Glob patterns of files to leave out of the output
        flags: Extra compiler flags
        rules: Unpack rules, in declaration order
        aliases: Alias name to path
    """

    name: str = ""
    description: str = ""
    file: str = ""
    branch: str = ""
    mod_name: str = Field(default="", serialization_alias="modName")
    mod_min_game_version: str = Field(default="", serialization_alias="modMinGameVersion")
    includes: list[str] = Field(default_factory=list)
    excludes: list[str] = Field(default_factory=list)
    filters: list[str] = Field(default_factory=list)
    flags: list[str] = Field(default_factory=list)
    rules: list[UnpackRule] = Field(default_factory=list)
    aliases: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    def snapshot(self) -> Target:
        """Return an independent deep copy of this target."""
        return self.model_copy(deep=True)
