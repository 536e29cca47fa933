"""
Default inheritance for targets.

When a target is closed it is merged with the package defaults:

- aliases are merged by key, target keys win
- every field in INHERITED_FIELDS that the target left empty is replaced
  in whole by the defaults value
- name, description and aliases are never copied wholesale
"""

from __future__ import annotations

import copy
import logging
import string
from collections.abc import Iterable

from .errors import TargetNotFoundError, UnnamedTargetError
from .ir import Target

logger = logging.getLogger(__name__)

RESERVED_TARGET_NAME = "all"

VALID_TARGET_CHARS = frozenset(string.ascii_lowercase + string.digits + "_-")

# Never copied wholesale from the package defaults
EXEMPT_FIELDS: frozenset[str] = frozenset({"name", "description", "aliases"})

# Every other Target field, in declaration order (which is also merge order)
INHERITED_FIELDS: tuple[str, ...] = tuple(
    name for name in Target.model_fields if name not in EXEMPT_FIELDS
)


def normalize_target_name(raw: str) -> str:
    """Lowercase the ASCII letters of a target name as written in the manifest.

    Non-ASCII characters are left alone so that they fail validation instead
    of case-folding into the allowed charset.
    """
    return "".join(ch.lower() if ch.isascii() else ch for ch in raw)


def is_valid_target_name(name: str) -> bool:
    """Check a normalized target name against the allowed charset and reserved word.

    An empty name passes here; it is reported as unnamed when the target closes.
    """
    if name == RESERVED_TARGET_NAME:
        return False
    return all(ch in VALID_TARGET_CHARS for ch in name)


def merge_aliases(target: Target, defaults: Target) -> None:
    """Copy each default alias whose key the target does not define."""
    for key, value in defaults.aliases.items():
        if key not in target.aliases:
            target.aliases[key] = value


def inherit_fields(target: Target, defaults: Target) -> None:
    """Replace each empty inheritable field on target with a copy of the default."""
    for field_name in INHERITED_FIELDS:
        if not getattr(target, field_name):
            setattr(target, field_name, copy.deepcopy(getattr(defaults, field_name)))


def close_target(targets: list[Target], target: Target, defaults: Target) -> None:
    """
    Validate target, merge it with defaults and append it to targets.

    Args:
        targets: Targets closed so far, in declaration order
        target: The target being closed
        defaults: Snapshot of the package-level accumulator

    Raises:
        UnnamedTargetError: If the target has no name
    """
    if not target.name:
        raise UnnamedTargetError(f"target {len(targets) + 1} is unnamed")

    merge_aliases(target, defaults)
    inherit_fields(target, defaults)
    targets.append(target)
    logger.debug(
        "Closed target %r (%d rules, %d aliases)",
        target.name,
        len(target.rules),
        len(target.aliases),
    )


def select_targets(targets: list[Target], names: Iterable[str] = ()) -> list[Target]:
    """
    Resolve target names to targets.

    Args:
        targets: Parsed targets
        names: Requested names. Empty selects the first target; "all"
            selects every target.

    Returns:
        Matching targets, in the order requested, without duplicates

    Raises:
        TargetNotFoundError: If a requested name is not defined
    """
    wanted = [normalize_target_name(name) for name in names]
    if not wanted:
        return targets[:1]
    if RESERVED_TARGET_NAME in wanted:
        return list(targets)

    by_name: dict[str, Target] = {}
    for target in targets:
        # First declaration wins when names repeat
        by_name.setdefault(target.name, target)

    selected: list[Target] = []
    seen: set[str] = set()
    for name in wanted:
        if name not in by_name:
            raise TargetNotFoundError(f"unknown target '{name}'")
        if name not in seen:
            seen.add(name)
            selected.append(by_name[name])
    return selected
