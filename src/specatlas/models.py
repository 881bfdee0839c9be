"""
specatlas.models - Core data models for specs.

Provides the closed status/priority enums and the immutable SpecRecord that
every analysis consumes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path

_NUMBER_PREFIX = re.compile(r"^(\d+)")


class SpecStatus(Enum):
    """Lifecycle status of a spec."""

    PLANNED = "planned"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"
    ARCHIVED = "archived"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: str) -> SpecStatus:
        """Parse a status string, accepting common aliases.

        Raises:
            ValueError: If the value is not a known status.
        """
        key = str(raw).strip().lower()
        status = _STATUS_ALIASES.get(key)
        if status is None:
            raise ValueError(
                f"Invalid status: {raw}. Valid values: planned, in-progress, complete, archived"
            )
        return status

    @property
    def emoji(self) -> str:
        return _STATUS_EMOJI[self]


class SpecPriority(Enum):
    """Priority of a spec."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: str) -> SpecPriority:
        """Parse a priority string, accepting common aliases.

        Raises:
            ValueError: If the value is not a known priority.
        """
        key = str(raw).strip().lower()
        priority = _PRIORITY_ALIASES.get(key)
        if priority is None:
            raise ValueError(
                f"Invalid priority: {raw}. Valid values: low, medium, high, critical"
            )
        return priority


_STATUS_ALIASES = {
    "planned": SpecStatus.PLANNED,
    "in-progress": SpecStatus.IN_PROGRESS,
    "in_progress": SpecStatus.IN_PROGRESS,
    "inprogress": SpecStatus.IN_PROGRESS,
    "complete": SpecStatus.COMPLETE,
    "completed": SpecStatus.COMPLETE,
    "archived": SpecStatus.ARCHIVED,
}

_STATUS_EMOJI = {
    SpecStatus.PLANNED: "📅",
    SpecStatus.IN_PROGRESS: "⏳",
    SpecStatus.COMPLETE: "✅",
    SpecStatus.ARCHIVED: "📦",
}

_PRIORITY_ALIASES = {
    "low": SpecPriority.LOW,
    "medium": SpecPriority.MEDIUM,
    "med": SpecPriority.MEDIUM,
    "high": SpecPriority.HIGH,
    "critical": SpecPriority.CRITICAL,
    "urgent": SpecPriority.CRITICAL,
}


@dataclass(frozen=True)
class SpecRecord:
    """
    One spec in a corpus snapshot.

    Attributes:
        id: Unique normalized identifier (e.g., "001-feature-name")
        title: Title from the first markdown heading
        status: Lifecycle status
        priority: Optional priority
        tags: Tags as authored
        created: Creation date (None when missing or unparseable)
        depends_on: Raw dependency references as authored
        parent: Optional parent spec id
        content: Markdown body without frontmatter
        path: Source file, when loaded from disk
    """

    id: str
    title: str = ""
    status: SpecStatus = SpecStatus.PLANNED
    priority: SpecPriority | None = None
    tags: tuple[str, ...] = ()
    created: date | None = None
    depends_on: tuple[str, ...] = ()
    parent: str | None = None
    content: str = ""
    path: Path | None = field(default=None, compare=False)

    @property
    def number(self) -> int | None:
        """Numeric prefix of the id ("170-cli" -> 170), or None."""
        return parse_spec_number(self.id)

    @property
    def name(self) -> str:
        """The id without its numeric prefix."""
        head, sep, rest = self.id.partition("-")
        if sep and head.isdigit():
            return rest
        return self.id


def parse_spec_number(value: str) -> int | None:
    """Return the leading integer of a spec id or reference, if any."""
    match = _NUMBER_PREFIX.match(value.strip())
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        return None


def parse_reference_number(value: str) -> int | None:
    """Return the number a bare-digit reference ("7", "007") names, or None.

    Only ASCII digits count; "²" or "12a" are not numeric references.
    """
    value = value.strip()
    if not (value.isascii() and value.isdigit()):
        return None
    try:
        return int(value)
    except ValueError:
        # Longer than the interpreter's int conversion limit
        return None
