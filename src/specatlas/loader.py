"""
specatlas.loader - Load spec records from a specs directory.

Layout::

    specs/
      001-user-auth/
        README.md
        002-login-form/      # sub-spec, parent defaults to 001-user-auth
          README.md
      003-search/
        README.md

A spec directory name starts with a digit and holds a README.md. The file
may begin with a YAML frontmatter block delimited by ``---`` lines.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from specatlas.errors import SpecLoadError
from specatlas.models import SpecPriority, SpecRecord, SpecStatus

logger = logging.getLogger(__name__)

SPEC_FILENAME = "README.md"
FRONTMATTER_DELIMITER = "---"


def load_specs(specs_dir: Path) -> list[SpecRecord]:
    """Load every spec under a specs directory.

    Files that fail to parse are logged and skipped.

    Args:
        specs_dir: Directory containing numbered spec directories

    Returns:
        Records ordered by spec number, then id

    Raises:
        SpecLoadError: If specs_dir does not exist or is not a directory.
    """
    specs_dir = Path(specs_dir)
    if not specs_dir.is_dir():
        raise SpecLoadError("Spec directory not found", path=specs_dir)

    records: list[SpecRecord] = []
    for spec_dir in _spec_directories(specs_dir):
        records.extend(_load_tree(spec_dir))

    records.sort(key=_record_order)
    logger.debug("Loaded %d specs from %s", len(records), specs_dir)
    return records


def parse_spec_file(path: Path, parent: str | None = None) -> SpecRecord:
    """Parse one README.md into a SpecRecord.

    The id is the name of the directory holding the file.

    Args:
        path: Path to the spec markdown file
        parent: Parent id used when the frontmatter names none

    Raises:
        SpecLoadError: If the file cannot be read, the frontmatter is not a
            YAML mapping, or status/priority hold unknown values.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SpecLoadError(f"Cannot read spec file: {e}", path=path) from e
    return parse_spec_text(text, spec_id=path.parent.name, path=path, parent=parent)


def parse_spec_text(
    text: str,
    spec_id: str,
    path: Path | None = None,
    parent: str | None = None,
) -> SpecRecord:
    """Build a SpecRecord from markdown text with optional frontmatter."""
    metadata, body = split_frontmatter(text, path)

    status = SpecStatus.PLANNED
    priority = None
    try:
        if metadata.get("status"):
            status = SpecStatus.parse(metadata["status"])
        if metadata.get("priority"):
            priority = SpecPriority.parse(metadata["priority"])
    except ValueError as e:
        raise SpecLoadError(str(e), path=path) from e

    return SpecRecord(
        id=spec_id,
        title=_extract_title(body) or spec_id,
        status=status,
        priority=priority,
        tags=_string_list(metadata.get("tags")),
        created=_parse_created(metadata.get("created")),
        depends_on=_string_list(metadata.get("depends_on")),
        parent=_optional_string(metadata.get("parent")) or parent,
        content=body,
        path=path,
    )


def split_frontmatter(text: str, path: Path | None = None) -> tuple[dict[str, Any], str]:
    """Split markdown text into (frontmatter mapping, body).

    Text without a leading ``---`` line has empty frontmatter.

    Raises:
        SpecLoadError: If the block is unterminated, is not valid YAML, or
            is not a mapping.
    """
    stripped = text.lstrip()
    lines = stripped.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return {}, text

    for i in range(1, len(lines)):
        if lines[i].strip() == FRONTMATTER_DELIMITER:
            block = "".join(lines[1:i])
            body = "".join(lines[i + 1 :]).lstrip("\n")
            break
    else:
        raise SpecLoadError("Unclosed frontmatter block", path=path)

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise SpecLoadError(f"Invalid frontmatter YAML: {e}", path=path) from e

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        raise SpecLoadError("Frontmatter must be a YAML mapping", path=path)
    return data, body


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _spec_directories(root: Path) -> list[Path]:
    return sorted(
        child
        for child in root.iterdir()
        if child.is_dir() and child.name[:1].isdigit() and (child / SPEC_FILENAME).is_file()
    )


def _load_tree(spec_dir: Path) -> list[SpecRecord]:
    records: list[SpecRecord] = []
    try:
        records.append(parse_spec_file(spec_dir / SPEC_FILENAME))
    except SpecLoadError as e:
        logger.warning("Skipping spec: %s", e)

    # Sub-specs still load when their parent README fails to parse
    for child in _spec_directories(spec_dir):
        try:
            records.append(parse_spec_file(child / SPEC_FILENAME, parent=spec_dir.name))
        except SpecLoadError as e:
            logger.warning("Skipping sub-spec: %s", e)
    return records


def _record_order(record: SpecRecord) -> tuple[bool, int, str]:
    number = record.number
    return (number is None, number if number is not None else 0, record.id)


def _extract_title(body: str) -> str | None:
    for line in body.splitlines():
        if line.startswith("# "):
            return line[2:].strip() or None
    return None


def _string_list(value: Any) -> tuple[str, ...]:
    """Normalize a scalar or list frontmatter value to a tuple of strings."""
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(item).strip() for item in value if item is not None and str(item).strip())
    text = str(value).strip()
    return (text,) if text else ()


def _optional_string(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_created(value: Any) -> date | None:
    """Accept a YAML date/datetime or an ISO string; anything else is None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            logger.debug("Unparseable created date %r", value)
            return None
    return None

