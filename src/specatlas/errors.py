"""
specatlas.errors - Exception types.

Data-level anomalies in the corpus (dangling dependencies, cycles, malformed
date filters) are reported as facts, not raised. The exceptions here cover
the conditions a caller has to handle explicitly.
"""

from __future__ import annotations

from pathlib import Path


class SpecAtlasError(Exception):
    """Base class for all specatlas errors."""


class SpecNotFoundError(SpecAtlasError, LookupError):
    """A requested spec id does not resolve in the corpus."""

    def __init__(self, spec_id: str) -> None:
        self.spec_id = spec_id
        super().__init__(f"Spec not found: {spec_id}")


class DuplicateSpecError(SpecAtlasError, ValueError):
    """Two records in one corpus snapshot share an id."""

    def __init__(self, spec_id: str) -> None:
        self.spec_id = spec_id
        super().__init__(f"Duplicate spec id in corpus: {spec_id}")


class QuerySyntaxError(SpecAtlasError, ValueError):
    """A search query is structurally invalid (e.g. unterminated quote)."""


class SpecLoadError(SpecAtlasError):
    """A spec file or directory could not be read or parsed."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class ConfigError(SpecAtlasError):
    """The configuration file is malformed."""
