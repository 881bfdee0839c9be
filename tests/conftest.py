"""Shared fixtures for specatlas tests."""

from pathlib import Path

import pytest

from tests.spec_helpers import make_spec, write_spec


@pytest.fixture
def chain_graph():
    """A <- B <- C (C depends on B, B depends on A)."""
    from tests.spec_helpers import graph_from

    return graph_from({"A": [], "B": ["A"], "C": ["B"]})


@pytest.fixture
def corpus():
    """Small corpus covering statuses, tags, priorities and dates."""
    return [
        make_spec(
            "001-user-auth",
            title="Authentication Module",
            status="complete",
            priority="high",
            tags=["security", "api"],
            created="2025-01-10",
            content="Users log in with a password.\nSessions expire after an hour.",
        ),
        make_spec(
            "002-search-index",
            title="Search Index",
            status="in-progress",
            priority="medium",
            tags=["search"],
            created="2025-06-15",
            depends_on=["001-user-auth"],
            content="Build an inverted index for full text search.",
        ),
        make_spec(
            "003-alpha-release",
            title="Beta program",
            status="planned",
            tags=["release"],
            created="2025-07-01",
            depends_on=["002"],
            content="Ship to early users.",
        ),
        make_spec(
            "004-alpha-docs",
            title="Documentation",
            status="planned",
            priority="low",
            tags=["docs"],
            content="Write guides.",
        ),
    ]


@pytest.fixture
def specs_dir(tmp_path: Path) -> Path:
    """A specs directory with two specs, one sub-spec and one broken file."""
    root = tmp_path / "specs"
    root.mkdir()
    write_spec(
        root,
        "001-user-auth",
        "status: complete\npriority: high\ntags: [security, api]\ncreated: 2025-01-10",
        "# Authentication Module\n\nUsers log in.\n",
    )
    write_spec(
        root / "001-user-auth",
        "002-login-form",
        "status: in-progress\ndepends_on: [001-user-auth]",
        "# Login Form\n",
    )
    write_spec(
        root,
        "003-search",
        "status: planned\ndepends_on:\n  - \"002\"\n  - 999-missing",
        "# Search\n\nFull text search.\n",
    )
    write_spec(root, "004-broken", "status: [unclosed", "# Broken\n")
    (root / "notes").mkdir()
    (root / "notes" / "README.md").write_text("# Not a spec\n", encoding="utf-8")
    return root
