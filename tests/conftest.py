"""Shared fixtures for release-drafter tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from factories import make_pr, make_release

from release_drafter.config.models import ReleaseDrafterConfig

if TYPE_CHECKING:
    from pathlib import Path

    from release_drafter.core.models import PullRequest, Release


@pytest.fixture
def config() -> ReleaseDrafterConfig:
    """Default configuration."""
    return ReleaseDrafterConfig()


@pytest.fixture
def sample_pull_requests() -> list[PullRequest]:
    """Five merged pull requests, newest first."""
    return [
        make_pr(5, "Add documentation", labels=("documentation",), author="TimonVS"),
        make_pr(4, "Update dependencies", labels=("dependencies",), author="TimonVS"),
        make_pr(3, "Bug fixes", labels=("bug",), author="TimonVS"),
        make_pr(2, "Add big feature", labels=("feature",), author="TimonVS"),
        make_pr(1, "Add alien technology", labels=("feature",), author="TimonVS"),
    ]


@pytest.fixture
def last_release() -> Release:
    return make_release(1, "v2.0.0", created_minutes=-60)


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    """A project directory with a pyproject.toml holding tool config."""
    (tmp_path / "pyproject.toml").write_text(
        """\
[project]
name = "test-project"
version = "1.0.0"

[tool.release-drafter]
name-template = "v$RESOLVED_VERSION"
tag-template = "v$RESOLVED_VERSION"
references = ["main"]
"""
    )
    return tmp_path
