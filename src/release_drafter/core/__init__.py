"""Core business logic for release-drafter.

This module contains the fundamental building blocks:
- Commit and pull request association across merge strategies
- Label filtering, categorization and sorting of pull requests
- Semantic version resolution
- Template rendering of the release body
- The create-or-update decision for the draft release
"""

from __future__ import annotations

from release_drafter.core.categories import CategorizedPullRequests, categorize_pull_requests
from release_drafter.core.changelog import (
    contributors_sentence,
    generate_changelog,
    generate_release_info,
    select_pull_requests,
)
from release_drafter.core.commits import (
    AssociatedChanges,
    AssociationKind,
    CommitAssociation,
    assemble_commit_pages,
    associate_commits,
    classify_commit,
)
from release_drafter.core.labels import filter_pull_requests
from release_drafter.core.models import (
    Commit,
    CommitPage,
    PullRequest,
    Release,
    ReleaseAction,
    ReleaseInfo,
    ReleaseOverrides,
)
from release_drafter.core.releases import ReleasePlan, find_releases, plan_release
from release_drafter.core.sorting import sort_pull_requests
from release_drafter.core.template import apply_replacers, render_template
from release_drafter.core.version import BumpType, Version, VersionInfo, resolve_version

__all__ = [
    # Association
    "AssociatedChanges",
    "AssociationKind",
    # Version
    "BumpType",
    "CategorizedPullRequests",
    # Models
    "Commit",
    "CommitAssociation",
    "CommitPage",
    "PullRequest",
    "Release",
    "ReleaseAction",
    "ReleaseInfo",
    "ReleaseOverrides",
    # Releases
    "ReleasePlan",
    "Version",
    "VersionInfo",
    # Rendering
    "apply_replacers",
    "assemble_commit_pages",
    "associate_commits",
    "categorize_pull_requests",
    "classify_commit",
    "contributors_sentence",
    "filter_pull_requests",
    "find_releases",
    "generate_changelog",
    "generate_release_info",
    "plan_release",
    "render_template",
    "resolve_version",
    "select_pull_requests",
    "sort_pull_requests",
]
