"""Label based selection of pull requests.

The passes run in a fixed order: exclude, then include. An empty label
set disables its pass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from release_drafter.core.models import PullRequest


def exclude_by_labels(
    pull_requests: Iterable[PullRequest],
    exclude_labels: frozenset[str],
) -> list[PullRequest]:
    """Drop pull requests carrying any excluded label."""
    if not exclude_labels:
        return list(pull_requests)
    return [pr for pr in pull_requests if not (pr.labels & exclude_labels)]


def include_by_labels(
    pull_requests: Iterable[PullRequest],
    include_labels: frozenset[str],
) -> list[PullRequest]:
    """Keep only pull requests carrying at least one included label."""
    if not include_labels:
        return list(pull_requests)
    return [pr for pr in pull_requests if pr.labels & include_labels]


def exclude_forked_pull_requests(pull_requests: Iterable[PullRequest]) -> list[PullRequest]:
    """Drop pull requests opened from forks."""
    return [pr for pr in pull_requests if not pr.is_fork]


def filter_pull_requests(
    pull_requests: Iterable[PullRequest],
    include_labels: frozenset[str] = frozenset(),
    exclude_labels: frozenset[str] = frozenset(),
) -> list[PullRequest]:
    """Apply the exclude pass, then the include pass.

    A pull request carrying both an excluded and an included label is
    removed.
    """
    return include_by_labels(exclude_by_labels(pull_requests, exclude_labels), include_labels)
