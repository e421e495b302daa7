"""Association of commits with the pull requests that introduced them.

A pull request can reach the target branch in three ways:

- merge commit: the commit message reads ``Merge pull request #N ...``
- squash merge: a single commit whose subject usually ends in ``(#N)``
- rebase merge: the PR's commits are replayed with no marker at all

GitHub reports the associated pull requests of every commit, which covers
squash and rebase merges. Merge commits are recognised by their message
first because their association list can also contain unrelated PRs
whose head branch was merged in.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from release_drafter.core.models import Commit, CommitPage, PullRequest

logger = logging.getLogger(__name__)

MERGE_COMMIT_PATTERN = re.compile(r"^Merge pull request #(\d+)", re.IGNORECASE)
SQUASH_SUFFIX_PATTERN = re.compile(r"\(#(\d+)\)\s*$")


class AssociationKind(StrEnum):
    MERGE_COMMIT = "merge_commit"
    ASSOCIATED = "associated"
    DIRECT = "direct"


@dataclass(frozen=True)
class CommitAssociation:
    """Result of classifying one commit.

    Attributes:
        kind: How the commit relates to pull requests
        numbers: PR numbers named by the commit message, if any
        pull_requests: Merged PRs the commit is attributed to
    """

    kind: AssociationKind
    numbers: tuple[int, ...] = ()
    pull_requests: tuple[PullRequest, ...] = ()


@dataclass(frozen=True)
class AssociatedChanges:
    """Commits of a release window and the pull requests they belong to."""

    commits: tuple[Commit, ...]
    pull_requests: tuple[PullRequest, ...]
    direct_commits: tuple[Commit, ...]


def _merged(pull_requests: Iterable[PullRequest]) -> tuple[PullRequest, ...]:
    return tuple(pr for pr in pull_requests if pr.merged_at is not None)


def classify_commit(commit: Commit) -> CommitAssociation:
    """Classify a commit by the way its pull request was merged."""
    reported = _merged(commit.associated_pull_requests)

    merge_match = MERGE_COMMIT_PATTERN.match(commit.subject)
    if merge_match:
        number = int(merge_match.group(1))
        named = tuple(pr for pr in reported if pr.number == number)
        return CommitAssociation(
            kind=AssociationKind.MERGE_COMMIT,
            numbers=(number,),
            pull_requests=named or reported,
        )

    if reported:
        squash_match = SQUASH_SUFFIX_PATTERN.search(commit.subject)
        numbers = (int(squash_match.group(1)),) if squash_match else ()
        return CommitAssociation(
            kind=AssociationKind.ASSOCIATED,
            numbers=numbers,
            pull_requests=reported,
        )

    return CommitAssociation(kind=AssociationKind.DIRECT)


def assemble_commit_pages(
    pages: Iterable[CommitPage],
    since: datetime | None = None,
) -> list[Commit]:
    """Concatenate commit pages in server order.

    Iteration stops after the first page whose oldest commit is at or
    before ``since``, so lazily fetched pages beyond the release boundary
    are never requested. Commits at or before ``since`` are dropped; a
    commit sharing the previous release's timestamp belongs to that
    release.

    Args:
        pages: Commit pages, newest first
        since: Creation time of the last release, if any

    Returns:
        Commits newer than ``since``, in server order
    """
    commits: list[Commit] = []
    for page in pages:
        if since is None:
            commits.extend(page.commits)
            continue

        commits.extend(c for c in page.commits if c.committed_at > since)
        if page.commits and min(c.committed_at for c in page.commits) <= since:
            logger.debug("Reached release boundary %s, stopping pagination", since.isoformat())
            break
    return commits


def associate_commits(commits: Iterable[Commit]) -> AssociatedChanges:
    """Attribute commits to pull requests.

    Returns:
        The commits, the order-preserving set of merged PRs (unique by
        number, first occurrence wins) and the commits without a PR
    """
    all_commits: list[Commit] = []
    direct: list[Commit] = []
    pull_requests: dict[int, PullRequest] = {}

    for commit in commits:
        all_commits.append(commit)
        association = classify_commit(commit)

        if not association.pull_requests:
            if association.kind is AssociationKind.MERGE_COMMIT:
                logger.debug(
                    "Merge commit %s names PR #%d but it was not reported as merged",
                    commit.short_sha,
                    association.numbers[0],
                )
            direct.append(commit)
            continue

        for pr in association.pull_requests:
            pull_requests.setdefault(pr.number, pr)

    logger.debug(
        "Associated %d commit(s) with %d pull request(s), %d direct commit(s)",
        len(all_commits),
        len(pull_requests),
        len(direct),
    )
    return AssociatedChanges(
        commits=tuple(all_commits),
        pull_requests=tuple(pull_requests.values()),
        direct_commits=tuple(direct),
    )
