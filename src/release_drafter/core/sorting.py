"""Ordering of pull requests."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from release_drafter.core.models import PullRequest

SortBy = Literal["merged_at", "title"]
SortDirection = Literal["descending", "ascending"]

_EPOCH = datetime.min.replace(tzinfo=UTC)


def _merged_at(pr: PullRequest) -> datetime:
    return pr.merged_at or _EPOCH


def _title(pr: PullRequest) -> str:
    return pr.title


SORT_KEYS: dict[str, Callable[[PullRequest], object]] = {
    "merged_at": _merged_at,
    "title": _title,
}


def sort_pull_requests(
    pull_requests: Iterable[PullRequest],
    sort_by: SortBy = "merged_at",
    sort_direction: SortDirection = "descending",
) -> list[PullRequest]:
    """Sort pull requests by merge time or title.

    Pull requests with equal keys are ordered by ascending number in both
    directions.

    Raises:
        ValueError: If ``sort_by`` or ``sort_direction`` is unknown
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_by!r}")
    if sort_direction not in ("descending", "ascending"):
        raise ValueError(f"Unknown sort direction: {sort_direction!r}")

    by_number = sorted(pull_requests, key=lambda pr: pr.number)
    # sorted() is stable with reverse=True, so the number order survives ties
    return sorted(
        by_number,
        key=SORT_KEYS[sort_by],  # type: ignore[arg-type]
        reverse=sort_direction == "descending",
    )
