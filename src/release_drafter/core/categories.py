"""Partitioning of pull requests into titled sections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from release_drafter.config.models import CategoryConfig
    from release_drafter.core.models import PullRequest


@dataclass(frozen=True)
class CategorySection:
    title: str
    labels: frozenset[str]
    pull_requests: tuple[PullRequest, ...]


@dataclass(frozen=True)
class CategorizedPullRequests:
    """Pull requests split into sections.

    Attributes:
        uncategorized: PRs matching no category, in input order
        sections: One entry per configured category, in declaration
            order; a PR appears in every section whose labels it carries
    """

    uncategorized: tuple[PullRequest, ...]
    sections: tuple[CategorySection, ...]

    @property
    def is_empty(self) -> bool:
        return not self.uncategorized and not any(s.pull_requests for s in self.sections)


def categorize_pull_requests(
    pull_requests: Iterable[PullRequest],
    categories: Sequence[CategoryConfig],
) -> CategorizedPullRequests:
    """Place pull requests into every matching category.

    Categories with no labels never match. Input order is preserved in
    every section.
    """
    prs = tuple(pull_requests)
    all_category_labels = frozenset().union(*(c.label_set for c in categories))

    uncategorized = tuple(pr for pr in prs if not (pr.labels & all_category_labels))
    sections = tuple(
        CategorySection(
            title=category.title,
            labels=category.label_set,
            pull_requests=tuple(pr for pr in prs if pr.labels & category.label_set),
        )
        for category in categories
    )
    return CategorizedPullRequests(uncategorized=uncategorized, sections=sections)
