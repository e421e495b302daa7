"""Tests for pull request ordering."""

from __future__ import annotations

import pytest
from factories import at, make_pr

from release_drafter.core.models import PullRequest
from release_drafter.core.sorting import sort_pull_requests


class TestSortPullRequests:
    """Tests for sort_pull_requests()."""

    def test_default_is_merged_at_descending(self):
        """Most recently merged pull requests come first by default."""
        prs = [
            make_pr(1, merged_at=at(10)),
            make_pr(2, merged_at=at(30)),
            make_pr(3, merged_at=at(20)),
        ]

        assert [pr.number for pr in sort_pull_requests(prs)] == [2, 3, 1]

    def test_merged_at_ascending(self):
        prs = [
            make_pr(1, merged_at=at(10)),
            make_pr(2, merged_at=at(30)),
            make_pr(3, merged_at=at(20)),
        ]
        result = sort_pull_requests(prs, sort_direction="ascending")

        assert [pr.number for pr in result] == [1, 3, 2]

    def test_title_ascending_is_reverse_of_descending(self):
        """With distinct titles the two directions are exact reverses."""
        prs = [make_pr(1, "Charlie"), make_pr(2, "alpha"), make_pr(3, "Bravo")]
        ascending = sort_pull_requests(prs, sort_by="title", sort_direction="ascending")
        descending = sort_pull_requests(prs, sort_by="title", sort_direction="descending")

        assert [pr.title for pr in ascending] == ["Bravo", "Charlie", "alpha"]
        assert descending == list(reversed(ascending))

    def test_ties_are_ordered_by_number(self):
        """Equal keys keep ascending number order in both directions."""
        prs = [make_pr(7, "Same"), make_pr(3, "Same"), make_pr(5, "Other")]

        ascending = sort_pull_requests(prs, sort_by="title", sort_direction="ascending")
        descending = sort_pull_requests(prs, sort_by="title", sort_direction="descending")

        assert [pr.number for pr in ascending] == [5, 3, 7]
        assert [pr.number for pr in descending] == [3, 7, 5]

    def test_unmerged_sorts_last_when_descending(self):
        unmerged = PullRequest(number=9, title="Unmerged")
        prs = [unmerged, make_pr(1, merged_at=at(5))]

        assert [pr.number for pr in sort_pull_requests(prs)] == [1, 9]

    def test_empty(self):
        assert sort_pull_requests([]) == []

    @pytest.mark.parametrize(
        ("sort_by", "sort_direction"),
        [("author", "descending"), ("title", "sideways")],
    )
    def test_invalid_arguments(self, sort_by, sort_direction):
        with pytest.raises(ValueError, match="Unknown sort"):
            sort_pull_requests([make_pr(1)], sort_by=sort_by, sort_direction=sort_direction)
