"""Domain types shared by the drafting pipeline.

These are plain immutable records. They are built by the GitHub client
(or by tests) and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


@dataclass(frozen=True)
class PullRequest:
    """A merged pull request as reported by the hosting platform."""

    number: int
    title: str
    body: str = ""
    author: str | None = None
    merged_at: datetime | None = None
    labels: frozenset[str] = field(default_factory=frozenset)
    is_fork: bool = False
    base_ref: str = ""
    head_ref: str = ""
    url: str = ""

    @property
    def author_handle(self) -> str:
        """Login of the author, ``ghost`` for deleted accounts."""
        return self.author or "ghost"


@dataclass(frozen=True)
class Commit:
    """A commit on the target ref, with the pull requests it belongs to."""

    sha: str
    message: str
    author: str | None
    committed_at: datetime
    associated_pull_requests: tuple[PullRequest, ...] = ()

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0].strip()


@dataclass(frozen=True)
class CommitPage:
    """One page of commit history, in server order (newest first)."""

    commits: tuple[Commit, ...]
    end_cursor: str | None = None
    has_next_page: bool = False


@dataclass(frozen=True)
class Release:
    """An existing GitHub release."""

    id: int
    tag_name: str
    name: str
    body: str = ""
    draft: bool = False
    prerelease: bool = False
    created_at: datetime | None = None
    published_at: datetime | None = None
    html_url: str = ""
    upload_url: str = ""


@dataclass(frozen=True)
class ReleaseInfo:
    """Rendered fields of the next release."""

    tag_name: str
    name: str
    body: str
    draft: bool = True
    prerelease: bool = False


@dataclass(frozen=True)
class ReleaseOverrides:
    """Caller supplied values that take precedence over templates."""

    version: str | None = None
    tag: str | None = None
    name: str | None = None
    prerelease: bool | None = None
    publish: bool | None = None


class ReleaseAction(StrEnum):
    CREATE = "create"
    UPDATE = "update"
