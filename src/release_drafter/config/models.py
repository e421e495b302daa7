"""Pydantic models for release-drafter configuration.

Keys may be written in snake_case or in the hyphenated form used by
release-drafter configuration files (``change-template``).
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, field_validator

from release_drafter.core.template import compile_search


def _hyphenate(name: str) -> str:
    return name.replace("_", "-")


class _ConfigModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        alias_generator=AliasGenerator(validation_alias=_hyphenate),
    )


class CategoryConfig(_ConfigModel):
    """A titled section of the release body triggered by labels."""

    title: str
    labels: list[str] = Field(default_factory=list)

    @field_validator("labels", mode="before")
    @classmethod
    def _single_label(cls, value: object) -> object:
        # `labels = "bug"` is shorthand for `labels = ["bug"]`
        if isinstance(value, str):
            return [value]
        return value

    @property
    def label_set(self) -> frozenset[str]:
        return frozenset(self.labels)


class VersionResolverConfig(_ConfigModel):
    """Labels that decide which part of the version gets bumped."""

    major: list[str] = Field(default_factory=list)
    minor: list[str] = Field(default_factory=list)
    patch: list[str] = Field(default_factory=list)
    default: Literal["major", "minor", "patch"] = "patch"
    lenient_overrides: bool = False


class ReplacerConfig(_ConfigModel):
    """Search/replace applied to the rendered body.

    ``search`` written as ``/pattern/flags`` is a regular expression,
    anything else is a literal string.
    """

    search: str
    replace: str = ""

    @field_validator("search")
    @classmethod
    def _valid_search(cls, value: str) -> str:
        try:
            compile_search(value)
        except re.error as e:
            raise ValueError(f"invalid regular expression {value!r}: {e}") from e
        return value


class GitHubConfig(_ConfigModel):
    """GitHub API settings."""

    api_url: str = "https://api.github.com"
    graphql_url: str | None = None
    timeout_s: int = 30
    page_size: int = 100

    @property
    def effective_graphql_url(self) -> str:
        if self.graphql_url:
            return self.graphql_url
        # GitHub Enterprise serves GraphQL next to /api/v3
        base = self.api_url.rstrip("/")
        if base.endswith("/v3"):
            base = base[: -len("/v3")]
        return f"{base}/graphql"


DEFAULT_TEMPLATE = "# What's Changed\n\n$CHANGES\n"


class ReleaseDrafterConfig(_ConfigModel):
    """Root configuration model."""

    # Triggering
    references: list[str] = Field(default_factory=lambda: ["main", "master"])

    # Templates
    header: str = ""
    template: str = DEFAULT_TEMPLATE
    footer: str = ""
    name_template: str = ""
    tag_template: str = ""
    version_template: str = "$MAJOR.$MINOR.$PATCH"
    change_template: str = "* $TITLE (#$NUMBER) @$AUTHOR"
    category_template: str = "## $TITLE"
    no_changes_template: str = "* No changes"
    commit_template: str = "* $MESSAGE ($SHORT_SHA)"

    # Contributors
    sort_contributors: bool = True
    contributors_separator: str = ", "
    contributors_last_separator: str = " and "
    no_contributors_template: str = "No contributors"

    # Selection
    categories: list[CategoryConfig] = Field(default_factory=list)
    include_labels: list[str] = Field(default_factory=list)
    exclude_labels: list[str] = Field(default_factory=list)
    exclude_forks: bool = False
    sort_by: Literal["merged_at", "title"] = "merged_at"
    sort_direction: Literal["descending", "ascending"] = "descending"
    replacers: list[ReplacerConfig] = Field(default_factory=list)

    # Versioning
    version_resolver: VersionResolverConfig = Field(default_factory=VersionResolverConfig)
    base_version: str = "0.0.0"

    # Release flags
    prerelease: bool = False
    include_pre_releases: bool = False

    github: GitHubConfig = Field(default_factory=GitHubConfig)

    @property
    def include_label_set(self) -> frozenset[str]:
        return frozenset(self.include_labels)

    @property
    def exclude_label_set(self) -> frozenset[str]:
        return frozenset(self.exclude_labels)

    @property
    def full_template(self) -> str:
        """Body template with header and footer attached."""
        return f"{self.header}{self.template}{self.footer}"
