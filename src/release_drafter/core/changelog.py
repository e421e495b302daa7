"""Release body generation.

This module turns the associated commits and pull requests of a release
window into the rendered name, tag and Markdown body of the next release.
Rendering is deterministic: the same inputs always give the same output,
which is what makes updating a draft in place meaningful.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from release_drafter.core.categories import categorize_pull_requests
from release_drafter.core.labels import exclude_forked_pull_requests, filter_pull_requests
from release_drafter.core.models import ReleaseInfo
from release_drafter.core.sorting import sort_pull_requests
from release_drafter.core.template import apply_replacers, render_template
from release_drafter.core.version import resolve_version

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from release_drafter.config.models import ReleaseDrafterConfig
    from release_drafter.core.categories import CategorizedPullRequests
    from release_drafter.core.models import Commit, PullRequest, Release, ReleaseOverrides

logger = logging.getLogger(__name__)


def select_pull_requests(
    pull_requests: Iterable[PullRequest],
    config: ReleaseDrafterConfig,
) -> list[PullRequest]:
    """Filter and sort pull requests for the release body.

    Forks are dropped first when ``exclude_forks`` is set, then the
    exclude and include label passes run, then the survivors are sorted.
    """
    prs: Iterable[PullRequest] = pull_requests
    if config.exclude_forks:
        prs = exclude_forked_pull_requests(prs)
    prs = filter_pull_requests(prs, config.include_label_set, config.exclude_label_set)
    return sort_pull_requests(prs, config.sort_by, config.sort_direction)


def format_change(pr: PullRequest, change_template: str) -> str:
    """Render one pull request with the change template."""
    return render_template(
        change_template,
        {
            "$TITLE": pr.title,
            "$NUMBER": str(pr.number),
            "$AUTHOR": pr.author_handle,
            "$BODY": pr.body,
            "$URL": pr.url,
            "$BASE_REF_NAME": pr.base_ref,
            "$HEAD_REF_NAME": pr.head_ref,
        },
    )


def format_changes(pull_requests: Iterable[PullRequest], change_template: str) -> str:
    return "\n".join(format_change(pr, change_template) for pr in pull_requests)


def generate_changelog(categorized: CategorizedPullRequests, config: ReleaseDrafterConfig) -> str:
    """Render the ``$CHANGES`` block.

    Uncategorized pull requests come first, followed by one section per
    non-empty category in declaration order. With nothing to list the
    no-changes template is returned.
    """
    if categorized.is_empty:
        return config.no_changes_template

    blocks: list[str] = []
    if categorized.uncategorized:
        blocks.append(format_changes(categorized.uncategorized, config.change_template))

    for section in categorized.sections:
        if not section.pull_requests:
            continue
        heading = render_template(config.category_template, {"$TITLE": section.title})
        changes = format_changes(section.pull_requests, config.change_template)
        blocks.append(f"{heading}\n\n{changes}")

    return "\n\n".join(blocks).strip()


def format_direct_commits(commits: Iterable[Commit], commit_template: str) -> str:
    """Render commits that reached the branch without a pull request."""
    return "\n".join(
        render_template(
            commit_template,
            {
                "$MESSAGE": commit.subject,
                "$SHA": commit.sha,
                "$SHORT_SHA": commit.short_sha,
                "$AUTHOR": commit.author or "ghost",
            },
        )
        for commit in commits
    )


def contributors_sentence(
    pull_requests: Iterable[PullRequest],
    config: ReleaseDrafterConfig,
) -> str:
    """Join the unique PR authors into a sentence.

    ``@a, @b and @c`` with the default separators.
    """
    contributors = list(dict.fromkeys(f"@{pr.author_handle}" for pr in pull_requests))
    if config.sort_contributors:
        contributors.sort(key=str.casefold)

    if not contributors:
        return config.no_contributors_template
    if len(contributors) == 1:
        return contributors[0]
    head = config.contributors_separator.join(contributors[:-1])
    return f"{head}{config.contributors_last_separator}{contributors[-1]}"


def generate_release_info(
    *,
    pull_requests: Sequence[PullRequest],
    config: ReleaseDrafterConfig,
    last_release: Release | None = None,
    direct_commits: Sequence[Commit] = (),
    overrides: ReleaseOverrides | None = None,
) -> ReleaseInfo:
    """Render the name, tag and body of the next release.

    Args:
        pull_requests: Associated pull requests of the release window
        config: Validated configuration
        last_release: Most recent published release, if any
        direct_commits: Commits of the window that have no pull request
        overrides: Caller supplied version, tag, name and release flags

    Returns:
        Rendered release fields. ``draft`` is True unless ``publish`` is
        overridden, ``prerelease`` follows the override, else the
        configuration

    Raises:
        VersionParseError: If a version or tag override holds no version
    """
    accepted = select_pull_requests(pull_requests, config)
    logger.debug("%d of %d pull request(s) accepted", len(accepted), len(pull_requests))

    categorized = categorize_pull_requests(accepted, config.categories)
    version_info = resolve_version(last_release, accepted, config, overrides)
    version_values = version_info.placeholders(config.version_template)

    tag = overrides.tag if overrides and overrides.tag else ""
    if not tag:
        tag = render_template(config.tag_template, version_values)
    name = overrides.name if overrides and overrides.name else ""
    if not name:
        name = render_template(config.name_template, version_values)

    values = {
        **version_values,
        "$CHANGES": generate_changelog(categorized, config),
        "$CONTRIBUTORS": contributors_sentence(accepted, config),
        "$PREVIOUS_TAG": last_release.tag_name if last_release else "",
        "$DIRECT_COMMITS": format_direct_commits(direct_commits, config.commit_template),
        "$TAG": tag,
        "$NAME": name,
    }
    body = apply_replacers(render_template(config.full_template, values), config.replacers)

    prerelease = config.prerelease
    if overrides is not None and overrides.prerelease is not None:
        prerelease = overrides.prerelease
    draft = True
    if overrides is not None and overrides.publish is not None:
        draft = not overrides.publish

    return ReleaseInfo(
        tag_name=tag,
        name=name,
        body=body,
        draft=draft,
        prerelease=prerelease,
    )
