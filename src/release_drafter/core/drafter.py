"""End-to-end drafting: fetch, associate, render, then create or update."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from release_drafter.core.changelog import generate_release_info
from release_drafter.core.commits import assemble_commit_pages, associate_commits
from release_drafter.core.models import ReleaseAction
from release_drafter.core.releases import find_releases, plan_release

if TYPE_CHECKING:
    from release_drafter.config.models import ReleaseDrafterConfig
    from release_drafter.core.commits import AssociatedChanges
    from release_drafter.core.models import Release, ReleaseInfo, ReleaseOverrides
    from release_drafter.core.releases import ReleasePlan
    from release_drafter.vcs.github import GitHubClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DraftResult:
    """Outcome of one drafting run.

    Attributes:
        release_info: Rendered release fields
        plan: The create or update request
        changes: Commits and pull requests of the release window
        last_release: Release the window starts after
        release: Release returned by GitHub, None on a dry run
    """

    release_info: ReleaseInfo
    plan: ReleasePlan
    changes: AssociatedChanges
    last_release: Release | None
    release: Release | None = None


class Drafter:
    """Drafts the next release of one repository."""

    def __init__(
        self,
        client: GitHubClient,
        owner: str,
        repo: str,
        config: ReleaseDrafterConfig,
    ) -> None:
        self.client = client
        self.owner = owner
        self.repo = repo
        self.config = config

    def run(
        self,
        ref: str,
        overrides: ReleaseOverrides | None = None,
        *,
        dry_run: bool = False,
    ) -> DraftResult:
        """Draft the release for ``ref``.

        Releases are fetched first because the commit window starts at the
        last release's creation time.

        Raises:
            GitHubError: If a request fails
            VersionParseError: If an override holds no version
        """
        selection = find_releases(
            self.client.list_releases(self.owner, self.repo),
            include_pre_releases=self.config.include_pre_releases,
        )
        last_release = selection.last_release
        since = last_release.created_at if last_release else None

        pages = self.client.iter_commit_pages(self.owner, self.repo, ref, since=since)
        changes = associate_commits(assemble_commit_pages(pages, since))
        logger.info(
            "Found %d commit(s) and %d merged pull request(s) since %s",
            len(changes.commits),
            len(changes.pull_requests),
            last_release.tag_name if last_release else "the beginning",
        )

        release_info = generate_release_info(
            pull_requests=changes.pull_requests,
            config=self.config,
            last_release=last_release,
            direct_commits=changes.direct_commits,
            overrides=overrides,
        )
        plan = plan_release(release_info, selection.draft_release, self.config, overrides)

        result = DraftResult(
            release_info=release_info,
            plan=plan,
            changes=changes,
            last_release=last_release,
        )
        if dry_run:
            logger.info("Dry run, not sending the %s request", plan.action)
            return result

        if plan.action is ReleaseAction.CREATE or plan.release_id is None:
            logger.info("Creating new release")
            release = self.client.create_release(self.owner, self.repo, plan.payload)
        else:
            logger.info("Updating existing release %d", plan.release_id)
            release = self.client.update_release(
                self.owner, self.repo, plan.release_id, plan.payload
            )

        return DraftResult(
            release_info=release_info,
            plan=plan,
            changes=changes,
            last_release=last_release,
            release=release,
        )
