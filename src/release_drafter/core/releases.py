"""Selection of existing releases and the create-or-update decision."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from release_drafter.core.models import ReleaseAction

if TYPE_CHECKING:
    from collections.abc import Iterable

    from release_drafter.config.models import ReleaseDrafterConfig
    from release_drafter.core.models import Release, ReleaseInfo, ReleaseOverrides

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=UTC)


@dataclass(frozen=True)
class ReleaseSelection:
    draft_release: Release | None
    last_release: Release | None


@dataclass(frozen=True)
class ReleasePlan:
    """What to send to GitHub.

    Attributes:
        action: Create a new release or update ``release_id``
        release_id: Draft being updated, None when creating
        payload: Request body (``tag_name``, ``name``, ``body``,
            ``draft``, ``prerelease``)
    """

    action: ReleaseAction
    release_id: int | None
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def tag_name(self) -> str:
        return self.payload["tag_name"]

    @property
    def name(self) -> str:
        return self.payload["name"]

    @property
    def body(self) -> str:
        return self.payload["body"]


def _created(release: Release) -> datetime:
    return release.created_at or _EPOCH


def find_releases(
    releases: Iterable[Release],
    include_pre_releases: bool = False,
) -> ReleaseSelection:
    """Find the draft to update and the last published release.

    The last release is the most recently created non-draft release,
    skipping prereleases unless ``include_pre_releases``. When several
    drafts exist the most recently created one is used.
    """
    all_releases = list(releases)

    drafts = [r for r in all_releases if r.draft]
    if len(drafts) > 1:
        logger.warning(
            "Found %d draft releases, updating the most recent one", len(drafts)
        )
    draft_release = max(drafts, key=_created, default=None)

    published = [
        r for r in all_releases if not r.draft and (include_pre_releases or not r.prerelease)
    ]
    last_release = max(published, key=_created, default=None)

    if last_release is not None:
        logger.info("Last release: %s", last_release.tag_name or last_release.name)
    else:
        logger.info("No previous releases found")

    return ReleaseSelection(draft_release=draft_release, last_release=last_release)


def plan_release(
    release_info: ReleaseInfo,
    draft_release: Release | None,
    config: ReleaseDrafterConfig,
    overrides: ReleaseOverrides | None = None,
) -> ReleasePlan:
    """Decide between creating a release and updating the existing draft.

    Field precedence for name, tag and prerelease: explicit override,
    rendered value, the draft's current value (updates only), then the
    configuration default. ``publish`` turns the draft flag off.
    """
    overrides_name = overrides.name if overrides else None
    overrides_tag = overrides.tag if overrides else None

    name = overrides_name or release_info.name
    tag_name = overrides_tag or release_info.tag_name
    if draft_release is not None:
        name = name or draft_release.name
        tag_name = tag_name or draft_release.tag_name

    if overrides is not None and overrides.prerelease is not None:
        prerelease = overrides.prerelease
    else:
        prerelease = release_info.prerelease or config.prerelease

    if overrides is not None and overrides.publish is not None:
        draft = not overrides.publish
    else:
        draft = release_info.draft

    payload = {
        "tag_name": tag_name,
        "name": name,
        "body": release_info.body,
        "draft": draft,
        "prerelease": prerelease,
    }

    if draft_release is None:
        return ReleasePlan(action=ReleaseAction.CREATE, release_id=None, payload=payload)
    return ReleasePlan(action=ReleaseAction.UPDATE, release_id=draft_release.id, payload=payload)
