"""Semantic versions and next-version resolution.

The next version is chosen by this precedence chain:

1. an explicit version override
2. the version inside an explicit tag override
3. the version inside an explicit name override (only when it has one)
4. the previous release's version bumped according to PR labels

Without a previous release the configured base version is bumped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from release_drafter.core.template import render_template
from release_drafter.exceptions import VersionParseError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from release_drafter.config.models import ReleaseDrafterConfig, VersionResolverConfig
    from release_drafter.core.models import PullRequest, Release, ReleaseOverrides

logger = logging.getLogger(__name__)

_STRICT_PATTERN = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?$"
)
# First run of up to three dot separated numbers, not preceded by a digit
_COERCE_PATTERN = re.compile(r"(?<!\d)(\d{1,16})(?:\.(\d{1,16}))?(?:\.(\d{1,16}))?")


class BumpType(StrEnum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


@dataclass(frozen=True, order=True)
class Version:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse a ``[v]MAJOR.MINOR.PATCH[-pre][+build]`` string.

        Pre-release and build suffixes are accepted and dropped.

        Raises:
            VersionParseError: If ``value`` is not a semantic version
        """
        match = _STRICT_PATTERN.match(value.strip())
        if not match:
            raise VersionParseError(value)
        return cls(int(match["major"]), int(match["minor"]), int(match["patch"]))

    @classmethod
    def coerce(cls, value: str | None) -> Version | None:
        """Extract the first version-like substring of ``value``.

        Missing minor and patch parts default to zero, so ``v2`` coerces
        to ``2.0.0`` and ``release-1.4`` to ``1.4.0``.
        """
        if not value:
            return None
        match = _COERCE_PATTERN.search(value)
        if not match:
            return None
        major, minor, patch = match.groups()
        return cls(int(major), int(minor or 0), int(patch or 0))

    def bump(self, bump_type: BumpType) -> Version:
        if bump_type is BumpType.MAJOR:
            return Version(self.major + 1, 0, 0)
        if bump_type is BumpType.MINOR:
            return Version(self.major, self.minor + 1, 0)
        return Version(self.major, self.minor, self.patch + 1)

    def format(self, template: str = "$MAJOR.$MINOR.$PATCH") -> str:
        return render_template(
            template,
            {"$MAJOR": str(self.major), "$MINOR": str(self.minor), "$PATCH": str(self.patch)},
        )

    def placeholders(self, key: str, template: str) -> dict[str, str]:
        """Template values for this version under ``$KEY`` and its short forms."""
        return {
            f"${key}": self.format(template),
            f"${key}_MAJOR_MINOR": f"{self.major}.{self.minor}",
            f"${key}_MAJOR": str(self.major),
        }


@dataclass(frozen=True)
class VersionInfo:
    """Previous version, the three bump candidates and the resolved version.

    Attributes:
        previous: Version of the last release, None without one
        base: Version the candidates were computed from
        input_version: Version taken from an override, if any
        bump: Bump chosen from PR labels
    """

    previous: Version | None
    base: Version
    next_major: Version
    next_minor: Version
    next_patch: Version
    resolved: Version
    input_version: Version | None
    bump: BumpType

    def placeholders(self, version_template: str) -> dict[str, str]:
        values: dict[str, str] = dict.fromkeys(
            ("$PREVIOUS_VERSION", "$PREVIOUS_VERSION_MAJOR_MINOR", "$PREVIOUS_VERSION_MAJOR"), ""
        )
        if self.previous is not None:
            values.update(self.previous.placeholders("PREVIOUS_VERSION", version_template))
        values.update(self.next_major.placeholders("NEXT_MAJOR_VERSION", version_template))
        values.update(self.next_minor.placeholders("NEXT_MINOR_VERSION", version_template))
        values.update(self.next_patch.placeholders("NEXT_PATCH_VERSION", version_template))
        values.update(self.resolved.placeholders("RESOLVED_VERSION", version_template))
        if self.input_version is not None:
            values.update(self.input_version.placeholders("INPUT_VERSION", version_template))
        return values


def resolve_bump(
    pull_requests: Iterable[PullRequest],
    resolver: VersionResolverConfig,
) -> BumpType:
    """Pick the bump from PR labels: major beats minor beats patch."""
    labels = frozenset().union(*(pr.labels for pr in pull_requests))
    rules = (
        (BumpType.MAJOR, frozenset(resolver.major)),
        (BumpType.MINOR, frozenset(resolver.minor)),
        (BumpType.PATCH, frozenset(resolver.patch)),
    )
    for bump_type, rule_labels in rules:
        if labels & rule_labels:
            return bump_type
    return BumpType(resolver.default)


def previous_version(last_release: Release | None) -> Version | None:
    """Version of a release, read from its tag, then from its name."""
    if last_release is None:
        return None
    return Version.coerce(last_release.tag_name) or Version.coerce(last_release.name)


def _override_version(
    overrides: ReleaseOverrides | None,
    lenient: bool,
) -> Version | None:
    if overrides is None:
        return None

    for source in ("version", "tag"):
        value = getattr(overrides, source)
        if not value:
            continue
        version = Version.coerce(value)
        if version is not None:
            return version
        if not lenient:
            raise VersionParseError(value, source)
        logger.warning("Ignoring %s override %r: no version found in it", source, value)

    # Names are free text, so one without a version is not an error
    return Version.coerce(overrides.name)


def resolve_version(
    last_release: Release | None,
    pull_requests: Iterable[PullRequest],
    config: ReleaseDrafterConfig,
    overrides: ReleaseOverrides | None = None,
) -> VersionInfo:
    """Compute the version candidates and the resolved next version.

    Raises:
        VersionParseError: If an override holds no version and
            ``version_resolver.lenient_overrides`` is off, or if
            ``base_version`` is invalid
    """
    previous = previous_version(last_release)
    if previous is None and last_release is not None:
        logger.warning(
            "Last release %r has no version in its tag or name, starting from %s",
            last_release.tag_name,
            config.base_version,
        )

    try:
        base = previous or Version.parse(config.base_version)
    except VersionParseError as e:
        raise VersionParseError(config.base_version, "base_version") from e

    bump = resolve_bump(pull_requests, config.version_resolver)
    input_version = _override_version(overrides, config.version_resolver.lenient_overrides)

    return VersionInfo(
        previous=previous,
        base=base,
        next_major=base.bump(BumpType.MAJOR),
        next_minor=base.bump(BumpType.MINOR),
        next_patch=base.bump(BumpType.PATCH),
        resolved=input_version or base.bump(bump),
        input_version=input_version,
        bump=bump,
    )
