"""Tests for version parsing and next-version resolution."""

from __future__ import annotations

import logging

import pytest
from factories import make_pr, make_release

from release_drafter.config.models import ReleaseDrafterConfig, VersionResolverConfig
from release_drafter.core.models import ReleaseOverrides
from release_drafter.core.template import render_template
from release_drafter.core.version import (
    BumpType,
    Version,
    previous_version,
    resolve_bump,
    resolve_version,
)
from release_drafter.exceptions import VersionParseError


@pytest.fixture
def resolver_config() -> ReleaseDrafterConfig:
    return ReleaseDrafterConfig(
        version_resolver=VersionResolverConfig(
            major=["breaking"],
            minor=["feature"],
            patch=["bug"],
        ),
    )


class TestVersion:
    """Tests for the Version type."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1.2.3", Version(1, 2, 3)),
            ("v2.0.0", Version(2, 0, 0)),
            ("1.0.0-rc.1", Version(1, 0, 0)),
            ("1.0.0+build.5", Version(1, 0, 0)),
        ],
    )
    def test_parse(self, value, expected):
        assert Version.parse(value) == expected

    @pytest.mark.parametrize("value", ["1.2", "latest", "01.2.3", ""])
    def test_parse_invalid(self, value):
        with pytest.raises(VersionParseError):
            Version.parse(value)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("v2.1.1-alpha", Version(2, 1, 1)),
            ("Release v1.4", Version(1, 4, 0)),
            ("v2", Version(2, 0, 0)),
            ("not a version", None),
            (None, None),
        ],
    )
    def test_coerce(self, value, expected):
        assert Version.coerce(value) == expected

    @pytest.mark.parametrize(
        ("bump", "expected"),
        [
            (BumpType.MAJOR, Version(2, 0, 0)),
            (BumpType.MINOR, Version(1, 3, 0)),
            (BumpType.PATCH, Version(1, 2, 4)),
        ],
    )
    def test_bump(self, bump, expected):
        assert Version(1, 2, 3).bump(bump) == expected

    def test_format(self):
        assert Version(1, 2, 3).format("$MAJOR.$MINOR") == "1.2"
        assert str(Version(1, 2, 3)) == "1.2.3"

    def test_ordering(self):
        assert Version(1, 10, 0) > Version(1, 9, 9)

    def test_placeholders(self):
        values = Version(3, 4, 5).placeholders("RESOLVED_VERSION", "$MAJOR.$MINOR.$PATCH")

        assert values == {
            "$RESOLVED_VERSION": "3.4.5",
            "$RESOLVED_VERSION_MAJOR_MINOR": "3.4",
            "$RESOLVED_VERSION_MAJOR": "3",
        }


class TestResolveBump:
    """Tests for resolve_bump()."""

    def test_major_beats_minor(self, resolver_config):
        prs = [make_pr(1, labels=("feature",)), make_pr(2, labels=("breaking",))]

        assert resolve_bump(prs, resolver_config.version_resolver) is BumpType.MAJOR

    def test_minor_beats_patch(self, resolver_config):
        prs = [make_pr(1, labels=("bug",)), make_pr(2, labels=("feature",))]

        assert resolve_bump(prs, resolver_config.version_resolver) is BumpType.MINOR

    def test_default_without_matching_labels(self, resolver_config):
        assert resolve_bump([make_pr(1)], resolver_config.version_resolver) is BumpType.PATCH

    def test_configured_default(self):
        resolver = VersionResolverConfig(default="minor")

        assert resolve_bump([], resolver) is BumpType.MINOR


class TestPreviousVersion:
    """Tests for previous_version()."""

    def test_from_tag(self):
        assert previous_version(make_release(1, "v2.0.0")) == Version(2, 0, 0)

    def test_from_name_when_tag_has_none(self):
        release = make_release(1, "stable", name="Release 1.5.0")

        assert previous_version(release) == Version(1, 5, 0)

    def test_no_release(self):
        assert previous_version(None) is None


class TestResolveVersion:
    """Tests for resolve_version()."""

    def test_minor_label_bumps_minor(self, resolver_config, last_release):
        """v2.0.0 plus a feature PR resolves to 2.1.0."""
        info = resolve_version(last_release, [make_pr(1, labels=("feature",))], resolver_config)

        assert info.previous == Version(2, 0, 0)
        assert info.bump is BumpType.MINOR
        assert info.resolved == Version(2, 1, 0)
        assert info.next_major == Version(3, 0, 0)
        assert info.next_minor == Version(2, 1, 0)
        assert info.next_patch == Version(2, 0, 1)

    def test_version_override_wins(self, resolver_config, last_release):
        """An explicit version replaces the label based bump."""
        info = resolve_version(
            last_release,
            [make_pr(1, labels=("breaking",))],
            resolver_config,
            ReleaseOverrides(version="2.1.1"),
        )

        assert info.resolved == Version(2, 1, 1)
        assert info.input_version == Version(2, 1, 1)

    def test_tag_override_is_coerced(self, resolver_config, last_release):
        info = resolve_version(
            last_release, [], resolver_config, ReleaseOverrides(tag="v2.1.1-alpha")
        )

        assert info.resolved == Version(2, 1, 1)

    def test_version_override_beats_tag(self, resolver_config, last_release):
        overrides = ReleaseOverrides(version="4.0.0", tag="v3.0.0")

        assert resolve_version(last_release, [], resolver_config, overrides).resolved == Version(
            4, 0, 0
        )

    def test_name_override_without_version(self, resolver_config, last_release):
        """A free-text name does not fail resolution."""
        info = resolve_version(
            last_release, [], resolver_config, ReleaseOverrides(name="Spring release")
        )

        assert info.resolved == Version(2, 0, 1)
        assert info.input_version is None

    def test_invalid_version_override(self, resolver_config, last_release):
        with pytest.raises(VersionParseError, match="version 'latest'"):
            resolve_version(last_release, [], resolver_config, ReleaseOverrides(version="latest"))

    def test_invalid_tag_override(self, resolver_config, last_release):
        with pytest.raises(VersionParseError) as exc_info:
            resolve_version(last_release, [], resolver_config, ReleaseOverrides(tag="nightly"))

        assert exc_info.value.source == "tag"

    def test_lenient_overrides(self, last_release, caplog):
        """Unparseable overrides are ignored with a warning when lenient."""
        config = ReleaseDrafterConfig(
            version_resolver=VersionResolverConfig(lenient_overrides=True)
        )
        with caplog.at_level(logging.WARNING):
            info = resolve_version(last_release, [], config, ReleaseOverrides(version="latest"))

        assert info.resolved == Version(2, 0, 1)
        assert "Ignoring version override" in caplog.text

    def test_no_previous_release_uses_base_version(self, config):
        info = resolve_version(None, [], config)

        assert info.previous is None
        assert info.base == Version(0, 0, 0)
        assert info.resolved == Version(0, 0, 1)

    def test_configured_base_version(self):
        config = ReleaseDrafterConfig(base_version="1.0.0")

        assert resolve_version(None, [], config).resolved == Version(1, 0, 1)

    def test_invalid_base_version(self):
        config = ReleaseDrafterConfig(base_version="one")

        with pytest.raises(VersionParseError) as exc_info:
            resolve_version(None, [], config)

        assert exc_info.value.source == "base_version"

    def test_release_without_version_warns(self, config, caplog):
        with caplog.at_level(logging.WARNING):
            info = resolve_version(make_release(1, "stable", name="Stable"), [], config)

        assert info.base == Version(0, 0, 0)
        assert "has no version" in caplog.text

    def test_placeholders(self, resolver_config, last_release):
        info = resolve_version(last_release, [], resolver_config, ReleaseOverrides(version="2.1.1"))
        values = info.placeholders("$MAJOR.$MINOR.$PATCH")

        assert values["$PREVIOUS_VERSION"] == "2.0.0"
        assert values["$RESOLVED_VERSION"] == "2.1.1"
        assert values["$INPUT_VERSION"] == "2.1.1"
        assert values["$NEXT_MINOR_VERSION_MAJOR_MINOR"] == "2.1"

    def test_placeholders_without_input_version(self, config):
        values = resolve_version(None, [], config).placeholders("$MAJOR.$MINOR.$PATCH")

        assert values["$PREVIOUS_VERSION"] == ""
        assert values["$PREVIOUS_VERSION_MAJOR_MINOR"] == ""
        assert values["$PREVIOUS_VERSION_MAJOR"] == ""
        assert "$INPUT_VERSION" not in values

    def test_previous_version_short_forms(self, config):
        """The previous version is exposed in its truncated forms too."""
        info = resolve_version(make_release(1, "v2.3.4"), [], config)
        values = info.placeholders("$MAJOR.$MINOR.$PATCH")

        rendered = render_template("$PREVIOUS_VERSION_MAJOR_MINOR|$PREVIOUS_VERSION_MAJOR", values)

        assert rendered == "2.3|2"
