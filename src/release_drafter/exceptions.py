"""Exception hierarchy for release-drafter.

All errors raised on purpose by the package derive from
``ReleaseDrafterError`` so that the CLI can report them uniformly.
"""

from __future__ import annotations


class ReleaseDrafterError(Exception):
    """Base class for all release-drafter errors."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(ReleaseDrafterError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """A configuration file was requested but does not exist."""


class ConfigValidationError(ConfigError):
    """Configuration content is invalid.

    Attributes:
        errors: ``(path, message)`` pairs, one per invalid field
    """

    def __init__(self, message: str, errors: list[tuple[str, str]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


# =============================================================================
# Versioning
# =============================================================================


class VersionParseError(ReleaseDrafterError):
    """A version or tag override is not a semantic version."""

    def __init__(self, value: str, source: str = "version") -> None:
        super().__init__(f"Could not parse a semantic version from {source} {value!r}")
        self.value = value
        self.source = source


# =============================================================================
# GitHub
# =============================================================================


class GitHubError(ReleaseDrafterError):
    """A GitHub API request failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubAuthError(GitHubError):
    """The token is missing, invalid or lacks permissions."""


class GitHubNotFoundError(GitHubError):
    """The requested repository, ref or release does not exist."""
