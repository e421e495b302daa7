"""Configuration management for release-drafter."""

from __future__ import annotations

from release_drafter.config.loader import load_config
from release_drafter.config.models import (
    CategoryConfig,
    GitHubConfig,
    ReleaseDrafterConfig,
    ReplacerConfig,
    VersionResolverConfig,
)

__all__ = [
    "CategoryConfig",
    "GitHubConfig",
    "ReleaseDrafterConfig",
    "ReplacerConfig",
    "VersionResolverConfig",
    "load_config",
]
