"""Hosting platform access."""

from __future__ import annotations

from release_drafter.vcs.github import GitHubClient

__all__ = ["GitHubClient"]
