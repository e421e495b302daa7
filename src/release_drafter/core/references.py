"""Matching of pushed refs against the configured references."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

_REF_PREFIX = re.compile(r"^refs/(?:heads|tags)/")


def short_ref(ref: str) -> str:
    """``refs/heads/main`` -> ``main``, ``refs/tags/v1`` -> ``v1``."""
    return _REF_PREFIX.sub("", ref)


def is_triggerable_reference(ref: str, references: Iterable[str]) -> bool:
    """Check whether ``ref`` matches any configured reference.

    References are regular expressions searched in the short ref, so
    ``main`` also matches ``main-v2`` and ``v.+`` matches any ``v`` tag.
    An empty reference list matches nothing.
    """
    patterns = [short_ref(r) for r in references if r]
    name = short_ref(ref)
    if patterns and re.search("|".join(patterns), name):
        return True
    logger.info("Ignoring %s: it does not match %s", name, ", ".join(patterns) or "<none>")
    return False
