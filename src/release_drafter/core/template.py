"""Placeholder substitution for release templates.

Placeholders are ``$`` followed by upper case letters and underscores.
Only tokens present in the supplied mapping are replaced; any other
``$TOKEN`` is left untouched, so templates may contain literal dollar
text. Substitution is a single pass: substituted values are never
scanned for placeholders again.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from release_drafter.config.models import ReplacerConfig

PLACEHOLDER_PATTERN = re.compile(r"\$[A-Z_]+")

_REGEX_SEARCH = re.compile(r"^/(?P<pattern>.+)/(?P<flags>[gimsuy]*)$", re.DOTALL)
_FLAG_MAP = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}
_GROUP_REFERENCE = re.compile(r"\$(\d+)")


def render_template(template: str, values: Mapping[str, str]) -> str:
    """Substitute known placeholders in ``template``.

    Args:
        template: Template text
        values: Mapping of ``$TOKEN`` to replacement text

    Returns:
        Rendered text
    """

    def replace(match: re.Match[str]) -> str:
        token = match.group(0)
        return values.get(token, token)

    return PLACEHOLDER_PATTERN.sub(replace, template)


def compile_search(search: str) -> tuple[re.Pattern[str], bool] | None:
    """Compile a ``/pattern/flags`` search.

    Returns:
        The compiled pattern and whether it replaces every match (``g``),
        or None for a literal search

    Raises:
        re.error: If the pattern is not a valid regular expression
    """
    match = _REGEX_SEARCH.match(search)
    if match is None:
        return None
    flags = 0
    for flag in match["flags"]:
        flags |= _FLAG_MAP.get(flag, 0)
    return re.compile(match["pattern"], flags), "g" in match["flags"]


def _expand_groups(replace: str, match: re.Match[str]) -> str:
    # Only $1..$N are special; unknown groups stay literal, unmatched ones are empty
    def group(ref: re.Match[str]) -> str:
        index = int(ref.group(1))
        if not 0 < index <= match.re.groups:
            return ref.group(0)
        return match.group(index) or ""

    return _GROUP_REFERENCE.sub(group, replace)


def apply_replacers(text: str, replacers: Iterable[ReplacerConfig]) -> str:
    """Apply search/replace rules in order.

    A search written as ``/pattern/flags`` is a regular expression. Without
    the ``g`` flag only the first match is replaced, the same as a literal
    search. Replacements may use ``$1``-style group references; every other
    character, backslashes included, is inserted literally.
    """
    for replacer in replacers:
        compiled = compile_search(replacer.search)
        if compiled is None:
            text = text.replace(replacer.search, replacer.replace, 1)
            continue

        pattern, replace_all = compiled
        text = pattern.sub(
            lambda m, replace=replacer.replace: _expand_groups(replace, m),
            text,
            count=0 if replace_all else 1,
        )
    return text
