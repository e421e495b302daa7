"""Tests for template rendering and replacers."""

from __future__ import annotations

from release_drafter.config.models import ReplacerConfig
from release_drafter.core.template import apply_replacers, render_template


class TestRenderTemplate:
    """Tests for render_template()."""

    def test_known_placeholders(self):
        result = render_template(
            "* $TITLE (#$NUMBER) @$AUTHOR",
            {"$TITLE": "Add feature", "$NUMBER": "12", "$AUTHOR": "octocat"},
        )

        assert result == "* Add feature (#12) @octocat"

    def test_unknown_placeholders_are_kept(self):
        """Tokens without a value are left verbatim."""
        assert render_template("Costs $PRICE for $TITLE", {"$TITLE": "x"}) == "Costs $PRICE for x"

    def test_lowercase_dollar_text_is_kept(self):
        assert render_template("echo $home $5", {}) == "echo $home $5"

    def test_single_pass(self):
        """Substituted values are not expanded again."""
        result = render_template("$TITLE", {"$TITLE": "Use $NUMBER", "$NUMBER": "1"})

        assert result == "Use $NUMBER"

    def test_longest_token_is_matched(self):
        result = render_template(
            "$NEXT_MINOR_VERSION / $NEXT_MINOR_VERSION_MAJOR",
            {"$NEXT_MINOR_VERSION": "2.1.0", "$NEXT_MINOR_VERSION_MAJOR": "2"},
        )

        assert result == "2.1.0 / 2"

    def test_repeated_placeholder(self):
        assert render_template("$A-$A", {"$A": "x"}) == "x-x"


class TestApplyReplacers:
    """Tests for apply_replacers()."""

    def test_literal_replaces_first_occurrence(self):
        replacers = [ReplacerConfig(search="foo", replace="bar")]

        assert apply_replacers("foo foo", replacers) == "bar foo"

    def test_regex_global(self):
        """A ``g`` flag replaces every match."""
        replacers = [ReplacerConfig(search="/CVE-(\\d+)/g", replace="[CVE-$1](https://cve/$1)")]

        assert apply_replacers("CVE-1 and CVE-2", replacers) == (
            "[CVE-1](https://cve/1) and [CVE-2](https://cve/2)"
        )

    def test_regex_without_global_flag(self):
        replacers = [ReplacerConfig(search="/o/", replace="0")]

        assert apply_replacers("foo", replacers) == "f0o"

    def test_regex_case_insensitive(self):
        replacers = [ReplacerConfig(search="/hello/gi", replace="bye")]

        assert apply_replacers("Hello HELLO", replacers) == "bye bye"

    def test_replacers_run_in_order(self):
        replacers = [
            ReplacerConfig(search="a", replace="b"),
            ReplacerConfig(search="b", replace="c"),
        ]

        assert apply_replacers("a", replacers) == "c"

    def test_empty_replace(self):
        replacers = [ReplacerConfig(search="/\\s*\\(#\\d+\\)/g")]

        assert apply_replacers("* Fix (#1)\n* Add (#2)", replacers) == "* Fix\n* Add"

    def test_no_replacers(self):
        assert apply_replacers("unchanged", []) == "unchanged"

    def test_backslashes_in_replacement_are_literal(self):
        """Windows paths and escape sequences are inserted as written."""
        replacers = [ReplacerConfig(search="/X/g", replace="C:\\dir\\n")]

        assert apply_replacers("path: X", replacers) == "path: C:\\dir\\n"

    def test_unknown_group_reference_is_literal(self):
        replacers = [ReplacerConfig(search="/(a)/", replace="$1$2")]

        assert apply_replacers("a", replacers) == "a$2"

    def test_unmatched_group_is_empty(self):
        replacers = [ReplacerConfig(search="/(a)|(b)/", replace="[$2]")]

        assert apply_replacers("a", replacers) == "[]"
