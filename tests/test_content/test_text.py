"""Tests for folio.content.text helpers."""

from __future__ import annotations

import pytest

from folio.content.text import escape_xml, make_excerpt, slugify, truncate


class TestSlugify:
    """Tests for slugify()."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Hello World", "hello-world"),
            ("Automatisation Café", "automatisation-cafe"),
            ("  Power BI: Sales / 2024!  ", "power-bi-sales-2024"),
            ("snake_case_name", "snake-case-name"),
            ("--Already--slugged--", "already-slugged"),
            ("!!!", ""),
        ],
    )
    def test_examples(self, text, expected):
        assert slugify(text) == expected

    @pytest.mark.parametrize("text", ["Hello World", "Élan _ vital -- 2", "a  b", "ÄÖÜ ß"])
    def test_idempotent(self, text):
        once = slugify(text)
        assert slugify(once) == once

    def test_only_safe_characters(self):
        slug = slugify("Ünïcödé & Symbols #42 (beta)")
        assert all(ch.isdigit() or "a" <= ch <= "z" or ch == "-" for ch in slug)


class TestTruncate:
    def test_short_text_untouched(self):
        assert truncate("short", 60) == "short"

    def test_long_text_capped_with_ellipsis(self):
        result = truncate("x" * 100, 60)
        assert len(result) == 60
        assert result.endswith("...")


class TestMakeExcerpt:
    """Tests for make_excerpt()."""

    def test_empty(self):
        assert make_excerpt("") == ""

    def test_short_text_kept(self):
        assert make_excerpt("A **bold** claim") == "A bold claim"

    def test_never_cuts_a_word(self):
        text = "word " * 60
        excerpt = make_excerpt(text, max_length=50)
        assert len(excerpt) <= 50
        assert excerpt.endswith("...")
        assert excerpt[:-3].split(" ")[-1] == "word"


def test_escape_xml():
    assert escape_xml("a & b <c> \"d\" 'e'") == "a &amp; b &lt;c&gt; &quot;d&quot; &apos;e&apos;"


def test_escape_xml_ampersand_first():
    assert escape_xml("&lt;") == "&amp;lt;"
    assert escape_xml(42) == "42"
