"""Tests for folio.content.renderer module."""

from __future__ import annotations

import pytest

from folio.content.renderer import (
    UNDER_ONE_MINUTE,
    assess_complexity,
    estimate_reading_time,
    extract_code_blocks,
    extract_headings,
    extract_images,
    extract_links,
    format_reading_time,
    is_external_url,
    render_content,
    render_markdown,
)

BODY = """\
# Overview

An [external](https://github.com/me/tool) link and a [local](./notes.md) one.

![Diagram](images/diagram.png)

## Setup {: #custom-setup }

```python
print("# not a heading")
```

### C#
"""


class TestRenderMarkdown:
    """Tests for render_markdown()."""

    def test_headings_get_ids_and_anchor_links(self):
        html = render_markdown("## Getting Started\n")
        assert 'id="getting-started"' in html
        assert 'href="#getting-started"' in html

    def test_attribute_lists(self):
        html = render_markdown("A paragraph\n{: .lead }\n")
        assert 'class="lead"' in html

    def test_fenced_code_and_tables(self):
        html = render_markdown("```python\nx = 1\n```\n\n| a | b |\n|---|---|\n| 1 | 2 |\n")
        assert "<code" in html
        assert "<table>" in html


class TestExtraction:
    """Tests for the outline, link, image and code extractors."""

    def test_headings(self):
        headings = extract_headings(BODY)
        assert [(h.level, h.text) for h in headings] == [(1, "Overview"), (2, "Setup"), (3, "C#")]
        assert headings[0].slug == "overview"

    def test_links_exclude_images(self):
        links = extract_links(BODY)
        assert [(l.text, l.is_external) for l in links] == [("external", True), ("local", False)]

    def test_images(self):
        images = extract_images(BODY)
        assert [(i.alt, i.src) for i in images] == [("Diagram", "images/diagram.png")]

    def test_code_blocks(self):
        blocks = extract_code_blocks(BODY + "\n```\nplain\n```\n")
        assert [(b.language, b.code) for b in blocks] == [
            ("python", 'print("# not a heading")'),
            ("text", "plain"),
        ]

    @pytest.mark.parametrize(
        "url, external",
        [("https://a.com", True), ("http://a.com/x", True), ("/local", False), ("#top", False), ("mailto:x@y.z", False)],
    )
    def test_is_external(self, url, external):
        assert is_external_url(url) is external


class TestReadingTime:
    """Tests for reading time estimation and labels."""

    def test_zero_words_is_under_a_minute(self):
        assert estimate_reading_time(0) == 0
        assert format_reading_time(0) == UNDER_ONE_MINUTE

    @pytest.mark.parametrize("words, minutes", [(1, 1), (200, 1), (201, 2), (1000, 5)])
    def test_rounds_up(self, words, minutes):
        assert estimate_reading_time(words) == minutes

    def test_monotonic(self):
        times = [estimate_reading_time(n) for n in range(0, 2001, 37)]
        assert times == sorted(times)

    def test_label(self):
        assert format_reading_time(3) == "3 min"


class TestComplexity:
    """Tests for assess_complexity()."""

    def test_minimum_is_one(self):
        assert assess_complexity(0, 0, 0, 0, 0) == 1

    def test_clamped_to_ten(self):
        assert assess_complexity(50, 50, 5000, 50, 50) == 10

    def test_five_categories_is_exactly_two(self):
        assert assess_complexity(5, 0, 0, 0, 0) == 2

    def test_long_content_adds(self):
        assert assess_complexity(0, 0, 1500, 0, 0) == 2
        assert assess_complexity(0, 0, 2500, 0, 0) == 3


def test_render_content_stats():
    rendered = render_content(BODY, category_count=1, tech_count=2)
    stats = rendered.stats
    assert stats.word_count == len(BODY.split())
    assert stats.reading_time == 1
    assert stats.reading_time_label == "1 min"
    # 1 + 0.2 + 0.6 + 0.5 (one code block) + 0.1 (one external link) = 2.4
    assert stats.complexity == 3
    assert [l.url for l in rendered.external_links] == ["https://github.com/me/tool"]
