"""Tests for the markdown directive extension."""

import pytest

from quillsite.feeds import FeedTracker
from quillsite.markdown_ext import MarkdownTransformer, parse_directive


@pytest.fixture
def tracker():
    return FeedTracker()


@pytest.fixture
def transformer(tracker):
    return MarkdownTransformer(tracker)


class TestParseDirective:
    """Tests for parse_directive."""

    def test_label_and_trimmed_value(self):
        assert parse_directive("<!--title:   Hello there  -->") == ("title", "Hello there")

    def test_surrounding_whitespace_is_trimmed(self):
        assert parse_directive("  <!--date: 01 Jan 2024 00:00:00 +0000-->  ") == (
            "date",
            "01 Jan 2024 00:00:00 +0000",
        )

    def test_splits_on_first_colon(self):
        assert parse_directive("<!--description: a: b-->") == ("description", "a: b")

    def test_label_is_not_trimmed(self):
        assert parse_directive("<!-- title: Hello -->") == (" title", "Hello")

    def test_comment_without_colon(self):
        assert parse_directive("<!-- just a note -->") is None

    def test_not_a_comment(self):
        assert parse_directive("title: Hello") is None
        assert parse_directive("<!--title: Hello") is None

    def test_indented_code_is_ignored(self):
        assert parse_directive("    <!--title: Hello-->") is None

    def test_indentation_allowed_inside_list(self):
        assert parse_directive("      <!--title: Hello-->", in_list=True) == ("title", "Hello")


class TestMarkdownTransformer:
    """Tests for MarkdownTransformer.convert."""

    def test_extracts_metadata(self, transformer):
        text = "\n\n".join(
            [
                "<!--title: Hello-->",
                "<!--description: World-->",
                "<!--author: Jo-->",
                "<!--date: 01 Jan 2024 00:00:00 +0000-->",
                "Some *text*.",
            ]
        )

        html, directives = transformer.convert(text)

        assert directives.title == "Hello"
        assert directives.description == "World"
        assert directives.author == "Jo"
        assert directives.date == "01 Jan 2024 00:00:00 +0000"
        assert "<em>text</em>" in html

    def test_last_directive_wins(self, transformer):
        text = "<!--title: A-->\n\n# Heading\n\n<!--title: B-->\n"

        _, directives = transformer.convert(text)

        assert directives.title == "B"

    def test_comments_stay_in_output(self, transformer):
        html, _ = transformer.convert("<!--title: Hello-->\n\nBody\n")

        assert "<!--title: Hello-->" in html
        assert "<p>Body</p>" in html

    def test_spaced_label_is_ignored(self, transformer):
        _, directives = transformer.convert("<!-- title: Hello -->\n")

        assert directives.title == ""

    def test_unknown_label_is_ignored(self, transformer):
        _, directives = transformer.convert("<!--tags: a, b-->\n")

        assert directives.title == ""
        assert directives.additional_feeds == []

    def test_additional_feeds_accumulate(self, transformer, tracker):
        text = "<!--additional-feed: tech-->\n\n<!--additional-feed: life-->\n\n<!--additional-feed: tech-->\n"

        _, directives = transformer.convert(text)

        assert directives.additional_feeds == [0, 1, 0]
        assert tracker.ids == {"tech": 0, "life": 1}

    def test_feed_ids_persist_across_documents(self, transformer, tracker):
        transformer.convert("<!--additional-feed: tech-->\n")
        _, second = transformer.convert("<!--additional-feed: life-->\n\n<!--additional-feed: tech-->\n")

        assert second.additional_feeds == [1, 0]

    def test_no_leak_between_documents(self, transformer):
        transformer.convert("<!--title: First-->\n\n<!--additional-feed: tech-->\n")

        _, directives = transformer.convert("Just text.\n")

        assert directives.title == ""
        assert directives.additional_feeds == []

    def test_directive_inside_code_block_is_ignored(self, transformer):
        text = "```\n<!--title: Hidden-->\n```\n"

        html, directives = transformer.convert(text)

        assert directives.title == ""
        assert "&lt;!--title: Hidden--&gt;" in html

    def test_image_description_fence(self, transformer):
        text = "![cat](cat.png)\n\n```image_description\nA cat on a <mat>\n```\n"

        html, _ = transformer.convert(text)

        assert '<div class="ImageDescription"><p>A cat on a &lt;mat&gt;' in html
        assert "</p></div>" in html
        assert "<code" not in html

    def test_other_fences_render_as_code(self, transformer):
        html, _ = transformer.convert("```python\nprint(1)\n```\n")

        assert '<code class="language-python">' in html
        assert "ImageDescription" not in html

    def test_tables(self, transformer):
        text = "| a | b |\n|---|---|\n| 1 | 2 |\n"

        html, _ = transformer.convert(text)

        assert "<table>" in html
        assert "<td>1</td>" in html

    def test_image_description_quoted_in_outer_fence_stays_code(self, transformer):
        text = "````markdown\n```image_description\nA caption\n```\n````\n"

        html, _ = transformer.convert(text)

        assert "ImageDescription" not in html
        assert "```image_description" in html
        assert "<pre><code" in html

    def test_image_description_after_other_fence(self, transformer):
        text = "```python\nx = 1\n```\n\n```image_description\nA caption\n```\n"

        html, _ = transformer.convert(text)

        assert '<code class="language-python">' in html
        assert '<div class="ImageDescription"><p>A caption' in html

    def test_directive_indented_under_list_item(self, transformer):
        text = "- item\n\n    <!--description: Nested-->\n"

        _, directives = transformer.convert(text)

        assert directives.description == "Nested"

    def test_indented_directive_outside_list_is_code(self, transformer):
        text = "Intro.\n\n    <!--description: Code-->\n\nAfter.\n"

        _, directives = transformer.convert(text)

        assert directives.description == ""
