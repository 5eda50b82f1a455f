from __future__ import annotations

import html
import re

import markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor

from .content import Directives
from .feeds import FeedTracker

IMAGE_DESCRIPTION_LANG = "image_description"
IMAGE_DESCRIPTION_OPEN = '<div class="ImageDescription"><p>'
IMAGE_DESCRIPTION_CLOSE = "</p></div>"

# Same opening shape fenced_code accepts: fence at column 0, then an info string.
RE_FENCE_OPEN = re.compile(r"^(?P<fence>`{3,}|~{3,})[ ]*(?P<lang>[^\s`]*)")
RE_LIST_ITEM = re.compile(r"^[ ]{0,3}(?:[-+*]|\d+[.)])[ \t]+")

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
MAX_BLOCK_INDENT = 3


def find_fence_close(lines: list[str], start: int, fence: str) -> int | None:
    for index in range(start, len(lines)):
        if lines[index].rstrip(" ") == fence:
            return index
    return None


class ImageDescriptionPreprocessor(Preprocessor):
    """Render ``image_description`` fences as a captioned paragraph.

    Fences are walked in document order, so an ``image_description`` block
    quoted inside another fence stays code.
    """

    def run(self, lines: list[str]) -> list[str]:
        out: list[str] = []
        index = 0
        while index < len(lines):
            match = RE_FENCE_OPEN.match(lines[index])
            if match is None:
                out.append(lines[index])
                index += 1
                continue
            close = find_fence_close(lines, index + 1, match.group("fence"))
            if close is None:
                out.append(lines[index])
                index += 1
                continue
            if match.group("lang") == IMAGE_DESCRIPTION_LANG:
                text = "".join(f"{line}\n" for line in lines[index + 1 : close])
                placeholder = self.md.htmlStash.store(
                    f"{IMAGE_DESCRIPTION_OPEN}{html.escape(text)}{IMAGE_DESCRIPTION_CLOSE}"
                )
                out.extend(["", placeholder, ""])
            else:
                out.extend(lines[index : close + 1])
            index = close + 1
        return out


class DirectivePreprocessor(Preprocessor):
    """Collect ``<!--label: value-->`` directives into ``md.directives``.

    Lines are returned untouched; the comments stay in the rendered page.
    Inside a list, deeper indentation is item content rather than code.
    """

    def __init__(self, md, feed_tracker: FeedTracker):
        super().__init__(md)
        self.feed_tracker = feed_tracker

    def run(self, lines: list[str]) -> list[str]:
        in_list = False
        for line in lines:
            if RE_LIST_ITEM.match(line):
                in_list = True
            elif line.strip() and not line.startswith((" ", "\t")):
                in_list = False
            directive = parse_directive(line, in_list)
            if directive is not None:
                self.apply(*directive)
        return lines

    def apply(self, label: str, value: str) -> None:
        directives: Directives = self.md.directives
        if label in {"title", "description", "author", "date"}:
            setattr(directives, label, value)
        elif label == "additional-feed":
            directives.additional_feeds.append(self.feed_tracker.identify(value))


def parse_directive(line: str, in_list: bool = False) -> tuple[str, str] | None:
    indent = len(line) - len(line.lstrip(" "))
    if indent > MAX_BLOCK_INDENT and not in_list:
        return None
    stripped = line.strip()
    if not (stripped.startswith(COMMENT_OPEN) and stripped.endswith(COMMENT_CLOSE)):
        return None
    contents = stripped[len(COMMENT_OPEN) : -len(COMMENT_CLOSE)]
    if ":" not in contents:
        return None
    label, value = contents.split(":", 1)
    return label, value.strip()


class DirectiveExtension(Extension):
    def __init__(self, feed_tracker: FeedTracker, **kwargs):
        super().__init__(**kwargs)
        self.feed_tracker = feed_tracker

    def extendMarkdown(self, md):
        md.registerExtension(self)
        self.md = md
        self.reset()
        # fenced_code_block runs at 25, html_block at 20.
        md.preprocessors.register(ImageDescriptionPreprocessor(md), "image_description", 27)
        md.preprocessors.register(
            DirectivePreprocessor(md, self.feed_tracker), "directives", 22
        )

    def reset(self):
        self.md.directives = Directives()


class MarkdownTransformer:
    """Render markdown documents and extract their directives."""

    def __init__(self, feed_tracker: FeedTracker):
        self.feed_tracker = feed_tracker
        self.md = markdown.Markdown(
            extensions=["fenced_code", "tables", DirectiveExtension(feed_tracker)]
        )

    def convert(self, text: str) -> tuple[str, Directives]:
        self.md.reset()
        html_body = self.md.convert(text)
        return html_body, self.md.directives
