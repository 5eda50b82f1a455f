from __future__ import annotations

import datetime as dt
import logging
from pathlib import Path
from typing import Iterable, Optional

from .config import Fragments
from .content import BlogEntry, Directives, format_human_date
from .errors import ContentError
from .feeds import FeedTracker
from .render import format_template, write_text
from .utils import NAME, VERSION, join_url, rfc822_date

logger = logging.getLogger(__name__)

MAIN_FEED_NAME = "feed"
DEFAULT_LANGUAGE = "en_US"


def build_entry_page(
    args: object,
    fragments: Fragments,
    directives: Directives,
    entry: BlogEntry,
    body_html: str,
) -> str:
    """Assemble the full HTML page for one entry."""
    language = getattr(args, "language", None)
    favicon = getattr(args, "favicon", None)
    locale = getattr(args, "opengraph_locale", None)
    site_name = getattr(args, "opengraph_site_name", None)

    head = ["<!DOCTYPE html>"]
    if language:
        head.append(f'<html lang="{language}">')
    head.extend(["", "<head>", '<meta charset="UTF-8">'])
    if directives.title:
        head.append(f"<title>{directives.title}</title>")
    if favicon:
        head.append(f'<link rel="shortcut icon" type="image/png" href="{favicon}" />')
        head.append(f'<meta name="og:image" content="{favicon}">')
    if directives.description:
        head.extend(
            [
                f'<meta name="description" content="{directives.description}" />',
                f'<meta property="og:title" content="{directives.title}" />',
                f'<meta property="og:description" content="{directives.description}" />',
            ]
        )
    if directives.author:
        head.append(f'<meta name="author" content="{directives.author}" />')
    if locale:
        head.append(f'<meta property="og:locale" content="{locale}" />')
    if site_name:
        head.append(f'<meta property="og:site_name" content="{site_name}" />')
    if fragments.css:
        head.extend(["<style>", fragments.css, "</style>"])
    head.append("</head>")

    parts = ["\n".join(head)]
    if fragments.header:
        parts.append(
            format_template(
                fragments.header,
                {
                    "TITLE": entry.title,
                    "DESCRIPTION": entry.description,
                    "DATE": format_human_date(entry.date),
                },
            )
        )
    parts.append(body_html)
    if fragments.footer:
        parts.append(fragments.footer)
    return "\n\n".join(parts)


def sort_entries(entries: Iterable[BlogEntry]) -> list[BlogEntry]:
    return sorted(entries, key=lambda entry: entry.date, reverse=True)


def build_rss(
    args: object,
    entries: list[BlogEntry],
    feed_id: Optional[int] = None,
    now: Optional[dt.datetime] = None,
) -> str:
    """Render an RSS 2.0 document.

    ``entries`` must already be sorted. With ``feed_id`` only entries that
    joined that feed are included; without it every entry is.
    """
    base_url = getattr(args, "base_url", "")
    items = []
    for entry in entries:
        if feed_id is not None and not entry.in_feed(feed_id):
            continue
        items.append(
            "\n".join(
                [
                    "<item>",
                    f"\t<title>{entry.title}</title>",
                    f"\t<description>{entry.description}</description>",
                    f"\t<pubDate>{rfc822_date(entry.date)}</pubDate>",
                    f"\t<link>{join_url(base_url, entry.url_name)}</link>",
                    "</item>",
                ]
            )
        )
    generated = rfc822_date(now or dt.datetime.now(dt.timezone.utc))
    language = getattr(args, "language", None) or DEFAULT_LANGUAGE
    title = getattr(args, "opengraph_site_name", None) or ""
    return "\n".join(
        [
            '<?xml version="1.0"?>',
            f"<!--RSS generated {generated} by {NAME} {VERSION}-->",
            '<rss version="2.0">',
            "<channel>",
            f"<language>{language}</language>",
            f"<title>{title}</title>",
            f"<generator>{NAME} {VERSION}</generator>",
            "",
            *items,
            "</channel>",
            "</rss>",
            "",
        ]
    )


def build_blog_list(args: object, entries: list[BlogEntry], fragments: Fragments) -> str:
    base_url = getattr(args, "base_url", "")
    formatted = []
    for entry in entries:
        formatted.append(
            format_template(
                fragments.blog_entry,
                {
                    "TITLE": entry.title,
                    "DESCRIPTION": entry.description,
                    "DATE": format_human_date(entry.date),
                    "LINK": join_url(base_url, entry.url_name),
                },
            )
        )
    return format_template(fragments.blog_list, {"ENTRIES": "".join(formatted)})


def check_feed_name(name: str) -> None:
    if not name:
        raise ContentError("Additional feed name must not be empty")
    if name == MAIN_FEED_NAME:
        raise ContentError(f"Additional feed name '{name}' is reserved for the main feed")
    if "/" in name or "\\" in name:
        raise ContentError(f"Additional feed name '{name}' must not contain a path separator")


def write_feeds(
    output_dir: Path,
    args: object,
    entries: list[BlogEntry],
    feed_tracker: FeedTracker,
    now: Optional[dt.datetime] = None,
) -> None:
    now = now or dt.datetime.now(dt.timezone.utc)
    write_text(output_dir / f"{MAIN_FEED_NAME}.rss", build_rss(args, entries, None, now))
    for name, feed_id in feed_tracker.items():
        check_feed_name(name)
        write_text(output_dir / f"{name}.rss", build_rss(args, entries, feed_id, now))
        logger.debug("Wrote feed %s (id %d)", name, feed_id)


def write_blog_list(
    output_dir: Path, args: object, entries: list[BlogEntry], fragments: Fragments
) -> None:
    write_text(output_dir / "index.html", build_blog_list(args, entries, fragments))
