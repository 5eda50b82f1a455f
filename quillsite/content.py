from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ContentError

ENTRY_DATE_FMT = "%d %b %Y %H:%M:%S %z"
DAY_SUFFIXES = {1: "st", 2: "nd", 3: "rd"}


@dataclass
class Directives:
    """Metadata collected from the directive comments of one document."""

    title: str = ""
    description: str = ""
    author: str = ""
    date: str = ""
    additional_feeds: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class BlogEntry:
    url_name: str
    title: str
    description: str
    date: dt.datetime
    additional_feeds: frozenset[int] = frozenset()

    def in_feed(self, feed_id: int) -> bool:
        return feed_id in self.additional_feeds


def parse_entry_date(value: str) -> dt.datetime:
    """Parse ``05 Jan 2024 10:00:00 +0000`` into an aware UTC datetime."""
    parsed = dt.datetime.strptime(value, ENTRY_DATE_FMT)
    return parsed.astimezone(dt.timezone.utc)


def format_human_date(value: dt.datetime) -> str:
    # Only days 1-3 get a proper suffix; 21st/22nd/23rd/31st all read "th".
    # Other days are space padded to two columns, as strftime %e does.
    day = value.day
    if day in DAY_SUFFIXES:
        ordinal = f"{day}{DAY_SUFFIXES[day]}"
    else:
        ordinal = f"{day:>2}th"
    return value.strftime(f"%A the {ordinal} of %B %Y")


def require_attribute(value: str, attribute: str, path: Path) -> str:
    if not value:
        raise ContentError(f"Input file '{path}' is missing {attribute} attribute")
    return value


def build_blog_entry(directives: Directives, path: Path, url_name: str) -> BlogEntry:
    title = require_attribute(directives.title, "title", path)
    description = require_attribute(directives.description, "description", path)
    date_value = require_attribute(directives.date, "date", path)
    try:
        date = parse_entry_date(date_value)
    except ValueError as exc:
        raise ContentError(
            f"Error parsing date attribute in input file '{path}': {exc}"
        ) from exc
    return BlogEntry(
        url_name=url_name,
        title=title,
        description=description,
        date=date,
        additional_feeds=frozenset(directives.additional_feeds),
    )
