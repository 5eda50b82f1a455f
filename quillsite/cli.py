from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from .config import Fragments, load_config, load_fragments
from .content import BlogEntry, build_blog_entry
from .errors import BuildError, ConfigError, FileOperationError, InputError
from .feeds import FeedTracker
from .markdown_ext import MarkdownTransformer
from .pages import build_entry_page, sort_entries, write_blog_list, write_feeds
from .render import copy_asset, copy_tree, read_text, write_text
from .utils import NAME, VERSION, clean_output_dir

logger = logging.getLogger(__name__)

CONTENT_FILE = "content.md"
PAGE_FILE = "index.html"
RESERVED_STEM = "index"
REQUIRED_OPTIONS = (("input", "--input"), ("output", "--output"), ("base_url", "--base-url"))


def list_dir(path: Path) -> list[Path]:
    try:
        return sorted(path.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise FileOperationError("opening dir", path, exc) from exc


def check_reserved_name(path: Path) -> None:
    if path.stem == RESERVED_STEM:
        raise InputError(f"File '{path}' should not be named '{RESERVED_STEM}.*'")


def compile_markdown(
    path: Path,
    output_path: Path,
    url_name: str,
    args: object,
    fragments: Fragments,
    transformer: MarkdownTransformer,
) -> BlogEntry:
    """Render one ``content.md`` into ``output_path`` and return its entry."""
    body_html, directives = transformer.convert(read_text(path))
    entry = build_blog_entry(directives, path, url_name)
    write_text(output_path, build_entry_page(args, fragments, directives, entry, body_html))
    logger.debug("Compiled %s -> %s", path, output_path)
    return entry


def process_entry_dir(
    entry_dir: Path,
    output_dir: Path,
    args: object,
    fragments: Fragments,
    transformer: MarkdownTransformer,
) -> BlogEntry:
    url_name = entry_dir.name
    target_dir = output_dir / url_name
    entry: Optional[BlogEntry] = None
    for path in list_dir(entry_dir):
        check_reserved_name(path)
        if path.is_dir():
            copy_tree(path, target_dir / path.name)
        elif path.suffix == ".md":
            if path.name != CONTENT_FILE:
                raise InputError(f"Markdown file '{path}' is not named '{CONTENT_FILE}'")
            entry = compile_markdown(
                path, target_dir / PAGE_FILE, url_name, args, fragments, transformer
            )
        else:
            copy_asset(path, target_dir / path.name)
    if entry is None:
        raise InputError(f"Entry directory '{entry_dir}' has no '{CONTENT_FILE}'")
    return entry


def build_site(args: argparse.Namespace) -> list[BlogEntry]:
    input_dir = Path(args.input)
    output_dir = Path(args.output)
    fragments_dir = getattr(args, "fragments", None)
    fragments = load_fragments(Path(fragments_dir) if fragments_dir else None)

    if not input_dir.is_dir():
        raise ConfigError(f"Input directory not found: {input_dir}")
    clean_output_dir(output_dir, input_dir)

    feed_tracker = FeedTracker()
    transformer = MarkdownTransformer(feed_tracker)
    entries = []
    for path in list_dir(input_dir):
        check_reserved_name(path)
        if not path.is_dir():
            raise InputError(f"Found file '{path}' at root level in input directory")
        entries.append(process_entry_dir(path, output_dir, args, fragments, transformer))

    entries = sort_entries(entries)
    write_feeds(output_dir, args, entries, feed_tracker)
    write_blog_list(output_dir, args, entries, fragments)
    logger.info("Built %d entries and %d additional feeds", len(entries), len(feed_tracker))
    return entries


def build_parser(config: dict, config_path: str) -> argparse.ArgumentParser:
    def cfg_str(key: str) -> Optional[str]:
        value = config.get(key)
        return None if value is None else str(value)

    parser = argparse.ArgumentParser(
        prog=NAME, description=f"{NAME}, a small bare bones static blog generator."
    )
    parser.add_argument("--config", default=config_path, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("-i", "--input", default=cfg_str("input"), help="Input directory to scan for .md files and assets.")
    parser.add_argument(
        "-o",
        "--output",
        default=cfg_str("output"),
        help="Directory to place output files. DESTRUCTIVE, its contents are deleted first.",
    )
    parser.add_argument("-u", "--base-url", default=cfg_str("base_url"), help="Base URL for blog subfolder.")
    parser.add_argument(
        "-f",
        "--fragments",
        default=cfg_str("fragments"),
        help="Directory to retrieve html footer/header/etc fragments from.",
    )
    parser.add_argument("-s", "--favicon", default=cfg_str("favicon"), help="Favicon image for generated pages.")
    parser.add_argument("-l", "--language", default=cfg_str("language"), help="Language to specify in generated output.")
    parser.add_argument(
        "-ol",
        "--opengraph-locale",
        default=cfg_str("opengraph_locale"),
        help="Locale for Open Graph metadata.",
    )
    parser.add_argument(
        "-os",
        "--opengraph-site-name",
        default=cfg_str("opengraph_site_name"),
        help="Site name for Open Graph metadata and RSS channel title.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log progress (repeat for debug output).")
    parser.add_argument("--version", action="version", version=f"{NAME} {VERSION}")
    return parser


def configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[list[str]] = None) -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default="site.toml")
    pre_args, _ = pre_parser.parse_known_args(argv)
    try:
        config = load_config(Path(pre_args.config))
    except BuildError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    parser = build_parser(config, pre_args.config)
    args = parser.parse_args(argv)
    for name, flag in REQUIRED_OPTIONS:
        if not getattr(args, name):
            parser.error(f"missing required flag '{flag}'")
    configure_logging(args.verbose)

    start = time.perf_counter()
    try:
        build_site(args)
    except BuildError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {args.output}")
