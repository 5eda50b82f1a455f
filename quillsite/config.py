from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError

FRAGMENT_FILES = {
    "css": "style.css",
    "header": "header.html",
    "footer": "footer.html",
    "blog_entry": "blog_entry.html",
    "blog_list": "blog_list.html",
}


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Error reading config file {path}: {exc}") from exc
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping: {path}")
    return data


@dataclass(frozen=True)
class Fragments:
    """Static snippets shared by every rendered page."""

    css: str = ""
    header: str = ""
    footer: str = ""
    blog_entry: str = ""
    blog_list: str = ""


def load_fragments(fragments_dir: Optional[Path]) -> Fragments:
    """Load every fragment file from ``fragments_dir``.

    Without a directory all fragments are empty. With one, each of the five
    files must exist.
    """
    if fragments_dir is None:
        return Fragments()
    values = {}
    for field_name, file_name in FRAGMENT_FILES.items():
        path = Path(fragments_dir) / file_name
        try:
            values[field_name] = path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as exc:
            detail = getattr(exc, "strerror", None) or exc
            raise ConfigError(
                f"Error loading fragment '{file_name}': {detail}"
            ) from exc
    return Fragments(**values)
