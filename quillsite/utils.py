from __future__ import annotations

import datetime as dt
import shutil
from pathlib import Path

from .errors import ConfigError, FileOperationError

NAME = "quillsite"
VERSION = "0.1.0"


def join_url(base: str, path: str) -> str:
    base = base.rstrip("/")
    path = path.lstrip("/")
    if not path:
        return base
    return f"{base}/{path}"


def rfc822_date(value: dt.datetime) -> str:
    value = value.astimezone(dt.timezone.utc)
    return value.strftime("%a, %d %b %Y %H:%M:%S %z")


def is_within(path: Path, other: Path) -> bool:
    return path == other or path.is_relative_to(other)


def clean_output_dir(output_dir: Path, input_dir: Path) -> None:
    """Delete and recreate ``output_dir``.

    Refuses to touch a directory that overlaps the input directory.
    """
    output_resolved = output_dir.resolve()
    input_resolved = input_dir.resolve()
    if is_within(output_resolved, input_resolved) or is_within(input_resolved, output_resolved):
        raise ConfigError(
            f"Refusing to clean output directory '{output_dir}' overlapping input '{input_dir}'"
        )
    try:
        shutil.rmtree(output_dir)
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise FileOperationError("removing output directory", output_dir, exc) from exc
    try:
        output_dir.mkdir(parents=True)
    except OSError as exc:
        raise FileOperationError("creating output directory", output_dir, exc) from exc
