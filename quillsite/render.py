from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Mapping

from .errors import FileOperationError, TemplateError

logger = logging.getLogger(__name__)

PLACEHOLDER = "$"


def format_template(template: str, values: Mapping[str, str]) -> str:
    """Replace every ``$KEY$`` in ``template`` with ``values[KEY]``.

    A ``$`` without a closing ``$`` is kept as a literal character. Inserted
    values are never scanned again, so a value containing ``$`` is safe.
    """
    parts: list[str] = []
    index = 0
    while True:
        start = template.find(PLACEHOLDER, index)
        if start == -1:
            break
        end = template.find(PLACEHOLDER, start + 1)
        if end == -1:
            break
        key = template[start + 1 : end]
        try:
            value = values[key]
        except KeyError:
            raise TemplateError(key) from None
        parts.append(template[index:start])
        parts.append(value)
        index = end + 1
    parts.append(template[index:])
    return "".join(parts)


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError("reading input file", path, exc) from exc


def write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise FileOperationError("writing", path, exc) from exc


def copy_asset(source: Path, dest: Path) -> None:
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, dest)
    except OSError as exc:
        raise FileOperationError(f"copying '{source}' to", dest, exc) from exc
    logger.debug("Copied %s -> %s", source, dest)


def copy_tree(source: Path, dest: Path) -> None:
    try:
        if dest.exists():
            shutil.rmtree(dest)
        shutil.copytree(source, dest)
    except OSError as exc:
        raise FileOperationError(f"copying '{source}' to", dest, exc) from exc
    logger.debug("Copied directory %s -> %s", source, dest)
