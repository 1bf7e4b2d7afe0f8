"""File discovery helpers shared across quizdeck modules."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Set

__all__ = [
    "parse_extensions",
    "is_hidden",
    "iter_data_files",
]


def parse_extensions(
    values: Optional[Sequence[str]],
    *,
    default: Optional[Iterable[str]] = None,
) -> Set[str]:
    """Normalize extension strings to a lowercase set without leading dots.

    Parameters
    ----------
    values:
        Raw extension inputs (with or without leading dots).
    default:
        Fallback used when ``values`` is empty or holds nothing usable.
        Defaults to ``{"json"}``.
    """
    fallback = set(default or {"json"})
    if not values:
        return fallback

    normalized: Set[str] = set()
    for item in values:
        if not isinstance(item, str):
            continue
        candidate = item.strip().lower().lstrip(".")
        if candidate:
            normalized.add(candidate)
    return normalized or fallback


def is_hidden(path: Path, root: Path) -> bool:
    """Return True when any component of ``path`` below ``root`` is hidden."""
    try:
        rel = path.relative_to(root)
    except ValueError:
        rel = path
    return any(part.startswith(".") for part in rel.parts)


def iter_data_files(root: Path, extensions: Set[str]) -> Iterator[Path]:
    """Yield matching files under ``root``, recursing into subdirectories.

    Hidden files and directories are skipped without descending into them.
    Files come out ordered by their path relative to ``root`` (case
    insensitive) so repeated runs list sources identically. Errors from
    reading ``root`` itself propagate as ``OSError``.
    """
    collected: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        base = Path(dirpath)
        dirnames[:] = [
            name for name in dirnames if not is_hidden(base / name, root)
        ]
        for name in filenames:
            candidate = base / name
            if is_hidden(candidate, root):
                continue
            if _matches_extension(candidate, extensions):
                collected.append(candidate)
    collected.sort(key=lambda p: p.relative_to(root).as_posix().lower())
    yield from collected


def _raise(error: OSError) -> None:
    raise error


def _matches_extension(path: Path, extensions: Set[str]) -> bool:
    return path.is_file() and path.suffix.lower().lstrip(".") in extensions
