"""Discovery of candidate question files under a directory tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from ..core.files import iter_data_files, parse_extensions
from .errors import DiscoveryFailure

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = ("json", "jsonl")


@dataclass(frozen=True)
class CandidateSource:
    """A discovered question file and the name shown while choosing files."""

    path: Path
    display_name: str


def discover_sources(
    root: Path,
    extensions: Optional[Sequence[str]] = None,
) -> tuple[CandidateSource, ...]:
    """Return the eligible question files under ``root``.

    Raises :class:`DiscoveryFailure` when ``root`` is missing or unreadable,
    or when nothing under it matches.
    """

    root = Path(root).expanduser()
    if not root.is_dir():
        raise DiscoveryFailure(root, "not a directory")

    exts = parse_extensions(extensions, default=DEFAULT_EXTENSIONS)
    try:
        files = list(iter_data_files(root, exts))
    except OSError as exc:
        raise DiscoveryFailure(root, f"unable to read directory ({exc})") from exc

    if not files:
        wanted = ", ".join(sorted(exts))
        raise DiscoveryFailure(root, f"no files with extensions: {wanted}")

    sources = tuple(
        CandidateSource(path=path, display_name=path.relative_to(root).as_posix())
        for path in files
    )
    logger.info(
        "Discovered question sources",
        extra={"root": root, "count": len(sources)},
    )
    return sources
