"""Question files, directory trees and fake collaborators for quiz tests."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence, Union

from rich.style import Style

TreeValue = Union[str, "Tree", None]
Tree = Mapping[str, TreeValue]


def build_tree(base: Path, tree: Tree) -> None:
    """Create files/directories under ``base`` from a nested mapping.

    Strings are file contents, ``None`` is an empty directory and nested
    mappings are subdirectories.
    """

    for name, value in tree.items():
        path = base / name
        if isinstance(value, str):
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(value, encoding="utf-8")
        elif isinstance(value, Mapping):
            path.mkdir(parents=True, exist_ok=True)
            build_tree(path, value)
        elif value is None:
            path.mkdir(parents=True, exist_ok=True)
        else:
            raise TypeError(f"Unsupported tree value for {path}: {value!r}")


def question_json(*records: Mapping[str, object]) -> str:
    return json.dumps(list(records))


def record(
    question: str, options: Sequence[str], correct: int
) -> dict[str, object]:
    return {"question": question, "options": list(options), "correct": correct}


ARITHMETIC = record("2+2?", ["3", "4", "5"], 1)


@dataclass
class FakeScreen:
    """In-memory screen that keeps every frame shown."""

    cells: dict[tuple[int, int], tuple[str, Style]] = field(default_factory=dict)
    frames: list[dict[tuple[int, int], tuple[str, Style]]] = field(
        default_factory=list
    )
    clears: int = 0

    def clear(self) -> None:
        self.clears += 1
        self.cells = {}

    def set_cell(self, x: int, y: int, char: str, style: Style) -> None:
        self.cells[(x, y)] = (char, style)

    def show(self) -> None:
        self.frames.append(dict(self.cells))

    def row(self, y: int, frame: int = -1) -> str:
        cells = self.frames[frame]
        chars = sorted((x, ch) for (x, row), (ch, _) in cells.items() if row == y)
        return "".join(ch for _, ch in chars)

    def text(self, frame: int = -1) -> str:
        cells = self.frames[frame]
        height = max((y for _, y in cells), default=-1) + 1
        return "\n".join(self.row(y, frame) for y in range(height))


@dataclass
class RecordingScheduler:
    """Stands in for the timer dispatcher; remembers requested delays."""

    delays: list[float] = field(default_factory=list)

    def __call__(self, delay: float) -> None:
        self.delays.append(delay)
