"""Pure projection of a session snapshot onto a grid of styled cells.

:func:`project` decides what every cell shows and never touches session
state. :func:`paint` pushes a finished frame through the minimal screen
protocol (``clear`` / ``set_cell`` / ``show``).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from rich.cells import cell_len
from rich.style import Style

from .session import SessionSnapshot, SessionState


class Screen(Protocol):
    def clear(self) -> None: ...

    def set_cell(self, x: int, y: int, char: str, style: Style) -> None: ...

    def show(self) -> None: ...


@dataclass(frozen=True)
class GlyphTheme:
    unchecked: str
    checked: str
    wrong: str


THEMES: dict[str, GlyphTheme] = {
    "unicode": GlyphTheme(unchecked="☐", checked="☑", wrong="☒"),
    "nerd": GlyphTheme(unchecked="\uf096", checked="\uf14a", wrong="\uf2d3"),
    "ascii": GlyphTheme(unchecked="[ ]", checked="[x]", wrong="[-]"),
}
DEFAULT_THEME = THEMES["unicode"]

PLAIN = Style()
HEADER = Style(dim=True)
PROMPT = Style(bold=True)
HIGHLIGHT = Style(reverse=True)
CORRECT = Style(color="green")
WRONG_GLYPH = Style(color="red")
WRONG_TEXT = Style(color="grey50")
HINT = Style(dim=True)
SUCCESS = Style(color="green", bold=True)
FAILURE = Style(color="red", bold=True)

QUESTION_HINT = "↑/↓ or j/k to move, Enter to answer, Esc to quit"
SOURCE_HINT = (
    "↑/↓ or j/k to move, Space to toggle, Enter to start, Esc to quit"
)
SUCCESS_MESSAGE = "Correct!"
FAILURE_MESSAGE = "Your choice is incorrect"


@dataclass(frozen=True)
class Cell:
    x: int
    y: int
    char: str
    style: Style


Segment = tuple[str, Style]


@dataclass(frozen=True)
class Frame:
    cells: tuple[Cell, ...]


def project(
    snapshot: SessionSnapshot, theme: GlyphTheme = DEFAULT_THEME
) -> Frame:
    if snapshot.state is SessionState.FILE_SELECTING:
        rows = _source_rows(snapshot)
    elif snapshot.question is None:
        rows = []
    else:
        rows = _question_rows(snapshot, theme)
    return Frame(cells=tuple(_layout(rows)))


def paint(frame: Frame, screen: Screen) -> None:
    screen.clear()
    for cell in frame.cells:
        screen.set_cell(cell.x, cell.y, cell.char, cell.style)
    screen.show()


def _question_rows(
    snapshot: SessionSnapshot, theme: GlyphTheme
) -> list[list[Segment]]:
    question = snapshot.question
    assert question is not None
    state = snapshot.state
    header = f"Question {snapshot.question_index + 1}/{snapshot.total_questions}"
    rows: list[list[Segment]] = [
        [(header, HEADER)],
        [(question.prompt, PROMPT)],
        [],
    ]

    for idx, option in enumerate(question.options):
        glyph, glyph_style = theme.unchecked, PLAIN
        text_style = PLAIN
        if state is SessionState.SELECTING and idx == snapshot.highlighted:
            text_style = HIGHLIGHT
        if state is SessionState.FEEDBACK_CORRECT and question.is_correct(idx):
            glyph, glyph_style = theme.checked, CORRECT
            text_style = CORRECT
        if idx in snapshot.wrong:
            glyph, glyph_style = theme.wrong, WRONG_GLYPH
            # Grey text, but the cursor stays visible on a tried option.
            text_style = (
                WRONG_TEXT + HIGHLIGHT if text_style is HIGHLIGHT else WRONG_TEXT
            )
        rows.append([(glyph, glyph_style), (" ", PLAIN), (option, text_style)])

    rows.append([])
    if state is SessionState.FEEDBACK_CORRECT:
        rows.append([(SUCCESS_MESSAGE, SUCCESS)])
    elif state is SessionState.FEEDBACK_INCORRECT:
        rows.append([(FAILURE_MESSAGE, FAILURE)])
    else:
        rows.append([(QUESTION_HINT, HINT)])
    return rows


def _source_rows(snapshot: SessionSnapshot) -> list[list[Segment]]:
    rows: list[list[Segment]] = [
        [("Choose question files", PROMPT)],
        [],
    ]
    for idx, source in enumerate(snapshot.sources):
        if idx in snapshot.chosen:
            order = snapshot.chosen.index(idx) + 1
            mark = f"[{order}]" if order < 10 else "[+]"
        else:
            mark = "[ ]"
        style = HIGHLIGHT if idx == snapshot.source_cursor else PLAIN
        rows.append([(mark, PLAIN), (" ", PLAIN), (source.display_name, style)])
    rows.append([])
    rows.append([(SOURCE_HINT, HINT)])
    if snapshot.notice:
        rows.append([(snapshot.notice, FAILURE)])
    return rows


def _layout(rows: Iterable[list[Segment]]) -> Iterable[Cell]:
    for y, segments in enumerate(rows):
        x = 0
        for text, style in segments:
            for char in text:
                yield Cell(x, y, char, style)
                x += max(cell_len(char), 1)
