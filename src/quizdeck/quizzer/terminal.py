"""Textual host for the quiz event loop.

Textual owns the real terminal: raw mode, input decoding and drawing. The
quiz loop itself runs on one worker thread and sees Textual only through
two seams:

* key presses are translated into quiz events and posted to the event
  channel from Textual's own thread;
* :class:`TextualScreen` implements the ``clear`` / ``set_cell`` / ``show``
  protocol by buffering cells and handing a finished Rich ``Text`` back to
  the UI thread on ``show``.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from rich.cells import cell_len
from rich.style import Style
from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.events import Key
from textual.widgets import Static

from .errors import TerminalInitFailure
from .events import DOWN, UP, Confirm, Event, Quit, Toggle
from .loop import EventLoop, QuizOutcome
from .render import DEFAULT_THEME, GlyphTheme
from .session import QuizSession
from .timer import EventChannel, TimerDispatcher

logger = logging.getLogger(__name__)

_KEYMAP: dict[str, Event] = {
    "up": UP,
    "k": UP,
    "down": DOWN,
    "j": DOWN,
    "enter": Confirm(),
    "backspace": Confirm(),
    "space": Toggle(),
    "escape": Quit(),
    "q": Quit(),
    "ctrl+c": Quit(),
}


def translate_key(key: str) -> Optional[Event]:
    """Map a Textual key name to a quiz event, or None to ignore it."""
    return _KEYMAP.get(key)


CellMap = dict[tuple[int, int], tuple[str, Style]]


def cells_to_text(cells: CellMap) -> Text:
    """Flatten a sparse ``(x, y) -> (char, style)`` grid into Rich text."""
    text = Text(no_wrap=True, overflow="crop")
    if not cells:
        return text
    height = max(y for _, y in cells) + 1
    rows: list[list[tuple[int, str, Style]]] = [[] for _ in range(height)]
    for (x, y), (char, style) in cells.items():
        rows[y].append((x, char, style))
    for y, row in enumerate(rows):
        if y:
            text.append("\n")
        column = 0
        for x, char, style in sorted(row, key=lambda item: item[0]):
            if x < column:
                continue
            if x > column:
                text.append(" " * (x - column))
            text.append(char, style)
            column = x + max(cell_len(char), 1)
    return text


class TextualScreen:
    """Cell buffer that publishes to a :class:`QuizTerminalApp` on ``show``."""

    def __init__(self, app: "QuizTerminalApp") -> None:
        self._app = app
        self._cells: CellMap = {}

    def clear(self) -> None:
        self._cells = {}

    def set_cell(self, x: int, y: int, char: str, style: Style) -> None:
        self._cells[(x, y)] = (char, style)

    def show(self) -> None:
        self._app.call_from_thread(self._app.update_grid, cells_to_text(self._cells))


class QuizTerminalApp(App[QuizOutcome]):
    """Full-screen app whose only job is hosting the quiz loop."""

    CSS = """
Screen { padding: 1 2; }
#grid { width: auto; height: auto; }
"""
    BINDINGS = [
        Binding("ctrl+c", "quit_quiz", "Quit", show=False, priority=True),
        Binding("ctrl+q", "quit_quiz", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        session: QuizSession,
        channel: EventChannel,
        *,
        timers: Optional[TimerDispatcher] = None,
        theme: GlyphTheme = DEFAULT_THEME,
    ) -> None:
        super().__init__()
        self.session = session
        self.channel = channel
        self.timers = timers
        # ``App.theme`` is Textual's colour theme; keep glyphs separate.
        self.glyph_theme = theme
        self.loop_error: Optional[BaseException] = None

    def compose(self) -> ComposeResult:
        yield Static(id="grid")

    def on_mount(self) -> None:
        self._drive_loop()

    def on_unmount(self) -> None:
        # Wake the loop thread if the app is closing underneath it.
        self.channel.post(Quit())

    def on_key(self, event: Key) -> None:
        quiz_event = translate_key(event.key)
        if quiz_event is None:
            return
        event.stop()
        event.prevent_default()
        self.channel.post(quiz_event)

    def action_quit_quiz(self) -> None:
        self.channel.post(Quit())

    def update_grid(self, text: Text) -> None:
        self.query_one("#grid", Static).update(text)

    @work(thread=True, exclusive=True, exit_on_error=False)
    def _drive_loop(self) -> None:
        loop = EventLoop(
            self.session,
            TextualScreen(self),
            self.channel,
            theme=self.glyph_theme,
            timers=self.timers,
        )
        try:
            outcome = loop.run()
        except Exception as exc:
            logger.exception("Quiz loop failed")
            self.loop_error = exc
            self.call_from_thread(self.exit, None, 1)
            return
        self.call_from_thread(self.exit, outcome)


def run_in_terminal(
    session: QuizSession,
    channel: EventChannel,
    *,
    timers: Optional[TimerDispatcher] = None,
    theme: GlyphTheme = DEFAULT_THEME,
) -> QuizOutcome:
    """Run ``session`` full screen and return its outcome.

    Raises :class:`TerminalInitFailure` when there is no interactive
    terminal, and re-raises any error that stopped the loop (for example a
    load failure while building the question set from chosen files).
    """

    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        raise TerminalInitFailure("quizdeck needs an interactive terminal")

    app = QuizTerminalApp(session, channel, timers=timers, theme=theme)
    try:
        outcome = app.run()
    except OSError as exc:
        raise TerminalInitFailure(f"Unable to initialise terminal: {exc}") from exc

    if app.loop_error is not None:
        raise app.loop_error
    if outcome is None:
        return QuizOutcome(
            completed=False,
            results=tuple(session.results),
            total_questions=session.total_questions,
        )
    return outcome
