"""Single-threaded driver: render, wait for one event, dispatch, repeat."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .render import DEFAULT_THEME, GlyphTheme, Screen, paint, project
from .session import QuestionResult, QuizSession, SessionState
from .timer import EventChannel, TimerDispatcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuizOutcome:
    """What the loop hands back once the session ends."""

    completed: bool
    results: tuple[QuestionResult, ...]
    total_questions: int

    @property
    def first_try_correct(self) -> int:
        return sum(1 for result in self.results if result.first_try)

    @property
    def wrong_attempts(self) -> int:
        return sum(result.wrong_attempts for result in self.results)


class EventLoop:
    """Owns the consuming side of the event channel for one session.

    The session must be built with this loop's timer dispatcher (or another
    scheduler posting into the same channel) so that feedback timers come
    back through :meth:`run`.
    """

    def __init__(
        self,
        session: QuizSession,
        screen: Screen,
        channel: EventChannel,
        *,
        theme: GlyphTheme = DEFAULT_THEME,
        timers: Optional[TimerDispatcher] = None,
    ) -> None:
        self.session = session
        self.screen = screen
        self.channel = channel
        self.theme = theme
        self.timers = timers

    def run(self) -> QuizOutcome:
        session = self.session
        try:
            while not session.finished:
                paint(project(session.snapshot(), self.theme), self.screen)
                event = self.channel.wait()
                before = session.state
                after = session.dispatch(event)
                if after is not before:
                    logger.debug(
                        "Event applied",
                        extra={
                            "event": type(event).__name__,
                            "from_state": before.value,
                            "to_state": after.value,
                        },
                    )
        finally:
            if self.timers is not None:
                self.timers.close()

        outcome = QuizOutcome(
            completed=session.state is SessionState.FINISHED,
            results=tuple(session.results),
            total_questions=session.total_questions,
        )
        logger.info(
            "Quiz session ended",
            extra={
                "completed": outcome.completed,
                "answered": len(outcome.results),
                "total": outcome.total_questions,
            },
        )
        return outcome
