"""Quiz session state machine.

The session is the only owner of quiz progress. It is driven exclusively by
:meth:`QuizSession.dispatch`, which the event loop calls from its single
consuming thread; timers never touch the session directly, they post a
:class:`~quizdeck.quizzer.events.TimerFired` event instead.

Transitions are looked up in an explicit ``(state, event type)`` table.
Pairs missing from the table are ignored, which is what keeps keyboard input
inert while feedback is on screen and makes late timer events harmless.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import NoQuestionsSelected
from .events import Confirm, Event, Navigate, Quit, TimerFired, Toggle
from .questions import Question, QuestionSet, load_question_set
from .sources import CandidateSource
from .tracker import SelectionTracker

logger = logging.getLogger(__name__)

Scheduler = Callable[[float], None]
QuestionLoader = Callable[[Sequence[Path]], QuestionSet]

DEFAULT_FEEDBACK_DELAY = 1.0


class SessionState(Enum):
    FILE_SELECTING = "file_selecting"
    SELECTING = "selecting"
    FEEDBACK_CORRECT = "feedback_correct"
    FEEDBACK_INCORRECT = "feedback_incorrect"
    FINISHED = "finished"
    QUIT = "quit"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.FINISHED, SessionState.QUIT)

    @property
    def is_feedback(self) -> bool:
        return self in (
            SessionState.FEEDBACK_CORRECT,
            SessionState.FEEDBACK_INCORRECT,
        )


@dataclass(frozen=True)
class QuestionResult:
    """How a finished question went."""

    prompt: str
    wrong_attempts: int

    @property
    def first_try(self) -> bool:
        return self.wrong_attempts == 0


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session handed to the renderer."""

    state: SessionState
    question: Optional[Question]
    question_index: int
    total_questions: int
    highlighted: int
    wrong: frozenset[int]
    sources: tuple[CandidateSource, ...] = ()
    chosen: tuple[int, ...] = ()
    source_cursor: int = 0
    notice: Optional[str] = None


class SourceSelection:
    """Candidate sources plus the ones the user has toggled on.

    ``chosen`` keeps toggle order, which becomes the question order once the
    selection is confirmed.
    """

    def __init__(self, sources: Sequence[CandidateSource]) -> None:
        if not sources:
            raise ValueError("SourceSelection needs at least one source")
        self.sources = tuple(sources)
        self.cursor = 0
        self._chosen: list[int] = []

    @property
    def chosen(self) -> tuple[int, ...]:
        return tuple(self._chosen)

    def move(self, step: int) -> int:
        self.cursor = _wrap(self.cursor + step, len(self.sources))
        return self.cursor

    def toggle(self, index: Optional[int] = None) -> bool:
        """Flip ``index`` (default: the cursor); return its new membership."""
        target = self.cursor if index is None else index
        if not 0 <= target < len(self.sources):
            raise IndexError(f"source index {target} out of range")
        if target in self._chosen:
            self._chosen.remove(target)
            return False
        self._chosen.append(target)
        return True

    def chosen_paths(self) -> list[Path]:
        return [self.sources[index].path for index in self._chosen]


class QuizSession:
    """Authoritative controller for one quiz run."""

    def __init__(
        self,
        questions: Sequence[Question] = (),
        *,
        schedule: Scheduler,
        feedback_delay: float = DEFAULT_FEEDBACK_DELAY,
        repeat_wrong_feedback: bool = False,
        selection: Optional[SourceSelection] = None,
        loader: QuestionLoader = load_question_set,
    ) -> None:
        if selection is None and not questions:
            raise ValueError("A quiz session needs at least one question")
        self._schedule = schedule
        self.feedback_delay = feedback_delay
        self.repeat_wrong_feedback = repeat_wrong_feedback
        self._loader = loader

        self.selection = selection
        self.questions: QuestionSet = tuple(questions)
        self.question_index = 0
        self.highlighted = 0
        self.tracker = SelectionTracker()
        self.results: list[QuestionResult] = []
        self.notice: Optional[str] = None
        self._wrong_attempts = 0
        self.state = (
            SessionState.FILE_SELECTING
            if selection is not None
            else SessionState.SELECTING
        )

    # ------------------------------------------------------------------
    # Queries

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def finished(self) -> bool:
        return self.state.is_terminal

    @property
    def current(self) -> Optional[Question]:
        if self.question_index < len(self.questions):
            return self.questions[self.question_index]
        return None

    def snapshot(self) -> SessionSnapshot:
        selection = self.selection
        return SessionSnapshot(
            state=self.state,
            question=None if self.state.is_terminal else self.current,
            question_index=self.question_index,
            total_questions=self.total_questions,
            highlighted=self.highlighted,
            wrong=self.tracker.snapshot(),
            sources=selection.sources if selection else (),
            chosen=selection.chosen if selection else (),
            source_cursor=selection.cursor if selection else 0,
            notice=self.notice,
        )

    # ------------------------------------------------------------------
    # Dispatch

    def dispatch(self, event: Event) -> SessionState:
        """Apply ``event`` and return the resulting state."""
        if self.state.is_terminal:
            return self.state
        if isinstance(event, Quit):
            self._enter(SessionState.QUIT)
            return self.state
        handler = _TRANSITIONS.get((self.state, type(event)))
        if handler is not None:
            handler(self, event)
        return self.state

    def _enter(self, state: SessionState) -> None:
        if state is not self.state:
            logger.debug(
                "Session transition",
                extra={
                    "from_state": self.state.value,
                    "to_state": state.value,
                    "question_index": self.question_index,
                },
            )
        self.state = state

    # FILE_SELECTING ----------------------------------------------------

    def _move_source_cursor(self, event: Navigate) -> None:
        assert self.selection is not None
        self.selection.move(event.direction.value)

    def _toggle_source(self, _event: Toggle) -> None:
        assert self.selection is not None
        self.selection.toggle()
        self.notice = None

    def _confirm_sources(self, _event: Confirm) -> None:
        try:
            self.confirm_selection()
        except NoQuestionsSelected as exc:
            logger.warning("File selection confirmed without questions")
            self.notice = str(exc)

    def confirm_selection(self) -> QuestionSet:
        """Build the question set from the chosen sources and start the quiz.

        Raises :class:`NoQuestionsSelected` and leaves the session in
        ``FILE_SELECTING`` when nothing usable was chosen. Load failures from
        the chosen files propagate unchanged.
        """
        assert self.selection is not None
        paths = self.selection.chosen_paths()
        if not paths:
            raise NoQuestionsSelected()
        questions = self._loader(paths)
        if not questions:
            raise NoQuestionsSelected("The selected files contain no questions")
        logger.info(
            "Question set built from selection",
            extra={"sources": paths, "questions": len(questions)},
        )
        self.questions = tuple(questions)
        self.selection = None
        self.notice = None
        self.question_index = 0
        self.highlighted = 0
        self.tracker.clear()
        self._enter(SessionState.SELECTING)
        return self.questions

    # SELECTING ---------------------------------------------------------

    def _navigate(self, event: Navigate) -> None:
        question = self.current
        assert question is not None
        self.highlighted = _wrap(
            self.highlighted + event.direction.value, question.option_count
        )

    def _confirm_answer(self, _event: Confirm) -> None:
        question = self.current
        assert question is not None
        choice = self.highlighted
        if question.is_correct(choice):
            self._enter(SessionState.FEEDBACK_CORRECT)
            self._schedule(self.feedback_delay)
            return
        newly_wrong = self.tracker.mark_wrong(choice)
        if not newly_wrong and not self.repeat_wrong_feedback:
            return
        self._wrong_attempts += 1
        self._enter(SessionState.FEEDBACK_INCORRECT)
        self._schedule(self.feedback_delay)

    # FEEDBACK_* --------------------------------------------------------

    def _advance(self, _event: TimerFired) -> None:
        question = self.current
        assert question is not None
        self.results.append(
            QuestionResult(
                prompt=question.prompt, wrong_attempts=self._wrong_attempts
            )
        )
        self._wrong_attempts = 0
        self.question_index += 1
        self.tracker.clear()
        self.highlighted = 0
        if self.question_index == len(self.questions):
            self._enter(SessionState.FINISHED)
        else:
            self._enter(SessionState.SELECTING)

    def _retry(self, _event: TimerFired) -> None:
        self.highlighted = 0
        self._enter(SessionState.SELECTING)


def _wrap(index: int, count: int) -> int:
    return (index + count) % count


_TRANSITIONS: dict[
    tuple[SessionState, type], Callable[[QuizSession, Event], None]
] = {
    (SessionState.FILE_SELECTING, Navigate): QuizSession._move_source_cursor,
    (SessionState.FILE_SELECTING, Toggle): QuizSession._toggle_source,
    (SessionState.FILE_SELECTING, Confirm): QuizSession._confirm_sources,
    (SessionState.SELECTING, Navigate): QuizSession._navigate,
    (SessionState.SELECTING, Confirm): QuizSession._confirm_answer,
    (SessionState.FEEDBACK_CORRECT, TimerFired): QuizSession._advance,
    (SessionState.FEEDBACK_INCORRECT, TimerFired): QuizSession._retry,
}
