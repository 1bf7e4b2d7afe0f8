from .errors import (
    DiscoveryFailure,
    LoadFailure,
    NoQuestionsSelected,
    QuizConfigError,
    QuizError,
    TerminalInitFailure,
)
from .events import Confirm, Direction, Navigate, Quit, TimerFired, Toggle
from .questions import Question, load_question_set, load_questions
from .sources import CandidateSource, discover_sources
from .tracker import SelectionTracker
from .session import (
    QuestionResult,
    QuizSession,
    SessionSnapshot,
    SessionState,
    SourceSelection,
)
from .timer import EventChannel, TimerDispatcher
from .render import Frame, GlyphTheme, THEMES, paint, project
from .loop import EventLoop, QuizOutcome
from .summary import render_summary

__all__ = [
    "QuizError",
    "LoadFailure",
    "DiscoveryFailure",
    "NoQuestionsSelected",
    "TerminalInitFailure",
    "QuizConfigError",
    "Confirm",
    "Direction",
    "Navigate",
    "Quit",
    "TimerFired",
    "Toggle",
    "Question",
    "load_questions",
    "load_question_set",
    "CandidateSource",
    "discover_sources",
    "SelectionTracker",
    "QuestionResult",
    "QuizSession",
    "SessionSnapshot",
    "SessionState",
    "SourceSelection",
    "EventChannel",
    "TimerDispatcher",
    "Frame",
    "GlyphTheme",
    "THEMES",
    "paint",
    "project",
    "EventLoop",
    "QuizOutcome",
    "render_summary",
]
