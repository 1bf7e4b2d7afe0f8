"""Exception hierarchy for quiz startup and session handling."""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "QuizError",
    "LoadFailure",
    "DiscoveryFailure",
    "NoQuestionsSelected",
    "TerminalInitFailure",
    "QuizConfigError",
]


class QuizError(RuntimeError):
    """Base class for quizdeck failures."""


class LoadFailure(QuizError):
    """A question file is unreadable or malformed."""

    def __init__(self, path: Path | None, reason: str) -> None:
        self.path = path
        self.reason = reason
        where = f"{path}: " if path is not None else ""
        super().__init__(f"Unable to load questions from {where}{reason}")


class DiscoveryFailure(QuizError):
    """No usable question files were found under a directory."""

    def __init__(self, root: Path, reason: str) -> None:
        self.root = root
        self.reason = reason
        super().__init__(f"No question files discovered in {root}: {reason}")


class NoQuestionsSelected(QuizError):
    """File selection was confirmed without any questions to ask."""

    def __init__(self, message: str = "Select at least one file") -> None:
        super().__init__(message)


class TerminalInitFailure(QuizError):
    """The interactive terminal could not be acquired."""


class QuizConfigError(QuizError):
    """Raised when quiz configuration parsing or validation fails."""
