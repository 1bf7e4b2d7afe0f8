from __future__ import annotations

import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import (  # noqa: E402
    ARITHMETIC,
    FakeScreen,
    RecordingScheduler,
    question_json,
)
from quizdeck.quizzer.questions import Question  # noqa: E402


@pytest.fixture
def arithmetic() -> Question:
    """The single "2+2?" question with options 3, 4, 5 (correct: 4)."""

    return Question(prompt="2+2?", options=("3", "4", "5"), correct_index=1)


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def screen() -> FakeScreen:
    return FakeScreen()


@pytest.fixture
def cards_file(tmp_path: Path) -> Path:
    path = tmp_path / "cards.json"
    path.write_text(question_json(ARITHMETIC), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolated_workspace(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("QUIZDECK_HOME", str(tmp_path / "quizdeck-home"))
    for key in (
        "QUIZDECK_CONFIG",
        "QUIZDECK_FEEDBACK_DELAY",
        "QUIZDECK_EXTENSIONS",
        "QUIZDECK_GLYPHS",
        "QUIZDECK_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
