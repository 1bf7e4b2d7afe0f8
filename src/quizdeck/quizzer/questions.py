"""Question records and the JSON / JSON Lines loader.

A question file is either a JSON array of records (``.json``) or one record
per line (``.jsonl``). Each record looks like::

    {"question": "2+2?", "options": ["3", "4", "5"], "correct": 1}

``prompt`` is accepted in place of ``question``. Any problem with a file is
reported as :class:`LoadFailure` and aborts loading of that file entirely.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import LoadFailure

logger = logging.getLogger(__name__)

QuestionSet = tuple["Question", ...]


@dataclass(frozen=True)
class Question:
    """Immutable multiple-choice question."""

    prompt: str
    options: tuple[str, ...]
    correct_index: int
    source: Path | None = None

    def __post_init__(self) -> None:
        if not self.options:
            raise LoadFailure(self.source, "question has no options")
        if not 0 <= self.correct_index < len(self.options):
            raise LoadFailure(
                self.source,
                "correct index {0} out of range for {1} option(s)".format(
                    self.correct_index, len(self.options)
                ),
            )

    @property
    def option_count(self) -> int:
        return len(self.options)

    def is_correct(self, index: int) -> bool:
        return index == self.correct_index


def load_questions(path: Path) -> QuestionSet:
    """Load every question stored in ``path``."""

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadFailure(path, f"unable to read file ({exc})") from exc

    if path.suffix.lower() == ".jsonl":
        records = list(_iter_jsonl(text, path))
    else:
        records = _parse_json_array(text, path)

    questions = tuple(
        _build_question(record, index, path)
        for index, record in enumerate(records)
    )
    logger.debug(
        "Loaded question file",
        extra={"path": path, "questions": len(questions)},
    )
    return questions


def load_question_set(paths: Iterable[Path]) -> QuestionSet:
    """Concatenate the questions of ``paths`` in the order given."""

    collected: list[Question] = []
    for path in paths:
        collected.extend(load_questions(path))
    return tuple(collected)


def _parse_json_array(text: str, path: Path) -> Sequence[Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise LoadFailure(path, f"unable to decode file ({exc})") from exc
    if not isinstance(data, list):
        raise LoadFailure(
            path, f"expected a JSON array, found {type(data).__name__}"
        )
    return data


def _iter_jsonl(text: str, path: Path) -> Iterable[Any]:
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            yield json.loads(line)
        except json.JSONDecodeError as exc:
            raise LoadFailure(
                path, f"unable to decode line {lineno} ({exc})"
            ) from exc


def _build_question(data: object, index: int, path: Path) -> Question:
    if not isinstance(data, dict):
        raise LoadFailure(
            path, f"record {index} is {type(data).__name__}, expected object"
        )

    prompt = data.get("question", data.get("prompt"))
    if not isinstance(prompt, str):
        raise LoadFailure(path, f"record {index} has no 'question' text")

    options = data.get("options")
    if not isinstance(options, list) or not all(
        isinstance(option, str) for option in options
    ):
        raise LoadFailure(
            path, f"record {index} 'options' must be a list of strings"
        )

    correct = data.get("correct")
    # bool is an int subclass; reject it so `true` does not mean option 1.
    if not isinstance(correct, int) or isinstance(correct, bool):
        raise LoadFailure(path, f"record {index} 'correct' must be an integer")

    try:
        return Question(
            prompt=prompt,
            options=tuple(options),
            correct_index=correct,
            source=path,
        )
    except LoadFailure as exc:
        raise LoadFailure(path, f"record {index}: {exc.reason}") from exc
