"""Shared testing fixtures for the quizdeck test suite."""

from .quiz import (  # noqa: F401
    ARITHMETIC,
    FakeScreen,
    RecordingScheduler,
    build_tree,
    question_json,
    record,
)

__all__ = [
    "ARITHMETIC",
    "FakeScreen",
    "RecordingScheduler",
    "build_tree",
    "question_json",
    "record",
]
