from __future__ import annotations

from typing import Iterator


class SelectionTracker:
    """Wrong option indices already tried for the current question.

    The session clears the tracker when it moves to the next question, so
    membership never leaks between questions.
    """

    def __init__(self) -> None:
        self._wrong: set[int] = set()

    def __contains__(self, index: object) -> bool:
        return index in self._wrong

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._wrong))

    def __len__(self) -> int:
        return len(self._wrong)

    def mark_wrong(self, index: int) -> bool:
        """Record ``index``; return False if it was already recorded."""
        if index in self._wrong:
            return False
        self._wrong.add(index)
        return True

    def clear(self) -> None:
        self._wrong.clear()

    def snapshot(self) -> frozenset[int]:
        return frozenset(self._wrong)
