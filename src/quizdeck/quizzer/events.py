"""Input and timer events consumed by the quiz session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Direction(Enum):
    UP = -1
    DOWN = 1


@dataclass(frozen=True)
class Navigate:
    direction: Direction


@dataclass(frozen=True)
class Confirm:
    pass


@dataclass(frozen=True)
class Toggle:
    """Flip the source under the cursor in the file-selection list."""


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class TimerFired:
    """Posted by the timer dispatcher when a feedback delay elapses."""


Event = Union[Navigate, Confirm, Toggle, Quit, TimerFired]

UP = Navigate(Direction.UP)
DOWN = Navigate(Direction.DOWN)
