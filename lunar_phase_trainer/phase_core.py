from __future__ import annotations

import random
from collections.abc import MutableSequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, TypeVar

T = TypeVar("T")


class QuizError(Exception):
    """Base class for quiz contract violations."""


class OutOfRangeError(QuizError, IndexError):
    """No current question: the quiz has not started or is exhausted."""


class InvalidStateError(QuizError, RuntimeError):
    """An action was called out of sequence (e.g. double submit)."""


class QuizStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class Point2D:
    """Plane coordinates, Y up (counter-clockwise positive)."""

    x: float
    y: float

    def __sub__(self, other: Point2D) -> Point2D:
        return Point2D(self.x - other.x, self.y - other.y)


ORIGIN = Point2D(0.0, 0.0)


@dataclass(frozen=True, slots=True)
class Question:
    name: str
    target_angle_deg: float  # [0, 360)
    sprite_key: str


@dataclass(frozen=True, slots=True)
class Attempt:
    question: Question
    submitted_angle_deg: float
    displacement_deg: float


@dataclass(frozen=True, slots=True)
class Report:
    total_displacement: float
    grade: str | None  # None until the quiz is completed
    per_question_displacement: tuple[float, ...]


@dataclass(frozen=True, slots=True)
class QuizSnapshot:
    """Read-only view of quiz state for overlays (pure data)."""

    status: QuizStatus
    current_index: int
    question_count: int
    current_name: str | None
    submitted_current: bool
    total_displacement: float
    last_displacement: float | None


class Presenter(Protocol):
    """Callbacks the quiz drives on the surrounding UI/engine layer."""

    def on_session_start(self) -> None: ...
    def on_question_shown(self, index: int, total: int, name: str, sprite_key: str) -> None: ...
    def on_feedback(self, message: str, displacement_deg: float) -> None: ...
    def on_completed(self, report: Report) -> None: ...
    def on_session_end(self) -> None: ...


class NullPresenter:
    """Presenter that ignores every notification (headless use)."""

    def on_session_start(self) -> None:
        pass

    def on_question_shown(self, index: int, total: int, name: str, sprite_key: str) -> None:
        pass

    def on_feedback(self, message: str, displacement_deg: float) -> None:
        pass

    def on_completed(self, report: Report) -> None:
        pass

    def on_session_end(self) -> None:
        pass


class SeededRng:
    """Simple seeded RNG wrapper to keep deterministic streams explicit."""

    def __init__(self, seed: int) -> None:
        self._rng = random.Random(int(seed))

    def shuffle(self, items: MutableSequence[T]) -> None:
        # random.Random.shuffle is Fisher-Yates: every permutation equally likely.
        self._rng.shuffle(items)
