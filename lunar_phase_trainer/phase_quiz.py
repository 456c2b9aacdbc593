from __future__ import annotations

import logging

from .angle_scoring import circular_displacement, feedback_message, grade, position_to_angle
from .phase_core import (
    ORIGIN,
    Attempt,
    InvalidStateError,
    NullPresenter,
    OutOfRangeError,
    Point2D,
    Presenter,
    Question,
    QuizSnapshot,
    QuizStatus,
    Report,
    SeededRng,
)
from .question_bank import QuestionBank

logger = logging.getLogger(__name__)


class QuizState:
    """Three-question lunar-phase quiz: start -> (submit -> advance)* -> completed.

    - Deterministic: question order comes from an RNG seeded at construction.
    - The presenter is notified synchronously from inside each action.
    - ``on_session_end`` fires exactly once per completed or abandoned session.
    """

    def __init__(self, *, seed: int, presenter: Presenter | None = None) -> None:
        self._seed = int(seed)
        self._bank = QuestionBank(rng=SeededRng(self._seed))
        self._presenter: Presenter = presenter if presenter is not None else NullPresenter()

        self._status = QuizStatus.NOT_STARTED
        self._questions: list[Question] = []
        self._attempts: list[Attempt] = []
        self._current_index = 0
        self._total_displacement = 0.0

    @property
    def status(self) -> QuizStatus:
        return self._status

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def question_count(self) -> int:
        return len(self._questions)

    @property
    def total_displacement(self) -> float:
        return self._total_displacement

    @property
    def attempts(self) -> tuple[Attempt, ...]:
        return tuple(self._attempts)

    @property
    def has_submitted_current(self) -> bool:
        return len(self._attempts) > self._current_index

    def start(self) -> None:
        if self._status is QuizStatus.IN_PROGRESS:
            raise InvalidStateError("quiz already in progress; abandon it before restarting")

        self._questions = self._bank.build()
        self._attempts = []
        self._current_index = 0
        self._total_displacement = 0.0
        self._status = QuizStatus.IN_PROGRESS
        logger.info(
            "Quiz started (seed=%d, order=%s)",
            self._seed,
            ", ".join(q.name for q in self._questions),
        )

        self._presenter.on_session_start()
        self._show_current()

    def current_question(self) -> Question:
        if self._status is not QuizStatus.IN_PROGRESS:
            raise OutOfRangeError(f"no current question while quiz is {self._status.value}")
        if self._current_index >= len(self._questions):
            raise OutOfRangeError("no questions remaining")
        return self._questions[self._current_index]

    def submit(self, angle_deg: float) -> Attempt:
        if self._status is not QuizStatus.IN_PROGRESS:
            raise InvalidStateError(f"cannot submit while quiz is {self._status.value}")
        if self.has_submitted_current:
            raise InvalidStateError("answer already submitted for this question; advance first")

        question = self.current_question()
        displacement = circular_displacement(question.target_angle_deg, angle_deg)
        attempt = Attempt(
            question=question,
            submitted_angle_deg=float(angle_deg),
            displacement_deg=displacement,
        )
        self._attempts.append(attempt)
        self._total_displacement += displacement
        logger.debug(
            "Submitted %.2f deg for %s (target %.1f): off by %.2f",
            attempt.submitted_angle_deg,
            question.name,
            question.target_angle_deg,
            displacement,
        )

        self._presenter.on_feedback(feedback_message(displacement), displacement)
        return attempt

    def submit_position(self, position: Point2D, *, origin: Point2D = ORIGIN) -> Attempt:
        return self.submit(position_to_angle(origin, position))

    def advance(self) -> None:
        if self._status is not QuizStatus.IN_PROGRESS:
            raise InvalidStateError(f"cannot advance while quiz is {self._status.value}")
        if not self.has_submitted_current:
            raise InvalidStateError("submit an answer before advancing")

        self._current_index += 1
        if self._current_index < len(self._questions):
            self._show_current()
            return

        self._status = QuizStatus.COMPLETED
        report = self.report()
        logger.info(
            "Quiz completed: total displacement %.2f, grade %s",
            report.total_displacement,
            report.grade,
        )
        self._presenter.on_completed(report)
        self._presenter.on_session_end()

    def abandon(self) -> None:
        """Drop an in-progress session. No-op unless a session is open."""

        if self._status is not QuizStatus.IN_PROGRESS:
            return
        logger.info(
            "Quiz abandoned after %d of %d questions",
            len(self._attempts),
            len(self._questions),
        )
        self._status = QuizStatus.NOT_STARTED
        self._questions = []
        self._attempts = []
        self._current_index = 0
        self._total_displacement = 0.0
        self._presenter.on_session_end()

    def report(self) -> Report:
        total = self._total_displacement
        return Report(
            total_displacement=total,
            grade=grade(total) if self._status is QuizStatus.COMPLETED else None,
            per_question_displacement=tuple(a.displacement_deg for a in self._attempts),
        )

    def snapshot(self) -> QuizSnapshot:
        current = None
        if self._status is QuizStatus.IN_PROGRESS and self._current_index < len(self._questions):
            current = self._questions[self._current_index].name
        last = self._attempts[-1].displacement_deg if self._attempts else None
        return QuizSnapshot(
            status=self._status,
            current_index=self._current_index,
            question_count=len(self._questions),
            current_name=current,
            submitted_current=self.has_submitted_current,
            total_displacement=self._total_displacement,
            last_displacement=last,
        )

    def _show_current(self) -> None:
        q = self._questions[self._current_index]
        self._presenter.on_question_shown(self._current_index, len(self._questions), q.name, q.sprite_key)
