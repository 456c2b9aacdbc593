from __future__ import annotations

from .phase_core import Question, SeededRng

PHASE_QUESTIONS: tuple[Question, ...] = (
    Question(name="New Moon", target_angle_deg=0.0, sprite_key="new_moon"),
    Question(name="First Quarter", target_angle_deg=90.0, sprite_key="first_quarter"),
    Question(name="Full Moon", target_angle_deg=180.0, sprite_key="full_moon"),
)


class QuestionBank:
    """Fixed lunar-phase question set, dealt in a seeded random order."""

    def __init__(self, *, rng: SeededRng) -> None:
        self._rng = rng

    def build(self) -> list[Question]:
        questions = list(PHASE_QUESTIONS)
        self._rng.shuffle(questions)
        return questions
