"""
Server-side grading and answer-key redaction.

A question is answered correctly when the submitted option set equals the
answer-key set exactly. Order does not matter and repeated identifiers
collapse, so ``["C", "A", "A"]`` matches ``["A", "C"]`` but ``["A"]`` does not.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, List, Optional, Sequence

from ..errors import InvalidState
from .schemas import OptionId, Question, StudentQuestion


def normalize_answers(answers: Optional[Iterable[OptionId]]) -> FrozenSet[OptionId]:
    return frozenset(answers or ())


def is_correct(
    submitted: Optional[Iterable[OptionId]], expected: Iterable[OptionId]
) -> bool:
    return normalize_answers(submitted) == normalize_answers(expected)


def count_correct(
    questions: Sequence[Question],
    answers: Sequence[Optional[Sequence[OptionId]]],
) -> int:
    """Grade positionally; a missing answer counts as an empty selection."""
    correct = 0
    for index, question in enumerate(questions):
        submitted = answers[index] if index < len(answers) else None
        if is_correct(submitted, question.correct_answers):
            correct += 1
    return correct


def compute_score(correct_count: int, total_questions: int) -> int:
    """Percentage score rounded to the nearest integer, halves rounding up."""
    if total_questions <= 0:
        raise InvalidState("Exam has no questions to grade")
    # Integer form of floor(100 * correct / total + 0.5).
    return (correct_count * 200 + total_questions) // (2 * total_questions)


def redact_question(question: Question) -> StudentQuestion:
    return StudentQuestion(
        text=question.text, image=question.image, options=list(question.options)
    )


def redact_questions(questions: Sequence[Question]) -> List[StudentQuestion]:
    return [redact_question(q) for q in questions]
