"""Partial-credit scoring of submitted answers against the answer key.

Every function here is pure: a wrong answer yields a lower fraction, never an
exception, and empty keys score 0.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Any, List, Mapping, Sequence

from .models import (
    CategorizeQuestion,
    ClozeQuestion,
    ComprehensionQuestion,
    Question,
    QuestionScore,
    QuestionType,
    ScoreSummary,
)
from .text_utils import normalize_blank


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _score_categorize(question: CategorizeQuestion, answer: Mapping[str, Any]) -> float:
    if not question.categories:
        return 0.0
    slots = answer.get("categories") or []
    correct = 0
    for idx, category in enumerate(question.categories):
        placed = slots[idx] if idx < len(slots) else []
        if Counter(placed or []) == Counter(category.items):
            correct += 1
    return correct / len(question.categories)


def _score_cloze(question: ClozeQuestion, answer: Mapping[str, Any]) -> float:
    if not question.correct_answer:
        return 0.0
    blanks = answer.get("blanks") or []
    correct = 0
    for given, expected in zip(blanks, question.correct_answer):
        # an empty response never matches, even against an empty key
        if given and normalize_blank(given) == normalize_blank(expected):
            correct += 1
    return correct / len(question.correct_answer)


def _score_comprehension(question: ComprehensionQuestion, answer: Mapping[str, Any]) -> float:
    if not question.follow_up_questions:
        return 0.0
    replies = answer.get("followUpAnswers") or []
    correct = sum(
        1
        for reply, follow_up in zip(replies, question.follow_up_questions)
        if reply and reply == follow_up.correct_answer
    )
    return correct / len(question.follow_up_questions)


def score(question: Question, answer: Mapping[str, Any]) -> float:
    """Return the fraction of credit in [0, 1] earned by ``answer``."""
    if question.type == QuestionType.categorize:
        return _score_categorize(question, answer)
    if question.type == QuestionType.cloze:
        return _score_cloze(question, answer)
    if question.type == QuestionType.comprehension:
        return _score_comprehension(question, answer)
    raise TypeError(f"Unsupported question type: {question.type!r}")


def score_submission(questions: Sequence[Question], answers: Mapping[int, Any]) -> ScoreSummary:
    """Aggregate credit over the attempted questions only.

    A question whose index is missing from ``answers`` contributes to neither
    ``score`` nor ``max_score``, so ``max_score`` may be lower than the form's
    total points.
    """
    total = 0.0
    max_score = 0
    per_question: List[QuestionScore] = []
    for idx, question in enumerate(questions):
        if answers.get(idx) is None:
            continue
        result = QuestionScore(index=idx, question=question, fraction=score(question, answers[idx]))
        per_question.append(result)
        total += result.credit
        max_score += question.points
    return ScoreSummary(
        score=round_half_up(total, 2),
        max_score=max_score,
        raw_score=total,
        per_question=per_question,
    )
