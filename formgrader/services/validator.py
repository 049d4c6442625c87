from __future__ import annotations

from typing import Any, Mapping, Set

from .models import (
    CategorizeQuestion,
    ClozeQuestion,
    ComprehensionQuestion,
    Question,
    QuestionType,
)


def _is_string_list(value: Any, allow_none: bool = False) -> bool:
    if not isinstance(value, list):
        return False
    for entry in value:
        if entry is None and allow_none:
            continue
        if not isinstance(entry, str):
            return False
    return True


def _validate_categorize(question: CategorizeQuestion, answer: Mapping[str, Any]) -> bool:
    slots = answer.get("categories")
    if not isinstance(slots, list) or len(slots) != len(question.categories):
        return False
    pool = set(question.items)
    placed: Set[str] = set()
    for slot in slots:
        if not _is_string_list(slot):
            return False
        # duplicates inside one slot are left for the scorer to judge
        for item in set(slot):
            if item not in pool or item in placed:
                return False
            placed.add(item)
    return True


def _validate_cloze(question: ClozeQuestion, answer: Mapping[str, Any]) -> bool:
    blanks = answer.get("blanks")
    return _is_string_list(blanks, allow_none=True) and len(blanks) >= 1


def _validate_comprehension(question: ComprehensionQuestion, answer: Mapping[str, Any]) -> bool:
    replies = answer.get("followUpAnswers")
    if not _is_string_list(replies, allow_none=True):
        return False
    if len(replies) != len(question.follow_up_questions):
        return False
    for reply, follow_up in zip(replies, question.follow_up_questions):
        if reply and reply not in follow_up.options:
            return False
    return True


def validate(question: Question, answer: Any) -> bool:
    """Check that an answer has the shape the question variant requires.

    Correctness is not judged here: an empty blank or an unanswered
    follow-up is structurally valid.
    """
    if not isinstance(answer, Mapping):
        return False
    if question.type == QuestionType.categorize:
        return _validate_categorize(question, answer)
    if question.type == QuestionType.cloze:
        return _validate_cloze(question, answer)
    if question.type == QuestionType.comprehension:
        return _validate_comprehension(question, answer)
    raise TypeError(f"Unsupported question type: {question.type!r}")
