from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from .errors import FormDefinitionError
from .models import (
    CategorizeQuestion,
    Category,
    ClozeQuestion,
    ComprehensionQuestion,
    FollowUpQuestion,
    Form,
    FormMode,
    FormSettings,
    Question,
    QuestionType,
)

logger = logging.getLogger(__name__)


def _strings(raw: Any) -> List[str]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise FormDefinitionError(f"Expected a list of strings, got {type(raw).__name__}")
    return ["" if value is None else str(value) for value in raw]


def _points(raw: Any) -> int:
    if raw is None:
        return 1
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or int(raw) != raw:
        raise FormDefinitionError(f"Points must be a positive integer, got {raw!r}")
    if raw < 1:
        raise FormDefinitionError(f"Points must be a positive integer, got {raw!r}")
    return int(raw)


def _parse_categories(raw: Any) -> List[Category]:
    categories: List[Category] = []
    for entry in raw or []:
        if not isinstance(entry, Mapping):
            raise FormDefinitionError("Category must be an object with name and items")
        categories.append(
            Category(
                name=(entry.get("name") or "").strip(),
                items=_strings(entry.get("items")),
            )
        )
    return categories


def _parse_follow_ups(raw: Any) -> List[FollowUpQuestion]:
    follow_ups: List[FollowUpQuestion] = []
    for entry in raw or []:
        if not isinstance(entry, Mapping):
            raise FormDefinitionError("Follow-up question must be an object")
        follow_ups.append(
            FollowUpQuestion(
                question=(entry.get("question") or "").strip(),
                options=_strings(entry.get("options")),
                correct_answer=str(entry.get("correctAnswer") or ""),
            )
        )
    return follow_ups


def parse_question(raw: Mapping[str, Any], position: int = 0) -> Question:
    if not isinstance(raw, Mapping):
        raise FormDefinitionError(f"Question {position} must be an object")
    try:
        q_type = QuestionType(raw.get("type"))
    except ValueError:
        raise FormDefinitionError(
            f"Question {position} has unsupported type {raw.get('type')!r}"
        ) from None
    common = {
        "id": str(raw.get("id") or f"q{position + 1}"),
        "title": (raw.get("title") or "").strip(),
        "description": raw.get("description") or None,
        "points": _points(raw.get("points")),
    }
    if q_type == QuestionType.categorize:
        question: Question = CategorizeQuestion(
            items=_strings(raw.get("items")),
            categories=_parse_categories(raw.get("categories")),
            **common,
        )
    elif q_type == QuestionType.cloze:
        # "blanks" in the input is ignored; it is derived from the text
        question = ClozeQuestion(
            text=raw.get("text") or "",
            correct_answer=_strings(raw.get("correctAnswer")),
            **common,
        )
    else:
        question = ComprehensionQuestion(
            passage=raw.get("passage") or "",
            follow_up_questions=_parse_follow_ups(raw.get("followUpQuestions")),
            **common,
        )
    for warning in check_key_consistency(question):
        logger.warning("Question %s (%s): %s", question.id, question.type.value, warning)
    return question


def parse_form(raw: Mapping[str, Any]) -> Form:
    if not isinstance(raw, Mapping):
        raise FormDefinitionError("Form must be an object")
    form_id = raw.get("id")
    if not form_id:
        raise FormDefinitionError("Form id is required")
    try:
        mode = FormMode(raw.get("mode") or FormMode.survey.value)
    except ValueError:
        raise FormDefinitionError(f"Unsupported form mode {raw.get('mode')!r}") from None
    settings_raw = raw.get("settings") or {}
    settings = FormSettings(
        allow_anonymous=bool(settings_raw.get("allowAnonymous", True)),
        show_results=bool(settings_raw.get("showResults", True)),
    )
    questions_raw = raw.get("questions") or []
    if not isinstance(questions_raw, list):
        raise FormDefinitionError("Form questions must be a list")
    return Form(
        id=str(form_id),
        title=(raw.get("title") or "").strip(),
        description=raw.get("description") or None,
        mode=mode,
        questions=[parse_question(q, idx) for idx, q in enumerate(questions_raw)],
        settings=settings,
        is_active=bool(raw.get("isActive", True)),
    )


def check_key_consistency(question: Question) -> List[str]:
    """Describe answer-key problems an author should fix before publishing.

    Drafts are allowed to be inconsistent, so this never raises.
    """
    warnings: List[str] = []
    if question.type == QuestionType.categorize:
        pool = set(question.items)
        seen: Dict[str, str] = {}
        for category in question.categories:
            for item in category.items:
                if item not in pool:
                    warnings.append(f"item {item!r} in category {category.name!r} is not in the pool")
                if item in seen and seen[item] != category.name:
                    warnings.append(
                        f"item {item!r} is keyed to both {seen[item]!r} and {category.name!r}"
                    )
                seen.setdefault(item, category.name)
    elif question.type == QuestionType.cloze:
        if len(question.correct_answer) != question.blanks:
            warnings.append(
                f"{len(question.correct_answer)} key entries for {question.blanks} blanks"
            )
    elif question.type == QuestionType.comprehension:
        for idx, follow_up in enumerate(question.follow_up_questions):
            if follow_up.correct_answer not in follow_up.options:
                warnings.append(f"follow-up {idx} correct answer is not one of its options")
    return warnings


def question_to_dict(question: Question, include_key: bool = True) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": question.id,
        "type": question.type.value,
        "title": question.title,
        "description": question.description,
        "points": question.points,
    }
    if question.type == QuestionType.categorize:
        payload["items"] = list(question.items)
        payload["categories"] = [
            {"name": category.name, "items": list(category.items)}
            if include_key
            else {"name": category.name}
            for category in question.categories
        ]
    elif question.type == QuestionType.cloze:
        payload["text"] = question.text
        payload["blanks"] = question.blanks
        if include_key:
            payload["correctAnswer"] = list(question.correct_answer)
    elif question.type == QuestionType.comprehension:
        payload["passage"] = question.passage
        follow_ups = []
        for follow_up in question.follow_up_questions:
            entry: Dict[str, Any] = {
                "question": follow_up.question,
                "options": list(follow_up.options),
            }
            if include_key:
                entry["correctAnswer"] = follow_up.correct_answer
            follow_ups.append(entry)
        payload["followUpQuestions"] = follow_ups
    return payload


def form_to_dict(form: Form, include_key: bool = True) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": form.id,
        "title": form.title,
        "description": form.description,
        "mode": form.mode.value,
        "questions": [question_to_dict(q, include_key=include_key) for q in form.questions],
        "settings": {
            "allowAnonymous": form.settings.allow_anonymous,
            "showResults": form.settings.show_results,
        },
    }
    if include_key:
        payload["isActive"] = form.is_active
    return payload


def public_form_view(form: Form) -> Dict[str, Any]:
    return form_to_dict(form, include_key=False)
