from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import AnswerInvalid, AnswersMissing, FormInactive, FormNotFound
from .form_loader import public_form_view
from .form_store import FormStore
from .models import Form, Response, ScoreSummary, Submitter
from .rate_limit import SubmissionLimiter
from .response_store import ResponseStore
from .scorer import round_half_up, score_submission
from .validator import validate

logger = logging.getLogger(__name__)


def _make_id() -> str:
    return uuid.uuid4().hex


@dataclass
class SubmissionResult:
    form: Form
    summary: Optional[ScoreSummary] = None
    response_id: Optional[str] = None

    @property
    def percentage(self) -> Optional[int]:
        if self.summary is None or not self.summary.max_score:
            return None
        return int(round_half_up(self.summary.raw_score / self.summary.max_score * 100))

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"submitted": True}
        if self.summary is None:
            return payload
        payload["score"] = self.summary.score
        payload["maxScore"] = self.summary.max_score
        if self.percentage is not None:
            payload["percentage"] = self.percentage
        if self.form.settings.show_results:
            payload["correctAnswers"] = {
                str(item.index): item.question.answer_key() for item in self.summary.per_question
            }
        return payload


class SubmissionPipeline:
    def __init__(
        self,
        form_store: FormStore,
        response_store: ResponseStore,
        limiter: Optional[SubmissionLimiter] = None,
    ):
        self.form_store = form_store
        self.response_store = response_store
        self.limiter = limiter

    def load_form(self, form_id: str) -> Form:
        form = self.form_store.get_form(form_id)
        if form is None:
            logger.info("Form %s not found", form_id)
            raise FormNotFound(form_id)
        if not form.is_active:
            logger.info("Form %s is inactive", form_id)
            raise FormInactive(form_id)
        return form

    def get_public_form(self, form_id: str) -> Dict[str, Any]:
        return public_form_view(self.load_form(form_id))

    def submit(
        self,
        form_id: str,
        answers: Any,
        submitter: Optional[Submitter] = None,
    ) -> SubmissionResult:
        submitter = submitter or Submitter()
        if self.limiter is not None:
            self.limiter.consume(submitter.ip_address or "anonymous")
        form, normalized, summary = self._evaluate(form_id, answers)
        response = Response(
            id=_make_id(),
            form_id=form.id,
            answers=normalized,
            created_at=datetime.now(timezone.utc).isoformat(),
            score=summary.score if summary else None,
            max_score=summary.max_score if summary else None,
            submitter=submitter,
        )
        response_id = self.response_store.save_response(response)
        logger.info(
            "Stored response %s for form %s (score=%s, max_score=%s)",
            response_id,
            form.id,
            response.score,
            response.max_score,
        )
        return SubmissionResult(form=form, summary=summary, response_id=response_id)

    def preview(self, form_id: str, answers: Any) -> SubmissionResult:
        """Grade answers exactly like ``submit`` but store nothing."""
        form, _, summary = self._evaluate(form_id, answers)
        return SubmissionResult(form=form, summary=summary)

    def _evaluate(
        self, form_id: str, answers: Any
    ) -> Tuple[Form, Dict[int, Any], Optional[ScoreSummary]]:
        if answers is None or not isinstance(answers, Mapping):
            logger.info("Rejected submission for form %s: answers missing", form_id)
            raise AnswersMissing()
        form = self.load_form(form_id)
        normalized = self._validate_answers(form, answers)
        summary = score_submission(form.questions, normalized) if form.is_test else None
        return form, normalized, summary

    def _validate_answers(self, form: Form, answers: Mapping[Any, Any]) -> Dict[int, Any]:
        normalized: Dict[int, Any] = {}
        invalid: List[Any] = []
        for raw_index, answer in answers.items():
            index = _parse_index(raw_index)
            if index is None or not 0 <= index < len(form.questions):
                invalid.append(raw_index)
                continue
            if answer is None:
                # null means the question was skipped
                continue
            if not validate(form.questions[index], answer):
                invalid.append(index)
                continue
            normalized[index] = answer
        if invalid:
            logger.info("Rejected submission for form %s: invalid answers %s", form.id, invalid)
            raise AnswerInvalid(invalid)
        return normalized


def _parse_index(raw: Any) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdecimal():
        return int(raw.strip())
    return None
