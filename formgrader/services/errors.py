from __future__ import annotations

from typing import Any, Dict, List, Sequence


class FormDefinitionError(ValueError):
    """Raised when author input cannot be turned into a form."""


class SubmissionError(Exception):
    code = "submission-error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message}


class FormNotFound(SubmissionError):
    code = "form-not-found"
    status_code = 404

    def __init__(self, form_id: str):
        super().__init__("Form not found")
        self.form_id = form_id


class FormInactive(SubmissionError):
    code = "form-inactive"
    status_code = 404

    def __init__(self, form_id: str):
        super().__init__("Form is not accepting responses")
        self.form_id = form_id


class AnswersMissing(SubmissionError):
    code = "answers-missing"
    status_code = 400

    def __init__(self) -> None:
        super().__init__("Answers are required")


class AnswerInvalid(SubmissionError):
    code = "answer-invalid"
    status_code = 400

    def __init__(self, question_indexes: Sequence[Any]):
        self.question_indexes: List[Any] = list(question_indexes)
        listed = ", ".join(str(index) for index in self.question_indexes)
        super().__init__(f"Malformed answer for question(s): {listed}")

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["questionIndexes"] = self.question_indexes
        return payload


class RateLimited(SubmissionError):
    code = "rate-limited"
    status_code = 429

    def __init__(self, retry_after: float):
        super().__init__("Too many submissions. Please try again later.")
        self.retry_after = retry_after
