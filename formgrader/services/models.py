from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .text_utils import count_blanks


class QuestionType(str, Enum):
    categorize = "categorize"
    cloze = "cloze"
    comprehension = "comprehension"


class FormMode(str, Enum):
    survey = "survey"
    test = "test"


@dataclass
class Category:
    name: str
    items: List[str] = field(default_factory=list)


@dataclass
class FollowUpQuestion:
    question: str
    options: List[str] = field(default_factory=list)
    correct_answer: str = ""


@dataclass
class CategorizeQuestion:
    id: str
    title: str
    items: List[str] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)
    description: Optional[str] = None
    points: int = 1
    type: QuestionType = field(default=QuestionType.categorize, init=False)

    def answer_key(self) -> List[List[str]]:
        return [list(category.items) for category in self.categories]


@dataclass
class ClozeQuestion:
    id: str
    title: str
    text: str = ""
    correct_answer: List[str] = field(default_factory=list)
    description: Optional[str] = None
    points: int = 1
    type: QuestionType = field(default=QuestionType.cloze, init=False)

    @property
    def blanks(self) -> int:
        return count_blanks(self.text)

    def set_text(self, text: str) -> None:
        """Replace the text and keep one key entry per blank."""
        self.text = text
        count = self.blanks
        keys = list(self.correct_answer[:count])
        keys.extend("" for _ in range(count - len(keys)))
        self.correct_answer = keys

    def answer_key(self) -> List[str]:
        return list(self.correct_answer)


@dataclass
class ComprehensionQuestion:
    id: str
    title: str
    passage: str = ""
    follow_up_questions: List[FollowUpQuestion] = field(default_factory=list)
    description: Optional[str] = None
    points: int = 1
    type: QuestionType = field(default=QuestionType.comprehension, init=False)

    def answer_key(self) -> List[str]:
        return [follow_up.correct_answer for follow_up in self.follow_up_questions]


Question = Union[CategorizeQuestion, ClozeQuestion, ComprehensionQuestion]


@dataclass
class FormSettings:
    allow_anonymous: bool = True
    show_results: bool = True


@dataclass
class Form:
    id: str
    title: str
    mode: FormMode = FormMode.survey
    questions: List[Question] = field(default_factory=list)
    settings: FormSettings = field(default_factory=FormSettings)
    description: Optional[str] = None
    is_active: bool = True

    @property
    def is_test(self) -> bool:
        return self.mode == FormMode.test


@dataclass
class Submitter:
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


@dataclass
class Response:
    id: str
    form_id: str
    answers: Dict[int, Any]
    created_at: str
    score: Optional[float] = None
    max_score: Optional[float] = None
    submitter: Submitter = field(default_factory=Submitter)


@dataclass
class QuestionScore:
    index: int
    question: Question
    fraction: float

    @property
    def credit(self) -> float:
        return self.fraction * self.question.points


@dataclass
class ScoreSummary:
    score: float
    max_score: float
    raw_score: float = 0.0
    per_question: List[QuestionScore] = field(default_factory=list)
