from formgrader.services.models import ClozeQuestion, QuestionType
from formgrader.services.text_utils import count_blanks


def test_count_blanks_runs():
    assert count_blanks("The capital of ___ is ___.") == 2
    assert count_blanks("a __ b ______ c _ d") == 2
    assert count_blanks("no blanks here") == 0
    assert count_blanks("") == 0
    assert count_blanks(None) == 0


def test_cloze_blanks_follow_text():
    question = ClozeQuestion(id="q", title="t", text="___ and ___")
    assert question.type == QuestionType.cloze
    assert question.blanks == 2
    question.text = "only ____ here"
    assert question.blanks == 1


def test_set_text_resizes_key():
    question = ClozeQuestion(id="q", title="t", text="__ __ __", correct_answer=["a", "b", "c"])
    question.set_text("__ and __")
    assert question.blanks == 2
    assert question.correct_answer == ["a", "b"]
    question.set_text("__ __ __ __")
    assert question.correct_answer == ["a", "b", "", ""]
