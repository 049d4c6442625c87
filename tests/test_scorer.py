import pytest

from formgrader.services.form_loader import parse_question
from formgrader.services.scorer import round_half_up, score, score_submission

from helpers import CATEGORIZE, CLOZE, COMPREHENSION


def test_cloze_case_insensitive_full_credit():
    question = parse_question(CLOZE)
    fraction = score(question, {"blanks": ["france", "Paris"]})
    assert fraction == 1.0
    assert fraction * question.points == 2.0


def test_cloze_trims_and_partial_credit():
    question = parse_question(CLOZE)
    assert score(question, {"blanks": ["  FRANCE ", "Lyon"]}) == 0.5
    assert score(question, {"blanks": ["", ""]}) == 0.0
    assert score(question, {"blanks": ["France"]}) == 0.5


def test_cloze_empty_key_scores_zero():
    question = parse_question(dict(CLOZE, text="no blanks", correctAnswer=[]))
    assert score(question, {"blanks": ["anything"]}) == 0.0


def test_categorize_full_match():
    question = parse_question(CATEGORIZE)
    assert score(question, {"categories": [["Apple"], ["Car"]]}) == 1.0


def test_categorize_order_insensitive_but_multiset():
    raw = dict(
        CATEGORIZE,
        items=["Apple", "Banana", "Car"],
        categories=[
            {"name": "Fruit", "items": ["Apple", "Banana"]},
            {"name": "Vehicle", "items": ["Car"]},
        ],
    )
    question = parse_question(raw)
    assert score(question, {"categories": [["Banana", "Apple"], ["Car"]]}) == 1.0
    assert score(question, {"categories": [["Apple", "Apple", "Banana"], ["Car"]]}) == 0.5


def test_categorize_monotonic_in_mismatches():
    raw = dict(
        CATEGORIZE,
        items=["a", "b", "c"],
        categories=[{"name": n, "items": [n]} for n in ("a", "b", "c")],
    )
    question = parse_question(raw)
    fractions = [
        score(question, {"categories": [["a"], ["b"], ["c"]]}),
        score(question, {"categories": [["b"], ["a"], ["c"]]}),
        score(question, {"categories": [["b"], ["c"], ["a"]]}),
    ]
    assert fractions[0] == 1.0
    assert fractions[0] > fractions[1] > fractions[2]
    assert fractions[2] == 0.0


def test_categorize_correctly_empty_category_counts():
    raw = dict(CATEGORIZE, categories=[{"name": "Fruit", "items": ["Apple"]}, {"name": "None", "items": []}])
    question = parse_question(raw)
    assert score(question, {"categories": [["Apple"], []]}) == 1.0


def test_comprehension_wrong_option_scores_zero():
    question = parse_question(COMPREHENSION)
    assert score(question, {"followUpAnswers": ["A"]}) == 0.0
    assert score(question, {"followUpAnswers": ["B"]}) == 1.0
    assert score(question, {"followUpAnswers": ["b"]}) == 0.0


@pytest.mark.parametrize(
    "raw, answer",
    [
        (dict(CATEGORIZE, categories=[]), {"categories": []}),
        (dict(CLOZE, correctAnswer=[]), {"blanks": ["x"]}),
        (dict(COMPREHENSION, followUpQuestions=[]), {"followUpAnswers": []}),
    ],
)
def test_empty_keys_score_zero(raw, answer):
    assert score(parse_question(raw), answer) == 0.0


def test_score_is_deterministic():
    question = parse_question(CLOZE)
    answer = {"blanks": ["France", "Rome"]}
    assert score(question, answer) == score(question, answer)
    assert answer == {"blanks": ["France", "Rome"]}


def test_submission_skips_unattempted_questions():
    questions = [parse_question(raw) for raw in (CLOZE, CATEGORIZE, COMPREHENSION)]
    summary = score_submission(questions, {0: {"blanks": ["France", "Paris"]}, 2: {"followUpAnswers": ["A"]}})
    assert summary.max_score == 2 + 3
    assert summary.score == 2.0
    assert [item.index for item in summary.per_question] == [0, 2]


def test_submission_rounds_to_two_decimals():
    raw = dict(
        COMPREHENSION,
        points=1,
        followUpQuestions=[{"question": str(i), "options": ["A", "B"], "correctAnswer": "A"} for i in range(3)],
    )
    summary = score_submission([parse_question(raw)], {0: {"followUpAnswers": ["A", "B", "B"]}})
    assert summary.score == 0.33


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.125, 2) == 0.13


def test_comprehension_blank_reply_never_matches_blank_key():
    raw = dict(COMPREHENSION, followUpQuestions=[{"question": "Q", "options": ["A", "B"]}])
    question = parse_question(raw)
    assert score(question, {"followUpAnswers": [""]}) == 0.0
    assert score(question, {"followUpAnswers": [None]}) == 0.0


def test_submission_keeps_unrounded_total():
    raw = dict(
        COMPREHENSION,
        points=1,
        followUpQuestions=[{"question": str(i), "options": ["A", "B"], "correctAnswer": "A"} for i in range(3)],
    )
    summary = score_submission([parse_question(raw)], {0: {"followUpAnswers": ["A", "B", "B"]}})
    assert summary.raw_score == pytest.approx(1 / 3)
    assert summary.score == 0.33
