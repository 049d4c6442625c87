from formgrader.services.form_loader import parse_form

CLOZE = {
    "id": "q1",
    "type": "cloze",
    "title": "Capitals",
    "text": "The capital of ___ is ___.",
    "correctAnswer": ["France", "Paris"],
    "points": 2,
}

CATEGORIZE = {
    "id": "q2",
    "type": "categorize",
    "title": "Sort",
    "items": ["Apple", "Car"],
    "categories": [
        {"name": "Fruit", "items": ["Apple"]},
        {"name": "Vehicle", "items": ["Car"]},
    ],
}

COMPREHENSION = {
    "id": "q3",
    "type": "comprehension",
    "title": "Read",
    "passage": "Some passage.",
    "followUpQuestions": [{"question": "Q", "options": ["A", "B"], "correctAnswer": "B"}],
    "points": 3,
}


def make_form(mode="test", show_results=True, is_active=True, questions=None):
    return parse_form(
        {
            "id": "form-1",
            "title": "Sample",
            "mode": mode,
            "isActive": is_active,
            "settings": {"allowAnonymous": True, "showResults": show_results},
            "questions": questions if questions is not None else [CLOZE, CATEGORIZE, COMPREHENSION],
        }
    )
