import json

import pytest

from study_app.core.flashcard_importer import load_flashcards_from_file, parse_flashcard_text
from study_app.core.quiz_importer import QuizImportError


def test_parse_json_cards():
    text = json.dumps(
        [
            {"id": 7, "front": "H2O", "back": "Water", "explanation": "Chemistry"},
            {"id": 8, "front": "NaCl", "back": "Salt"},
        ]
    )
    cards = parse_flashcard_text(text)
    assert [card.id for card in cards] == [7, 8]
    assert cards[0].explanation == "Chemistry"
    assert cards[1].explanation is None


def test_invalid_json_card_is_an_import_error():
    with pytest.raises(QuizImportError):
        parse_flashcard_text(json.dumps([{"id": 1, "front": "H2O"}]))


def test_parse_prefixed_blocks():
    text = """
Front: Capital of France
Back: Paris
Explanation: Largest city too.

Q: 2 + 2
A: 4
"""
    cards = parse_flashcard_text(text)
    assert [(card.id, card.front, card.back) for card in cards] == [
        (1, "Capital of France", "Paris"),
        (2, "2 + 2", "4"),
    ]
    assert cards[0].explanation == "Largest city too."


def test_parse_tab_separated_and_bare_lines():
    text = "Osmosis\tWater moving across a membrane\n\nMitosis\nCell division\nProduces two cells"
    cards = parse_flashcard_text(text)
    assert cards[0].front == "Osmosis"
    assert cards[0].back == "Water moving across a membrane"
    assert cards[1].back == "Cell division"
    assert cards[1].explanation == "Produces two cells"


def test_incomplete_blocks_are_skipped():
    cards = parse_flashcard_text("Front: lonely\n\nFront: Sun\nBack: Star")
    assert [(card.id, card.front) for card in cards] == [(1, "Sun")]


@pytest.mark.parametrize("text", ["", "   \n ", "Front: only a front"])
def test_unparseable_text_rejected(text):
    with pytest.raises(QuizImportError):
        parse_flashcard_text(text)


def test_load_from_file(tmp_path):
    path = tmp_path / "cards.txt"
    path.write_text("Q: Sun\nA: Star\n", encoding="utf-8")
    assert load_flashcards_from_file(path)[0].back == "Star"
    with pytest.raises(QuizImportError):
        load_flashcards_from_file(tmp_path / "missing.txt")
