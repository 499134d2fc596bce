import pytest

from retain.domain.errors import DeckFormatError
from retain.infrastructure.deck_loader import load_deck, parse_deck

DECK = """
tags: [biology]
cards:
  - question: What is ATP?
    answer: The cell's energy currency
    tags: [cells]
  - question: What does DNA stand for?
    answer: Deoxyribonucleic acid
"""


def test_parse_deck_merges_tags():
    specs = parse_deck(DECK)

    assert len(specs) == 2
    assert specs[0].question == "What is ATP?"
    assert specs[0].tags == frozenset({"biology", "cells"})
    assert specs[1].tags == frozenset({"biology"})


def test_parse_deck_accepts_bare_list():
    specs = parse_deck("- {question: Q, answer: A}\n")

    assert [(s.question, s.answer) for s in specs] == [("Q", "A")]


@pytest.mark.parametrize(
    "text",
    [
        "cards: [\n",  # invalid YAML
        "just a string",
        "cards:\n  - question: Q\n",
        "cards:\n  - plain entry\n",
    ],
)
def test_parse_deck_rejects_malformed(text):
    with pytest.raises(DeckFormatError):
        parse_deck(text)


def test_load_deck_from_file(tmp_path):
    path = tmp_path / "deck.yaml"
    path.write_text(DECK)

    assert len(load_deck(path)) == 2


def test_load_deck_missing_file(tmp_path):
    with pytest.raises(DeckFormatError):
        load_deck(tmp_path / "missing.yaml")
