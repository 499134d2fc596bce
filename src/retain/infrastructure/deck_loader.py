"""
YAML deck loader.

A deck file lists cards to create:

    tags: [biology]          # optional, applied to every card
    cards:
      - question: What is ATP?
        answer: The cell's energy currency
        tags: [cells]
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from retain.application.cards import parse_tags
from retain.domain.errors import DeckFormatError

logger = logging.getLogger(__name__)


@dataclass
class CardSpec:
    question: str
    answer: str
    tags: frozenset[str] = field(default_factory=frozenset)


def parse_deck(text: str, source: str = "<deck>") -> list[CardSpec]:
    """
    Parse deck YAML into card specs.

    Raises:
        DeckFormatError: On invalid YAML or a card without question/answer.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DeckFormatError(f"{source}: invalid YAML: {e}") from e

    if isinstance(data, list):
        data = {"cards": data}
    if not isinstance(data, dict) or not isinstance(data.get("cards"), list):
        raise DeckFormatError(f"{source}: expected a 'cards' list")

    deck_tags = parse_tags(data.get("tags"))
    specs: list[CardSpec] = []

    for idx, card in enumerate(data["cards"], start=1):
        if not isinstance(card, dict):
            raise DeckFormatError(f"{source}: card #{idx} is not a mapping")

        question = str(card.get("question") or "").strip()
        answer = str(card.get("answer") or "").strip()
        if not question or not answer:
            raise DeckFormatError(f"{source}: card #{idx} needs both question and answer")

        specs.append(
            CardSpec(question=question, answer=answer, tags=deck_tags | parse_tags(card.get("tags")))
        )

    logger.debug(f"Parsed {len(specs)} cards from {source}")
    return specs


def load_deck(path: Path) -> list[CardSpec]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise DeckFormatError(f"Could not read deck {path}: {e}") from e
    return parse_deck(text, source=str(path))
