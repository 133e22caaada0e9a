"""Nine-card major arcana deck loader + helpers.

- Loads deck JSON from tarotbot/data/deck.json
- Provides: load_deck(), Deck.sample(k), Deck.get(name), Deck.filter_by_names(names)
"""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .models import Card
from .utils.rng import sample_without_replacement


DATA_PATH = Path(__file__).resolve().parent / "data" / "deck.json"
DECK_SIZE = 9


class DeckError(ValueError):
    pass


def _load_json(path: Path) -> Dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise DeckError(f"Deck data file not found at: {path}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DeckError(f"Invalid JSON in {path}: {e}") from e

    if "cards" not in data or not isinstance(data["cards"], list) or len(data["cards"]) != DECK_SIZE:
        raise DeckError(f"Deck data must contain exactly {DECK_SIZE} cards.")
    return data


def _validate(cards: List[Card]) -> None:
    names = [c.name for c in cards]
    if len(names) != len(set(names)):
        raise DeckError("Duplicate card names detected.")
    for c in cards:
        if not c.name.strip() or not c.meaning.strip():
            raise DeckError(f"Card {c.name!r} must have a name and a meaning")


class Deck:
    """Fixed, ordered catalog of cards.

    The catalog order is the order of the data file. Draws never mutate it.
    """

    def __init__(self, cards: Iterable[Card], rng: Optional[random.Random] = None):
        self._cards: List[Card] = list(cards)
        _validate(self._cards)
        self._by_name: Dict[str, Card] = {c.name: c for c in self._cards}
        self._rng = rng

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    @property
    def cards(self) -> List[Card]:
        return list(self._cards)

    def names(self) -> List[str]:
        return [c.name for c in self._cards]

    def get(self, name: str) -> Card:
        try:
            return self._by_name[name]
        except KeyError:
            raise DeckError(f"Unknown card: {name}") from None

    def sample(self, k: int) -> List[Card]:
        """Return k distinct cards chosen uniformly at random."""
        if k < 0 or k > len(self._cards):
            raise DeckError(f"Cannot draw {k} cards from a deck of {len(self._cards)}")
        return sample_without_replacement(self._cards, k, self._rng)

    def filter_by_names(self, names: Iterable[str]) -> List[Card]:
        """Cards whose names are in `names`, in catalog order.

        Unknown names are skipped; the order of `names` is not preserved.
        """
        wanted = set(names)
        return [c for c in self._cards if c.name in wanted]


def load_deck(path: Path = DATA_PATH, rng: Optional[random.Random] = None) -> Deck:
    data = _load_json(path)
    try:
        cards = [Card(**c) for c in data["cards"]]
    except (TypeError, ValueError) as e:
        raise DeckError(f"Invalid card entry in {path}: {e}") from e
    return Deck(cards, rng=rng)
