import json
from collections import Counter

import pytest

from tarotbot.deck import Deck, DeckError, load_deck
from tarotbot.models import Card
from tarotbot.utils.rng import seeded_random

EXPECTED_NAMES = [
    "The Fool", "The Magician", "The High Priestess", "The Lovers", "Death",
    "The Tower", "The Sun", "The Moon", "The Star",
]


def test_deck_has_nine_named_cards():
    deck = load_deck()
    assert len(deck) == 9
    assert deck.names() == EXPECTED_NAMES
    assert all(c.meaning for c in deck)


def test_sample_three_distinct_cards(deck):
    for _ in range(50):
        drawn = deck.sample(3)
        names = [c.name for c in drawn]
        assert len(names) == 3
        assert len(set(names)) == 3
        assert set(names) <= set(EXPECTED_NAMES)


def test_sample_whole_deck_is_a_permutation(deck):
    drawn = deck.sample(9)
    assert sorted(c.name for c in drawn) == sorted(EXPECTED_NAMES)


def test_sample_does_not_reorder_catalog(deck):
    deck.sample(5)
    assert deck.names() == EXPECTED_NAMES


@pytest.mark.parametrize("k", [10, -1])
def test_sample_rejects_impossible_sizes(deck, k):
    with pytest.raises(DeckError):
        deck.sample(k)


def test_sample_is_roughly_uniform():
    deck = load_deck(rng=seeded_random("uniformity"))
    counts = Counter(deck.sample(1)[0].name for _ in range(9000))
    assert set(counts) == set(EXPECTED_NAMES)
    for name in EXPECTED_NAMES:
        assert 800 < counts[name] < 1200, counts


def test_seeded_decks_draw_the_same_cards():
    a = load_deck(rng=seeded_random("same"))
    b = load_deck(rng=seeded_random("same"))
    assert [c.name for c in a.sample(3)] == [c.name for c in b.sample(3)]


def test_filter_by_names_uses_catalog_order(deck):
    cards = deck.filter_by_names(["The Star", "The Fool", "Not A Card"])
    assert [c.name for c in cards] == ["The Fool", "The Star"]


def test_get_unknown_card(deck):
    assert deck.get("Death").meaning == "Endings, transformation"
    with pytest.raises(DeckError):
        deck.get("The Hermit")


def test_duplicate_names_rejected():
    with pytest.raises(DeckError, match="Duplicate"):
        Deck([Card(name="The Sun", meaning="a"), Card(name="The Sun", meaning="b")])


def test_cards_are_immutable(deck):
    card = deck.get("The Sun")
    with pytest.raises(Exception):
        card.name = "The Moon"


def test_load_deck_validates_file(tmp_path):
    bad = tmp_path / "deck.json"
    bad.write_text(json.dumps({"cards": [{"name": "The Fool", "meaning": "x"}]}), encoding="utf-8")
    with pytest.raises(DeckError, match="exactly 9"):
        load_deck(bad)

    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(DeckError, match="Invalid JSON"):
        load_deck(bad)

    with pytest.raises(DeckError, match="not found"):
        load_deck(tmp_path / "missing.json")
