import pytest

from tarotbot.language import LanguageDetector, detect


@pytest.mark.parametrize("text", [
    "olá",
    "Oi, tudo bem?",
    "OBRIGADO",
    "Você pode ler minhas cartas?",
    "quero saber sobre o amor",
    "coração",
])
def test_portuguese(text):
    assert detect(text) == "pt"


@pytest.mark.parametrize("text", [
    "Hello there",
    "/shuffle",
    "What does the Tower mean for my career?",
    "solar boat",  # contains 'ola' and 'boa' only inside words
    "",
])
def test_english(text):
    assert detect(text) == "en"


def test_resolution_is_cached_per_user():
    detector = LanguageDetector()
    assert detector.resolve_language("5511999990000", "olá") == "pt"
    assert detector.resolve_language("5511999990000", "Hello, what about my job?") == "pt"
    assert detector.cached("5511999990000") == "pt"


def test_users_are_independent():
    detector = LanguageDetector()
    assert detector.resolve_language("a", "Hello") == "en"
    assert detector.resolve_language("b", "Oi") == "pt"
    assert detector.resolve_language("a", "obrigado") == "en"
    assert detector.cached("c") is None
