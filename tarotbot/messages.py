from typing import Dict, List, Sequence

from .models import Card, Language, Reading

GREETING: Dict[str, str] = {
    "pt": (
        "Olá! 🔮 Eu sou sua taróloga virtual.\n"
        "Envie /shuffle para tirar três cartas, /last para rever sua última tiragem "
        "e /history para ver suas leituras recentes. "
        "Ou simplesmente me faça uma pergunta."
    ),
    "en": (
        "Hello! 🔮 I'm your virtual tarot reader.\n"
        "Send /shuffle to draw three cards, /last to see your last spread "
        "and /history to see your recent readings. "
        "Or just ask me a question."
    ),
}

NO_CARDS_YET: Dict[str, str] = {
    "pt": "Você ainda não tirou nenhuma carta. Envie /shuffle para começar.",
    "en": "You haven't drawn any cards yet. Send /shuffle to begin.",
}

LAST_SPREAD_HEADER: Dict[str, str] = {
    "pt": "Suas últimas cartas:",
    "en": "Your last cards:",
}

NO_HISTORY: Dict[str, str] = {
    "pt": "Você ainda não tem leituras registradas.",
    "en": "You don't have any readings yet.",
}

HISTORY_HEADER: Dict[str, str] = {
    "pt": "Suas leituras recentes:",
    "en": "Your recent readings:",
}

AI_APOLOGY: Dict[str, str] = {
    "pt": "Desculpe, não consegui interpretar suas cartas agora. Tente novamente em instantes. 🙏",
    "en": "Sorry, I couldn't interpret your cards right now. Please try again in a moment. 🙏",
}

STORE_ERROR: Dict[str, str] = {
    "pt": "Algo deu errado do meu lado. Por favor, tente novamente mais tarde.",
    "en": "Something went wrong on my side. Please try again later.",
}


def text_for(table: Dict[str, str], language: Language) -> str:
    return table.get(language) or table["en"]


def format_spread(cards: Sequence[Card]) -> str:
    """One line per card: name and meaning."""
    return "\n".join(f"🔮 *{c.name}*: {c.meaning}" for c in cards)


def format_last_spread(card_names: Sequence[str], language: Language) -> str:
    """Names only, no meanings."""
    lines = [text_for(LAST_SPREAD_HEADER, language)]
    lines.extend(f"🃏 {name}" for name in card_names)
    return "\n".join(lines)


def _format_date(created_at: str, language: Language) -> str:
    date = created_at[:10]  # ISO yyyy-mm-dd
    if language == "pt" and len(date) == 10:
        year, month, day = date.split("-")
        return f"{day}/{month}/{year}"
    return date


def format_history(readings: List[Reading], language: Language) -> str:
    """Newest first, one line per reading: date, question, cards."""
    lines = [text_for(HISTORY_HEADER, language)]
    for r in readings:
        lines.append(f"📅 {_format_date(r.created_at, language)} - {r.question}: {', '.join(r.card_names)}")
    return "\n".join(lines)
