"""Heuristic Portuguese/English detection, memoized per user."""

from __future__ import annotations

import logging
import re
from typing import Dict, Optional

from .models import Language

log = logging.getLogger("tarotbot.language")

_PT_DIACRITICS = re.compile(r"[ãõçáéíóúâêôà]", re.IGNORECASE)

_PT_WORDS = (
    "oi", "ola", "olá", "eu", "voce", "você", "vc", "meu", "minha", "meus", "minhas",
    "nosso", "nossa", "ele", "ela", "eles", "elas", "obrigado", "obrigada", "bom", "boa",
    "dia", "tarde", "noite", "tudo", "sim", "nao", "não", "quero", "queria", "estou",
    "esta", "está", "tenho", "sou", "sobre", "qual", "quando", "porque", "como",
    "pode", "posso", "cartas", "sorte", "amor", "trabalho", "vida", "futuro",
)
_PT_LEXICON = re.compile(r"\b(?:" + "|".join(re.escape(w) for w in _PT_WORDS) + r")\b", re.IGNORECASE)


def detect(text: str) -> Language:
    """Binary classification, no confidence score."""
    text = text or ""
    if _PT_DIACRITICS.search(text) or _PT_LEXICON.search(text):
        return "pt"
    return "en"


class LanguageDetector:
    """Caches the first detected language per user for the process lifetime."""

    def __init__(self) -> None:
        self._assignments: Dict[str, Language] = {}

    def cached(self, user: str) -> Optional[Language]:
        return self._assignments.get(user)

    def resolve_language(self, user: str, text: str) -> Language:
        lang = self._assignments.get(user)
        if lang is not None:
            return lang
        lang = detect(text)
        self._assignments[user] = lang
        log.debug("language assigned user=%s lang=%s", user, lang)
        return lang
