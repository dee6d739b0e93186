"""
Best-effort language handling for utterances.

Hints arrive from the host app in several shapes (``ml-IN``, ``Malayalam``,
``hi_IN``). Detection is by Unicode script only; it cannot tell English from
romanized Hindi, which is fine because routing never depends on it.
"""

import re
import unicodedata
from typing import Optional

SUPPORTED_LANGUAGES = ("en", "hi", "ml", "te", "kn", "bn")

MIXED = "mixed"
UNKNOWN = "unknown"

_LANGUAGE_NAMES = {
    "english": "en",
    "hindi": "hi",
    "malayalam": "ml",
    "telugu": "te",
    "kannada": "kn",
    "bengali": "bn",
    "bangla": "bn",
}

# (first codepoint, last codepoint, language)
_SCRIPT_RANGES = (
    (0x0900, 0x097F, "hi"),  # Devanagari
    (0x0980, 0x09FF, "bn"),  # Bengali
    (0x0C00, 0x0C7F, "te"),  # Telugu
    (0x0C80, 0x0CFF, "kn"),  # Kannada
    (0x0D00, 0x0D7F, "ml"),  # Malayalam
)

_SENTENCE_SPLIT = re.compile(r"(?<=[.?!।॥])\s+")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """NFC-normalize, lowercase, trim and collapse internal whitespace."""
    text = unicodedata.normalize("NFC", text or "")
    return _WHITESPACE.sub(" ", text.lower()).strip()


def normalize_language_hint(hint: Optional[str]) -> Optional[str]:
    """Reduce a language hint to a bare ISO 639-1 code, or None if unusable."""
    if not hint or not isinstance(hint, str):
        return None
    value = hint.strip().lower()
    if not value:
        return None
    if value in _LANGUAGE_NAMES:
        return _LANGUAGE_NAMES[value]
    code = re.split(r"[-_]", value, maxsplit=1)[0]
    if len(code) == 2 and code.isalpha():
        return code
    return None


def _script_language(ch: str) -> Optional[str]:
    cp = ord(ch)
    for start, end, lang in _SCRIPT_RANGES:
        if start <= cp <= end:
            return lang
    if ch.isascii() and ch.isalpha():
        return "en"
    return None


def detect_language(text: str, hint: Optional[str] = None) -> str:
    """
    Guess the utterance language from its script.

    Returns the dominant script's language when it covers at least 80% of the
    letters, ``mixed`` when several scripts are present, the normalized hint
    when the text has no letters, else ``unknown``.
    """
    counts: dict[str, int] = {}
    for ch in text or "":
        lang = _script_language(ch)
        if lang:
            counts[lang] = counts.get(lang, 0) + 1

    if not counts:
        return normalize_language_hint(hint) or UNKNOWN

    total = sum(counts.values())
    lang, top = max(counts.items(), key=lambda item: item[1])
    if top / total >= 0.8:
        return lang
    return MIXED


def split_sentences(block: str) -> list[str]:
    """Split an example block into sentences on ., ?, ! and danda marks."""
    parts = _SENTENCE_SPLIT.split(block.strip())
    return [p.strip() for p in parts if p.strip()]
