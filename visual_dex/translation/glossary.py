"""
Offline bilingual glossaries for the pattern-substitution stage.

Each language pair has:
- phrases: regex -> replacement, applied longest pattern first so that
  "This is an (.+)" wins over "This is a (.+)"
- words: whole-word replacements (case-insensitive)

The en->es word list includes every catalog object name.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from visual_dex.missions.catalog import OBJECT_NAMES


@dataclass(frozen=True)
class Glossary:
    """Phrase and word tables for one (source, target) pair."""

    phrases: tuple[tuple[str, str], ...] = ()
    words: dict[str, str] = field(default_factory=dict)

    def ordered_phrases(self) -> list[tuple[re.Pattern[str], str]]:
        """Compiled phrase rules, longest pattern first."""
        ordered = sorted(self.phrases, key=lambda rule: len(rule[0]), reverse=True)
        return [(re.compile(pattern, re.IGNORECASE), repl) for pattern, repl in ordered]

    def word_pattern(self) -> re.Pattern[str] | None:
        """Single alternation over all glossary words, longest first."""
        if not self.words:
            return None
        alternatives = sorted(self.words, key=len, reverse=True)
        joined = "|".join(re.escape(word) for word in alternatives)
        return re.compile(rf"\b({joined})\b", re.IGNORECASE)


EN_ES_PHRASES: tuple[tuple[str, str], ...] = (
    (r"This is an (.+)", r"Esto es un \g<1>"),
    (r"This is a (.+)", r"Esto es un \g<1>"),
    (r"I have an (.+)", r"Tengo un \g<1>"),
    (r"I have a (.+)", r"Tengo un \g<1>"),
    (r"I can see an (.+)", r"Puedo ver un \g<1>"),
    (r"I can see a (.+)", r"Puedo ver un \g<1>"),
    (r"I like this (.+)", r"Me gusta este \g<1>"),
    (r"Look at the (.+)", r"Mira el \g<1>"),
    (r"Where is my (.+)\?", r"¿Dónde está mi \g<1>?"),
)

EN_ES_WORDS: dict[str, str] = {
    # Curated labels outside the mission catalog
    "person": "persona",
    "hand": "mano",
    "water": "agua",
    "friends": "amigos",
    # Adjectives
    "useful": "útil",
    "beautiful": "hermoso",
    "important": "importante",
    "nice": "bonito",
    "here": "aquí",
    # Catalog objects
    **{key: name.lower() for key, name in OBJECT_NAMES["es"].items()},
}

GLOSSARIES: dict[tuple[str, str], Glossary] = {
    ("en", "es"): Glossary(phrases=EN_ES_PHRASES, words=EN_ES_WORDS),
}


def get_glossary(source_lang: str, target_lang: str) -> Glossary | None:
    return GLOSSARIES.get((source_lang.lower(), target_lang.lower()))
