"""Sentence translation with remote and offline stages."""

from .cascade import (
    IdentityMarker,
    PatternTranslator,
    RemoteTranslator,
    TranslationCascade,
    TranslationOutcome,
    TranslationStrategy,
    mark_untranslated,
)
from .glossary import GLOSSARIES, Glossary, get_glossary

__all__ = [
    "TranslationCascade",
    "TranslationOutcome",
    "TranslationStrategy",
    "RemoteTranslator",
    "PatternTranslator",
    "IdentityMarker",
    "mark_untranslated",
    "Glossary",
    "GLOSSARIES",
    "get_glossary",
]
