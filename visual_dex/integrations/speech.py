"""Text-to-speech output."""

from __future__ import annotations

from typing import Protocol

from loguru import logger

SPEECH_RATE = 0.8
SPEECH_PITCH = 1.0

# Locale tags handed to the speech engine
VOICE_LOCALES = {
    "en": "en-US",
    "es": "es-ES",
}


class SpeechOutput(Protocol):
    def speak(self, text: str, language: str) -> None: ...


class LoggingSpeaker:
    """
    Speech adapter for terminals without a TTS engine.

    Records each utterance (and keeps the last few for inspection) instead
    of producing audio. Slower than normal speech to help learners.
    """

    def __init__(self, rate: float = SPEECH_RATE, pitch: float = SPEECH_PITCH, history: int = 20):
        self.rate = rate
        self.pitch = pitch
        self._history = history
        self.spoken: list[tuple[str, str]] = []

    def speak(self, text: str, language: str) -> None:
        locale = VOICE_LOCALES.get(language, language)
        logger.info(f"[speech {locale} rate={self.rate} pitch={self.pitch}] {text}")
        self.spoken.append((text, locale))
        if len(self.spoken) > self._history:
            del self.spoken[0]
