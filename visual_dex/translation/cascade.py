"""
Translation Cascade: remote service with offline fallbacks.

Stages, first success wins:
1. Remote LibreTranslate-compatible endpoint (bounded timeout)
2. Phrase + word substitution from a bundled glossary
3. Original text prefixed with a "[ES] "-style marker

Every stage is a strategy returning the translated text or None. The
cascade never raises to the caller; cancelling the awaiting task still
propagates so a UI can give up on a slow translation.

Usage:
    cascade = TranslationCascade.from_settings(get_settings())
    text = await cascade.translate("This is a bottle.", target_lang="es")
    await cascade.close()
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
from loguru import logger

from .glossary import Glossary, get_glossary

DEFAULT_ENDPOINT = "https://libretranslate.de/translate"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_BATCH_DELAY_SECONDS = 0.8


# =============================================================================
# Strategies
# =============================================================================


class TranslationStrategy(Protocol):
    """One stage of the cascade."""

    name: str

    async def attempt(self, text: str, source_lang: str, target_lang: str) -> str | None:
        """Return the translation, or None if this stage cannot provide one."""
        ...


class RemoteTranslator:
    """
    HTTP client for a LibreTranslate-compatible endpoint.

    Any timeout, transport error, non-2xx status, non-JSON body or empty
    translatedText is reported as None.
    """

    name = "remote"

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds
        self.api_key = api_key
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> RemoteTranslator:
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"Accept": "application/json"},
                timeout=httpx.Timeout(self.timeout_seconds),
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def build_payload(self, text: str, source_lang: str, target_lang: str) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "q": text,
            "source": source_lang,
            "target": target_lang,
            "format": "text",
        }
        if self.api_key:
            payload["api_key"] = self.api_key
        return payload

    async def attempt(self, text: str, source_lang: str, target_lang: str) -> str | None:
        client = await self._ensure_client()
        try:
            response = await client.post(
                self.endpoint,
                json=self.build_payload(text, source_lang, target_lang),
                timeout=self.timeout_seconds,
            )
        except httpx.TimeoutException:
            logger.warning(f"Remote translation timed out after {self.timeout_seconds}s")
            return None
        except httpx.HTTPError as e:
            logger.warning(f"Remote translation request failed: {e}")
            return None

        if not response.is_success:
            logger.warning(f"Remote translation returned HTTP {response.status_code}")
            return None

        content_type = response.headers.get("content-type", "")
        if "json" not in content_type.lower():
            logger.warning(f"Remote translation returned non-JSON content: {content_type!r}")
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"Remote translation body is not valid JSON: {e}")
            return None

        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str) or not translated.strip():
            logger.warning("Remote translation response has no translatedText")
            return None

        translated = translated.strip()
        if translated == text.strip():
            # Echoed input means the service did not translate
            return None
        return translated


class PatternTranslator:
    """Offline phrase and word substitution."""

    name = "pattern"

    def __init__(self, glossaries: dict[tuple[str, str], Glossary] | None = None):
        self._glossaries = glossaries

    def _glossary(self, source_lang: str, target_lang: str) -> Glossary | None:
        if self._glossaries is not None:
            return self._glossaries.get((source_lang.lower(), target_lang.lower()))
        return get_glossary(source_lang, target_lang)

    async def attempt(self, text: str, source_lang: str, target_lang: str) -> str | None:
        return self.substitute(text, source_lang, target_lang)

    def substitute(self, text: str, source_lang: str, target_lang: str) -> str | None:
        """Synchronous core of the stage; None when nothing changed."""
        glossary = self._glossary(source_lang, target_lang)
        if glossary is None:
            return None

        translated = text
        for pattern, replacement in glossary.ordered_phrases():
            translated = pattern.sub(replacement, translated)

        word_pattern = glossary.word_pattern()
        if word_pattern is not None:
            lookup = {k.lower(): v for k, v in glossary.words.items()}

            def _replace(match: Any) -> str:
                word = match.group(0)
                replacement = lookup[word.lower()]
                if word[:1].isupper():
                    return replacement[:1].upper() + replacement[1:]
                return replacement

            translated = word_pattern.sub(_replace, translated)

        return translated if translated != text else None


class IdentityMarker:
    """Last resort: the original text tagged as untranslated."""

    name = "identity"

    async def attempt(self, text: str, source_lang: str, target_lang: str) -> str | None:
        return mark_untranslated(text, target_lang)


def mark_untranslated(text: str, target_lang: str) -> str:
    return f"[{target_lang.upper()}] {text}"


# =============================================================================
# Cascade
# =============================================================================


@dataclass
class TranslationOutcome:
    """Translated text and the stage that produced it."""

    text: str
    stage: str


class TranslationCascade:
    """
    Ordered list of translation strategies evaluated until first success.

    Batch translation is sequential with a fixed pause between items to
    stay within free-tier rate limits.
    """

    def __init__(
        self,
        strategies: list[TranslationStrategy] | None = None,
        delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
        source_lang: str = "en",
        target_lang: str = "es",
    ):
        """
        Initialize the cascade.

        Args:
            strategies: Stages in priority order (default: remote, pattern, identity)
            delay_seconds: Pause between items in translate_all()
            source_lang: Default source language
            target_lang: Default target language
        """
        self.strategies: list[TranslationStrategy] = (
            strategies
            if strategies is not None
            else [RemoteTranslator(), PatternTranslator(), IdentityMarker()]
        )
        self.delay_seconds = delay_seconds
        self.source_lang = source_lang
        self.target_lang = target_lang

    @classmethod
    def from_settings(cls, settings: Any) -> TranslationCascade:
        """Build the default three-stage cascade from application settings."""
        return cls(
            strategies=[
                RemoteTranslator(
                    endpoint=settings.translation_endpoint,
                    timeout_seconds=settings.translation_timeout_seconds,
                ),
                PatternTranslator(),
                IdentityMarker(),
            ],
            delay_seconds=settings.translation_delay_seconds,
            target_lang=settings.target_language,
        )

    async def close(self) -> None:
        for strategy in self.strategies:
            close = getattr(strategy, "close", None)
            if close is not None:
                await close()

    async def translate_with_stage(
        self,
        sentence: str,
        source_lang: str | None = None,
        target_lang: str | None = None,
    ) -> TranslationOutcome:
        """Run the cascade and report which stage answered."""
        source = source_lang or self.source_lang
        target = target_lang or self.target_lang

        for strategy in self.strategies:
            try:
                result = await strategy.attempt(sentence, source, target)
            except Exception as e:  # A broken stage must not break the cascade
                logger.error(f"Translation stage '{strategy.name}' raised: {e}")
                continue

            if result:
                logger.debug(f"Translated via {strategy.name}: {sentence!r} -> {result!r}")
                return TranslationOutcome(text=result, stage=strategy.name)

        return TranslationOutcome(text=mark_untranslated(sentence, target), stage=IdentityMarker.name)

    async def translate(
        self,
        sentence: str,
        source_lang: str | None = None,
        target_lang: str | None = None,
    ) -> str:
        """Translate one sentence. Never raises."""
        outcome = await self.translate_with_stage(sentence, source_lang, target_lang)
        return outcome.text

    async def translate_all(
        self,
        sentences: list[str],
        source_lang: str | None = None,
        target_lang: str | None = None,
    ) -> list[str]:
        """
        Translate sentences one at a time, preserving order.

        A failure on one sentence only degrades that sentence.
        """
        translated: list[str] = []
        for index, sentence in enumerate(sentences):
            translated.append(await self.translate(sentence, source_lang, target_lang))
            if index < len(sentences) - 1 and self.delay_seconds > 0:
                await asyncio.sleep(self.delay_seconds)

        logger.info(f"Translated {len(translated)} sentences")
        return translated
