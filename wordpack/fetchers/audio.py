"""Audio fetcher - TTS via Edge TTS."""

import asyncio
import logging
import random
from typing import List, Optional

import edge_tts

from ..config import Config, LANG_CONFIG
from .base import BaseFetcher

logger = logging.getLogger(__name__)


class AudioFetcher(BaseFetcher):
    """
    Speech provider backed by Edge TTS.

    Failures never propagate: they are logged and reported as an empty
    buffer, which the packager treats as "no audio for this word".
    """

    def __init__(
        self,
        concurrency: int = Config.CONCURRENCY,
        volume: str = Config.TTS_VOLUME,
        randomize_voice: bool = False,
    ):
        """
        Initialize audio fetcher.

        Args:
            concurrency: Maximum simultaneous TTS requests in synthesize_many()
            volume: Volume adjustment (e.g., "+0%", "+40%")
            randomize_voice: Pick a random voice of the language per word
        """
        self.concurrency = max(1, concurrency)
        self.volume = volume
        self.randomize_voice = randomize_voice

    def get_voice(self, lang: str) -> Optional[str]:
        """Voice for a language code, or None if the language is unsupported."""
        settings = LANG_CONFIG.get(str(lang).lower())
        if not settings:
            return None
        if self.randomize_voice:
            return random.choice(settings.get("available_voices") or [settings["voice"]])
        return settings["voice"]

    async def synthesize(self, word: str, lang: str) -> bytes:
        if not word or not str(word).strip():
            return b""

        voice = self.get_voice(lang)
        if voice is None:
            logger.warning("No voice configured for language %r", lang)
            return b""

        try:
            communicate = edge_tts.Communicate(str(word).strip(), voice, volume=self.volume)
            chunks: List[bytes] = []
            async for chunk in communicate.stream():
                if chunk.get("type") == "audio":
                    chunks.append(chunk["data"])
            return b"".join(chunks)
        except Exception as e:
            error_msg = str(e)
            if "429" in error_msg or "Too Many Requests" in error_msg:
                logger.warning("Rate limit hit (429) for %r: %s", word, error_msg[:80])
            else:
                logger.warning("Error generating audio for %r: %s", word, error_msg[:80])
            return b""

    async def synthesize_many(self, words: List[str], lang: str) -> List[bytes]:
        """Synthesize a word list, preserving order."""
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _one(word: str) -> bytes:
            async with semaphore:
                return await self.synthesize(word, lang)

        return list(await asyncio.gather(*(_one(word) for word in words)))
