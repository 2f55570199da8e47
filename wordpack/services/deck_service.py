"""
Deck Generation Service - word list to finished package.

Runs the translation and speech collaborators, then hands the
materialized word pairs to the packager.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..exceptions import InputError
from ..models import Orientation, SetType, WordPair
from ..deck import build_package
from ..utils import TextParser
from .providers import SpeechProvider, TranslationProvider

logger = logging.getLogger(__name__)


class DeckGenerationService:
    """
    Orchestrates translation, audio generation and packaging.

    Usage:
        service = DeckGenerationService(translator, AudioFetcher())
        data = await service.generate(["hello", "goodbye"], "en", "vi")
    """

    def __init__(
        self,
        translator: TranslationProvider,
        speech: Optional[SpeechProvider] = None,
        progress_callback: Optional[Callable[[Dict[str, Any]], None]] = None,
    ):
        self.translator = translator
        self.speech = speech
        self.progress_callback = progress_callback

    async def generate(
        self,
        words: Sequence[str],
        source_lang: str,
        target_lang: str,
        deck_name: Optional[str] = None,
        set_type: Union[SetType, str] = SetType.FORWARD_ONLY,
        orientation: Union[Orientation, str] = Orientation.AUDIO,
        generate_source_audio: bool = True,
        generate_target_audio: bool = True,
    ) -> bytes:
        """
        Translate, synthesize and package a word list.

        Raises:
            InputError: No words, nothing translated, or audio counts that do
                not match the translated pairs
        """
        word_list = [str(w).strip() for w in words if w and str(w).strip()]
        if not word_list:
            raise InputError("No valid words found to translate")

        name = self.resolve_deck_name(deck_name, source_lang, target_lang)

        logger.info("Translating %d words from %s to %s", len(word_list), source_lang, target_lang)
        translations = await self.translator.translate(word_list, source_lang, target_lang)
        if not translations:
            raise InputError("Translation returned no pairs")
        if len(translations) < len(word_list):
            logger.warning("Translated %d of %d words", len(translations), len(word_list))

        sources = [source for source, _ in translations]
        targets = [target for _, target in translations]

        source_audio = await self._audio(sources, source_lang, generate_source_audio)
        target_audio = await self._audio(targets, target_lang, generate_target_audio)

        if len(source_audio) != len(translations) or len(target_audio) != len(translations):
            raise InputError(
                "Audio count does not match translated pairs",
                {
                    "pairs": len(translations),
                    "source_audio": len(source_audio),
                    "target_audio": len(target_audio),
                },
            )

        cards = [
            WordPair(source=source, translation=target, source_audio=s_audio, target_audio=t_audio)
            for (source, target), s_audio, t_audio in zip(translations, source_audio, target_audio)
        ]

        return build_package(
            cards,
            name,
            set_type=set_type,
            orientation=orientation,
            progress_callback=self.progress_callback,
        )

    async def _audio(self, words: List[str], lang: str, enabled: bool) -> List[bytes]:
        if not enabled or self.speech is None:
            logger.info("Skipping %s audio generation (disabled)", lang)
            return [b""] * len(words)

        logger.info("Generating audio for %d %s words", len(words), lang)
        synthesize_many = getattr(self.speech, "synthesize_many", None)
        if synthesize_many is not None:
            return list(await synthesize_many(words, lang))
        return list(await asyncio.gather(*(self.speech.synthesize(word, lang) for word in words)))

    @staticmethod
    def resolve_deck_name(deck_name: Optional[str], source_lang: str, target_lang: str) -> str:
        """User supplied name when usable, otherwise a language-pair name."""
        fallback = TextParser.fallback_deck_name(source_lang, target_lang)
        if deck_name and deck_name.strip():
            return TextParser.sanitize_deck_name(deck_name, fallback=fallback)
        return fallback
