"""
wordpack: flashcard deck packaging
----------------------------------

Entry point for building a deck package from a vocabulary CSV.

Settings come from settings.json and WORDPACK_* environment variables
(see wordpack.config.SettingsManager). An optional first argument
overrides the CSV path.
"""

import asyncio
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import List

from wordpack.config import Config, SettingsManager
from wordpack.deck import build_package, save_package
from wordpack.exceptions import WordPackError
from wordpack.fetchers import AudioFetcher
from wordpack.models import WordPair
from wordpack.services import VocabularyService
from wordpack.utils import TextParser, get_file_size_mb, setup_logger

logger = logging.getLogger("wordpack.cli")


async def fill_missing_audio(pairs: List[WordPair], settings: SettingsManager) -> List[WordPair]:
    """Synthesize audio for sides the CSV did not provide, if enabled."""
    source_lang = settings.get("SOURCE_LANG")
    target_lang = settings.get("TARGET_LANG")
    want_source = settings.get("GENERATE_SOURCE_AUDIO")
    want_target = settings.get("GENERATE_TARGET_AUDIO")
    if not want_source and not want_target:
        return pairs

    async with AudioFetcher(concurrency=settings.get("CONCURRENCY", Config.CONCURRENCY)) as fetcher:
        source_audio = [p.source_audio for p in pairs]
        target_audio = [p.target_audio for p in pairs]

        if want_source:
            missing = [i for i, p in enumerate(pairs) if not p.source_audio]
            generated = await fetcher.synthesize_many([pairs[i].source for i in missing], source_lang)
            for i, audio in zip(missing, generated):
                source_audio[i] = audio

        if want_target:
            missing = [i for i, p in enumerate(pairs) if not p.target_audio]
            generated = await fetcher.synthesize_many([pairs[i].translation for i in missing], target_lang)
            for i, audio in zip(missing, generated):
                target_audio[i] = audio

    return [
        replace(pair, source_audio=s_audio, target_audio=t_audio)
        for pair, s_audio, t_audio in zip(pairs, source_audio, target_audio)
    ]


async def main(argv: List[str]) -> bool:
    """Main entry point."""
    settings = SettingsManager()
    setup_logger(level=settings.get("LOG_LEVEL", "INFO"))

    csv_file = argv[0] if argv else settings.get("CSV_FILE", Config.CSV_FILE)
    if not Path(csv_file).exists():
        logger.error("%s not found!", csv_file)
        return False

    try:
        pairs = VocabularyService.load_from_csv(csv_file).to_word_pairs()
        pairs = await fill_missing_audio(pairs, settings)

        deck_name = settings.get("DECK_NAME") or TextParser.fallback_deck_name(
            settings.get("SOURCE_LANG"), settings.get("TARGET_LANG")
        )
        data = build_package(
            pairs,
            deck_name,
            set_type=settings.get("SET_TYPE"),
            orientation=settings.get("ORIENTATION"),
        )

        output_dir = settings.get("OUTPUT_DIR", Config.OUTPUT_DIR)
        output_file = os.path.join(output_dir, f"{TextParser.sanitize_deck_name(deck_name)}.apkg")
        save_package(data, output_file)
        logger.info("Wrote %s (%.2f MB)", output_file, get_file_size_mb(output_file))
        return True

    except WordPackError as e:
        logger.error("Build failed: %s", e)
        return False


if __name__ == "__main__":
    try:
        success = asyncio.run(main(sys.argv[1:]))
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n[!] Aborted by user.")
        sys.exit(1)
