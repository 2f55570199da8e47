"""Interfaces of the collaborators that feed the packager."""

from typing import List, Protocol, Sequence, Tuple


class TranslationProvider(Protocol):
    """Returns ordered (source, translation) pairs; may return fewer than asked."""

    async def translate(
        self,
        words: Sequence[str],
        source_lang: str,
        target_lang: str,
    ) -> List[Tuple[str, str]]:
        ...


class SpeechProvider(Protocol):
    """Returns audio bytes for a word, b"" when none is available."""

    async def synthesize(self, word: str, lang: str) -> bytes:
        ...
