"""Services layer: collaborators and orchestration around the packager."""

from .providers import SpeechProvider, TranslationProvider
from .deck_service import DeckGenerationService
from .vocabulary_service import VocabularyService

__all__ = [
    "SpeechProvider",
    "TranslationProvider",
    "DeckGenerationService",
    "VocabularyService",
]
