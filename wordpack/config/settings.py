"""Global settings and configuration."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load from project root
_env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(_env_path)


@dataclass
class Config:
    """Application-wide configuration."""

    # Package layout expected by the flashcard application
    DATABASE_NAME: str = "collection.anki2"
    MEDIA_MANIFEST_NAME: str = "media"
    AUDIO_EXT: str = ".mp3"
    FIELD_SEPARATOR: str = "\x1f"

    # Note type
    MODEL_NAME: str = "Basic (wordpack)"

    # Built-in deck every collection carries
    DEFAULT_DECK_ID: int = 1
    DEFAULT_DECK_TITLE: str = "Default"

    # Deck naming
    DEFAULT_DECK_NAME: str = "Vocabulary Deck"
    MAX_DECK_NAME_LENGTH: int = 100

    # Archive
    COMPRESSION_LEVEL: int = int(os.environ.get("WORDPACK_COMPRESSION_LEVEL", "9"))
    BACKUP_KEEP_COUNT: int = 3

    # Speech synthesis
    CONCURRENCY: int = 4
    TTS_VOLUME: str = "+0%"

    # Cross-platform paths using pathlib
    BASE_DIR: Path = Path(__file__).parent.parent.parent.resolve()
    CSV_FILE: str = str(BASE_DIR / "vocabulary.csv")
    OUTPUT_DIR: str = str(BASE_DIR / "data" / "output")
