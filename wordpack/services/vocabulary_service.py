"""
Vocabulary Service - load word pairs from a pipe-separated CSV.

Expected columns:
    Source|Translation[|SourceAudio|TargetAudio]

Audio columns hold file paths relative to the CSV file.
"""

import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from ..exceptions import InputError
from ..models import WordPair
from ..utils.parsing import TextParser

logger = logging.getLogger(__name__)


class VocabularyService:
    """
    Load vocabulary rows and turn them into WordPair objects.

    Usage:
        service = VocabularyService.load_from_csv("vocabulary.csv")
        pairs = service.to_word_pairs()
    """

    REQUIRED_COLUMNS = ["Source", "Translation"]
    AUDIO_COLUMNS = ["SourceAudio", "TargetAudio"]

    def __init__(self, df: pd.DataFrame, base_dir: Optional[Path] = None):
        self._df = df
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()

    @classmethod
    def load_from_csv(cls, csv_path: str) -> "VocabularyService":
        """
        Read the vocabulary file.

        Raises:
            InputError: Missing file, unreadable file or missing columns
        """
        path = Path(csv_path)
        if not path.exists():
            raise InputError(f"Vocabulary file not found: {path}")

        try:
            df = pd.read_csv(
                path,
                sep='|',
                encoding='utf-8-sig',
                quoting=3,  # csv.QUOTE_NONE
                dtype=str,
                on_bad_lines='warn',
                engine='python',
            ).fillna('')
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise InputError(f"Could not read vocabulary file {path}: {e}") from e

        df.columns = df.columns.str.strip()
        missing = [col for col in cls.REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise InputError("Vocabulary file is missing columns", {"missing": missing})

        logger.info("Loaded %d rows from %s", len(df), path)
        return cls(df, base_dir=path.parent)

    def get_all(self) -> pd.DataFrame:
        return self._df.copy()

    def count(self) -> int:
        return len(self._df)

    def to_word_pairs(self) -> List[WordPair]:
        """Rows with both words present, in file order, with audio loaded."""
        pairs: List[WordPair] = []
        for row in self._df.itertuples(index=True):
            source = TextParser.normalize_unicode(str(row.Source).strip())
            translation = TextParser.normalize_unicode(str(row.Translation).strip())
            if not source or not translation:
                logger.warning("Row %d skipped: missing source or translation", row.Index + 1)
                continue
            pairs.append(WordPair(
                source=source,
                translation=translation,
                source_audio=self._read_audio(getattr(row, "SourceAudio", "")),
                target_audio=self._read_audio(getattr(row, "TargetAudio", "")),
            ))
        return pairs

    def _read_audio(self, value: str) -> bytes:
        """Audio file contents, or b"" when unset or unreadable."""
        name = str(value or "").strip()
        if not name:
            return b""
        path = Path(name)
        if not path.is_absolute():
            path = self.base_dir / path
        try:
            return path.read_bytes()
        except OSError as e:
            logger.warning("Audio file %s unavailable: %s", path, e)
            return b""
