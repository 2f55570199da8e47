"""Main deck package builder."""

import logging
import os
import time
import uuid
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from ..config import Config
from ..exceptions import InputError, WordPackError
from ..models import DeckSet, Orientation, SetType, WordPair
from ..utils import TextParser, ensure_dir
from .composer import FieldComposer
from .container import ContainerWriter
from .media import MediaAllocator
from .schema import SchemaBuilder

logger = logging.getLogger(__name__)


class BuildStats:
    """Statistics for a single package build."""

    def __init__(self) -> None:
        self._counters: Counter = Counter()
        self._start_time = time.time()

    def set(self, key: str, value: Any) -> None:
        self._counters[key] = value

    def get(self, key: str, default: Any = 0) -> Any:
        return self._counters.get(key, default)

    def get_all(self) -> Dict[str, Any]:
        return {
            **dict(self._counters),
            'start_time': self._start_time,
            'elapsed': time.time() - self._start_time,
        }


class PackageBuilder:
    """
    Build one deck package from translated word pairs.

    A builder holds the per-invocation state (media slots, id sequences,
    statistics) and must not be shared between concurrent builds; the
    module-level ``build_package`` creates a fresh one per call.
    """

    def __init__(
        self,
        progress_callback: Optional[Callable[[Dict[str, Any]], None]] = None,
        clock: Callable[[], float] = time.time,
        compression_level: int = Config.COMPRESSION_LEVEL,
    ) -> None:
        """
        Initialize package builder.

        Args:
            progress_callback: Optional callback for progress updates.
                              Payload schema: {"event": "log"|"progress", "message": str, "value": float}
            clock: Time source used to seed note, card and deck ids
            compression_level: Zip deflate level
        """
        self.progress_callback = progress_callback
        self.composer = FieldComposer()
        self.media = MediaAllocator()
        self.schema = SchemaBuilder(clock=clock)
        self.container = ContainerWriter(compression_level=compression_level)
        self.stats = BuildStats()
        self._used = False

    def _emit(self, event: str, message: str = "", value: float = 0.0) -> None:
        """Emit a progress event via the callback and the module logger."""
        if event == "log":
            logger.info(message)
        if self.progress_callback is None:
            return
        payload: Dict[str, Any] = {
            "event": event,
            "message": message,
            "value": value,
        }
        self.progress_callback(payload)

    def _claim(self) -> None:
        # Slots and ids would leak between packages otherwise
        if self._used:
            raise WordPackError("PackageBuilder instances build exactly one package")
        self._used = True

    def build(
        self,
        cards: Sequence[WordPair],
        deck_name: str,
        set_type: Union[SetType, str] = SetType.FORWARD_ONLY,
        orientation: Union[Orientation, str] = Orientation.AUDIO,
    ) -> bytes:
        """
        Build a single-deck package.

        Args:
            cards: Translated word pairs in input order
            deck_name: Deck name (sanitized, falls back to the default name)
            set_type: Forward only or bidirectional
            orientation: Front-side selection rule

        Returns:
            The package archive bytes

        Raises:
            InputError: Empty or malformed input
            SchemaError: Internal invariant violation
            PackagingError: Archive could not be written
        """
        self._claim()
        set_type = SetType.parse(set_type)
        orientation = Orientation.parse(orientation)
        self._validate_cards(cards)
        name = self._resolve_deck_name(deck_name)

        self._emit("log", f"Packaging {len(cards)} word pairs into '{name}' ({set_type.value})")
        composed = self.composer.compose_all(cards, set_type, orientation)
        self._emit("progress", "Fields composed", 25.0)

        fields = self.media.resolve_all(composed)
        self._emit("progress", "Media allocated", 50.0)

        return self._finish([(name, fields)])

    def build_multi_set(self, parent_name: str, sets: Sequence[DeckSet]) -> bytes:
        """
        Build one package holding a subdeck per set ("Parent::Set").

        Media slots are numbered across all sets. Sets without cards are
        skipped; at least one set must have cards.
        """
        self._claim()
        if not parent_name or not str(parent_name).strip():
            raise InputError("Parent deck name is required")
        if not sets:
            raise InputError("At least one set is required")

        set_names: List[str] = []
        for position, deck_set in enumerate(sets, start=1):
            if not deck_set.name or not deck_set.name.strip():
                raise InputError(f"Set {position} must have a name")
            set_names.append(TextParser.sanitize_deck_name(deck_set.name, fallback=f"Set {position}"))
        if len(set(set_names)) != len(set_names):
            raise InputError("All set names must be unique")

        parent = self._resolve_deck_name(parent_name)
        sections: List[Tuple[str, List[Tuple[str, str]]]] = []
        pair_offset = 0

        for deck_set, set_name in zip(sets, set_names):
            if not deck_set.cards:
                self._emit("log", f"Skipping empty set '{set_name}'")
                continue
            self._validate_cards(deck_set.cards)
            composed = self.composer.compose_all(
                deck_set.cards,
                SetType.parse(deck_set.set_type),
                Orientation.parse(deck_set.orientation),
                start_index=pair_offset,
            )
            pair_offset += len(deck_set.cards)
            sections.append((f"{parent}::{set_name}", self.media.resolve_all(composed)))
            self._emit("log", f"Set '{set_name}': {len(composed)} notes")

        if not sections:
            raise InputError("All sets are empty")

        self._emit("progress", "Media allocated", 50.0)
        return self._finish(sections)

    def _finish(self, sections: List[Tuple[str, List[Tuple[str, str]]]]) -> bytes:
        try:
            image = self.schema.build(sections)
            self._emit("progress", "Database built", 75.0)
            data = self.container.write(image.data, self.media.slots, self.media.manifest())
        except WordPackError as e:
            self._emit("log", f"Package build failed: {e}")
            raise

        self.stats.set('decks', len(image.decks))
        self.stats.set('notes', len(image.notes))
        self.stats.set('cards', len(image.cards))
        self.stats.set('media_files', len(self.media.slots))
        self.stats.set('media_bytes', self.media.total_bytes)
        self.stats.set('package_bytes', len(data))

        self._emit(
            "log",
            f"Package ready: {len(image.notes)} notes, {len(self.media.slots)} media file(s), {len(data)} bytes",
        )
        self._emit("progress", "Build complete", 100.0)
        return data

    @staticmethod
    def _validate_cards(cards: Sequence[WordPair]) -> None:
        if not cards:
            raise InputError("No word pairs to package")
        for index, pair in enumerate(cards):
            if not isinstance(pair, WordPair):
                raise InputError("Expected WordPair items", {"index": index, "type": type(pair).__name__})
            if not TextParser.clean_field(pair.source) or not TextParser.clean_field(pair.translation):
                raise InputError("Word pair has empty text", {"index": index})
            for audio in (pair.source_audio, pair.target_audio):
                if audio is not None and not isinstance(audio, (bytes, bytearray, memoryview)):
                    raise InputError("Audio must be a byte buffer", {"index": index})

    @staticmethod
    def _resolve_deck_name(deck_name: str) -> str:
        name = TextParser.sanitize_deck_name(deck_name)
        if not name:
            raise InputError("Deck name is empty")
        return name


def build_package(
    cards: Sequence[WordPair],
    deck_name: str,
    set_type: Union[SetType, str] = SetType.FORWARD_ONLY,
    orientation: Union[Orientation, str] = Orientation.AUDIO,
    progress_callback: Optional[Callable[[Dict[str, Any]], None]] = None,
) -> bytes:
    """Build a deck package with fresh per-call state."""
    return PackageBuilder(progress_callback=progress_callback).build(cards, deck_name, set_type, orientation)


def build_multi_set_package(
    parent_name: str,
    sets: Sequence[DeckSet],
    progress_callback: Optional[Callable[[Dict[str, Any]], None]] = None,
) -> bytes:
    """Build a package with one subdeck per set."""
    return PackageBuilder(progress_callback=progress_callback).build_multi_set(parent_name, sets)


def save_package(data: bytes, output_file: str, keep_backups: int = Config.BACKUP_KEEP_COUNT) -> str:
    """
    Write package bytes to disk.

    An existing file is renamed to a timestamped backup first; only the
    newest ``keep_backups`` backups are kept. The write itself goes through
    a temp file and an atomic rename.

    Returns:
        The output path
    """
    output = Path(output_file)
    ensure_dir(str(output.parent))

    if output.exists():
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_file = output.with_name(f"{output.stem}_{timestamp}{output.suffix}")
        os.replace(output, backup_file)
        logger.info("Backup created: %s", backup_file)

    temp_file = output.with_name(f"{output.name}.{uuid.uuid4().hex[:8]}.tmp")
    try:
        with open(temp_file, "wb") as f:
            f.write(data)
        os.replace(temp_file, output)
    finally:
        if temp_file.exists():
            temp_file.unlink()

    _cleanup_old_backups(output, keep_backups)
    return str(output)


def _cleanup_old_backups(output: Path, keep_count: int) -> None:
    """Remove all but the newest ``keep_count`` backups of ``output``."""
    backups = sorted(
        output.parent.glob(f"{output.stem}_*{output.suffix}"),
        key=os.path.getmtime,
        reverse=True,
    )
    for old_backup in backups[keep_count:]:
        try:
            old_backup.unlink()
        except OSError as e:
            logger.warning("Could not remove old backup %s: %s", old_backup, e)
