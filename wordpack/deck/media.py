"""Media slot allocation for audio payloads."""

import logging
from typing import Dict, List, Optional, Tuple

from ..config import Config
from ..exceptions import SchemaError
from ..models import AudioRequest, AudioSide, ComposedNote, MediaSlot, NoteSide

logger = logging.getLogger(__name__)


class MediaAllocator:
    """
    Assign sequential slot ids to audio buffers.

    One allocator lives for exactly one package build. Slots are handed out
    in request order starting at 0; an empty buffer never consumes a slot.
    The same (pair, side) buffer referenced by both directions of a
    bidirectional set resolves to the slot it received first.
    """

    def __init__(self) -> None:
        self._slots: List[MediaSlot] = []
        self._index_by_key: Dict[Tuple[int, AudioSide], int] = {}

    @staticmethod
    def filename_for(index: int) -> str:
        return f"{index}{Config.AUDIO_EXT}"

    @classmethod
    def marker_for(cls, index: int) -> str:
        return f"[sound:{cls.filename_for(index)}]"

    def allocate(self, request: Optional[AudioRequest]) -> Optional[int]:
        """
        Get the slot for an audio request, allocating it on first use.

        Returns:
            Slot index, or None when there is nothing to store
        """
        if request is None or not request.payload:
            return None

        existing = self._index_by_key.get(request.key)
        if existing is not None:
            if self._slots[existing].payload != request.payload:
                raise SchemaError(
                    "Conflicting audio payloads for one media identity",
                    {"pair_index": request.pair_index, "side": request.side.value},
                )
            return existing

        index = len(self._slots)
        self._slots.append(MediaSlot(index=index, filename=self.filename_for(index), payload=request.payload))
        self._index_by_key[request.key] = index
        logger.debug("Allocated media slot %d for pair %d (%s)", index, request.pair_index, request.side.value)
        return index

    def render(self, side: NoteSide) -> str:
        """Final field text: word text immediately followed by its marker, if any."""
        index = self.allocate(side.audio)
        if index is None:
            return side.text
        return f"{side.text}{self.marker_for(index)}"

    def resolve(self, note: ComposedNote) -> Tuple[str, str]:
        """Render front then back so slots follow front-then-back order."""
        front = self.render(note.front)
        back = self.render(note.back)
        return front, back

    def resolve_all(self, notes: List[ComposedNote]) -> List[Tuple[str, str]]:
        return [self.resolve(note) for note in notes]

    @property
    def slots(self) -> List[MediaSlot]:
        return list(self._slots)

    @property
    def total_bytes(self) -> int:
        return sum(len(slot.payload) for slot in self._slots)

    def manifest(self) -> Dict[str, str]:
        """Media index manifest: slot name -> filename referenced by markers."""
        return {str(slot.index): slot.filename for slot in self._slots}
