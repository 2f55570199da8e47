"""Data models for deck packaging."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from ..exceptions import InputError


class SetType(Enum):
    """How many notes each word pair produces."""

    FORWARD_ONLY = "basic"
    BIDIRECTIONAL = "bidirectional"

    @property
    def notes_per_pair(self) -> int:
        return 2 if self is SetType.BIDIRECTIONAL else 1

    @classmethod
    def parse(cls, value: Union["SetType", str]) -> "SetType":
        """Accept an enum member, its value or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value, member.name.lower()):
                return member
        raise InputError(f"Unknown set type: {value!r}")


class Orientation(Enum):
    """Which side of a direction becomes the front field."""

    AUDIO = "audio"
    SOURCE_FRONT = "source"
    TARGET_FRONT = "target"

    @classmethod
    def parse(cls, value: Union["Orientation", str]) -> "Orientation":
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value, member.name.lower()):
                return member
        raise InputError(f"Unknown orientation: {value!r}")


class AudioSide(Enum):
    SOURCE = "source"
    TARGET = "target"


@dataclass(frozen=True)
class WordPair:
    """One translated word with optional pronunciation audio."""

    source: str
    translation: str
    source_audio: bytes = b""
    target_audio: bytes = b""

    def audio_for(self, side: AudioSide) -> bytes:
        return self.source_audio if side is AudioSide.SOURCE else self.target_audio

    def text_for(self, side: AudioSide) -> str:
        return self.source if side is AudioSide.SOURCE else self.translation


@dataclass(frozen=True)
class AudioRequest:
    """Placeholder for an audio marker whose slot is not yet known."""

    pair_index: int
    side: AudioSide
    payload: bytes = field(repr=False)

    @property
    def key(self) -> Tuple[int, AudioSide]:
        return (self.pair_index, self.side)


@dataclass(frozen=True)
class NoteSide:
    text: str
    audio: Optional[AudioRequest] = None


@dataclass(frozen=True)
class ComposedNote:
    """A front/back pair before media slots are resolved."""

    front: NoteSide
    back: NoteSide
    pair_index: int
    reverse: bool = False


@dataclass(frozen=True)
class MediaSlot:
    index: int
    filename: str
    payload: bytes = field(repr=False)


@dataclass(frozen=True)
class DeckRecord:
    id: int
    name: str


@dataclass(frozen=True)
class NoteRecord:
    id: int
    guid: str
    deck_id: int
    front: str
    back: str


@dataclass(frozen=True)
class CardRecord:
    id: int
    note_id: int
    deck_id: int
    ordinal: int
    due: int


@dataclass
class DeckSet:
    """A named group of word pairs that becomes one subdeck."""

    name: str
    cards: List[WordPair] = field(default_factory=list)
    set_type: SetType = SetType.FORWARD_ONLY
    orientation: Orientation = Orientation.AUDIO
