"""Data models for wordpack."""

from .card import (
    AudioRequest,
    AudioSide,
    CardRecord,
    ComposedNote,
    DeckRecord,
    DeckSet,
    MediaSlot,
    NoteRecord,
    NoteSide,
    Orientation,
    SetType,
    WordPair,
)

__all__ = [
    'AudioRequest',
    'AudioSide',
    'CardRecord',
    'ComposedNote',
    'DeckRecord',
    'DeckSet',
    'MediaSlot',
    'NoteRecord',
    'NoteSide',
    'Orientation',
    'SetType',
    'WordPair',
]
