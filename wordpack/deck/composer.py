"""Field composition: word pairs to front/back notes."""

from typing import Iterable, List

from ..models import (
    AudioRequest,
    AudioSide,
    ComposedNote,
    NoteSide,
    Orientation,
    SetType,
    WordPair,
)
from ..utils.parsing import TextParser


class FieldComposer:
    """
    Turn translated word pairs into one or two logical notes.

    With ``Orientation.AUDIO`` the side that has spoken audio is always the
    prompt: it is rendered as the front field followed by an audio marker,
    the other side becomes the plain back field. When both sides have audio
    the direction's own source side is the front and both sides carry a
    marker. When neither has audio the source side is the front.

    Markers are left as ``AudioRequest`` placeholders; the media allocator
    turns them into concrete references once slot indices are assigned.
    """

    def compose(
        self,
        pair: WordPair,
        pair_index: int,
        set_type: SetType = SetType.FORWARD_ONLY,
        orientation: Orientation = Orientation.AUDIO,
    ) -> List[ComposedNote]:
        """
        Compose the notes for one pair.

        Args:
            pair: Translated word pair
            pair_index: Position of the pair in the input list
            set_type: Forward only or bidirectional
            orientation: Front-side selection rule

        Returns:
            One note, or forward then reverse note for bidirectional sets
        """
        notes = [
            self._compose_direction(pair, pair_index, AudioSide.SOURCE, AudioSide.TARGET, orientation, False)
        ]
        if set_type is SetType.BIDIRECTIONAL:
            notes.append(
                self._compose_direction(pair, pair_index, AudioSide.TARGET, AudioSide.SOURCE, orientation, True)
            )
        return notes

    def compose_all(
        self,
        pairs: Iterable[WordPair],
        set_type: SetType = SetType.FORWARD_ONLY,
        orientation: Orientation = Orientation.AUDIO,
        start_index: int = 0,
    ) -> List[ComposedNote]:
        """Compose every pair in input order."""
        notes: List[ComposedNote] = []
        for offset, pair in enumerate(pairs):
            notes.extend(self.compose(pair, start_index + offset, set_type, orientation))
        return notes

    def _compose_direction(
        self,
        pair: WordPair,
        pair_index: int,
        source: AudioSide,
        target: AudioSide,
        orientation: Orientation,
        reverse: bool,
    ) -> ComposedNote:
        # `source`/`target` are the roles within this direction; for the
        # reverse note they are swapped relative to the pair.
        source_side = self._side(pair, pair_index, source)
        target_side = self._side(pair, pair_index, target)

        if orientation is Orientation.SOURCE_FRONT:
            front, back = source_side, target_side
        elif orientation is Orientation.TARGET_FRONT:
            front, back = target_side, source_side
        elif target_side.audio is not None and source_side.audio is None:
            front, back = target_side, source_side
        else:
            front, back = source_side, target_side

        return ComposedNote(front=front, back=back, pair_index=pair_index, reverse=reverse)

    @staticmethod
    def _side(pair: WordPair, pair_index: int, side: AudioSide) -> NoteSide:
        text = TextParser.clean_field(pair.text_for(side))
        payload = pair.audio_for(side)
        audio = AudioRequest(pair_index, side, bytes(payload)) if payload else None
        return NoteSide(text=text, audio=audio)
