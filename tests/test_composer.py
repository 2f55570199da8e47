"""Tests for front/back field composition."""

import pytest

from wordpack.deck import FieldComposer
from wordpack.models import AudioSide, Orientation, SetType, WordPair
from tests.conftest import fake_audio


@pytest.fixture
def composer():
    return FieldComposer()


def test_source_audio_goes_to_front(composer):
    pair = WordPair("hello", "xin chào", source_audio=fake_audio("a"))
    [note] = composer.compose(pair, 0)

    assert note.front.text == "hello"
    assert note.front.audio.side is AudioSide.SOURCE
    assert note.back.text == "xin chào"
    assert note.back.audio is None


def test_target_audio_goes_to_front(composer):
    pair = WordPair("goodbye", "tạm biệt", target_audio=fake_audio("b"))
    [note] = composer.compose(pair, 0)

    assert note.front.text == "tạm biệt"
    assert note.front.audio.side is AudioSide.TARGET
    assert note.back.text == "goodbye"
    assert note.back.audio is None


def test_no_audio_keeps_source_on_front(composer):
    [note] = composer.compose(WordPair("cat", "mèo"), 0)

    assert (note.front.text, note.back.text) == ("cat", "mèo")
    assert note.front.audio is None and note.back.audio is None


def test_both_audio_forward_and_reverse(composer):
    pair = WordPair("water", "nước", source_audio=fake_audio("s"), target_audio=fake_audio("t"))
    forward, reverse = composer.compose(pair, 3, SetType.BIDIRECTIONAL)

    assert (forward.front.text, forward.back.text) == ("water", "nước")
    assert forward.front.audio.side is AudioSide.SOURCE
    assert forward.back.audio.side is AudioSide.TARGET
    assert not forward.reverse

    assert (reverse.front.text, reverse.back.text) == ("nước", "water")
    assert reverse.front.audio.side is AudioSide.TARGET
    assert reverse.back.audio.side is AudioSide.SOURCE
    assert reverse.reverse
    assert reverse.pair_index == 3


def test_bidirectional_without_audio_swaps_sides(composer):
    forward, reverse = composer.compose(WordPair("dog", "chó"), 0, SetType.BIDIRECTIONAL)

    assert (forward.front.text, forward.back.text) == ("dog", "chó")
    assert (reverse.front.text, reverse.back.text) == ("chó", "dog")


def test_bidirectional_single_audio_keeps_audio_side_on_front(composer):
    pair = WordPair("hello", "xin chào", source_audio=fake_audio("a"))
    forward, reverse = composer.compose(pair, 0, SetType.BIDIRECTIONAL)

    # The audio rule is re-applied with swapped roles, so both fronts carry the spoken word
    assert forward.front.text == "hello"
    assert reverse.front.text == "hello"
    assert reverse.front.audio.side is AudioSide.SOURCE


def test_compose_all_counts_and_order(composer, sample_pairs):
    forward = composer.compose_all(sample_pairs, SetType.FORWARD_ONLY)
    both = composer.compose_all(sample_pairs, SetType.BIDIRECTIONAL)

    assert len(forward) == 3
    assert len(both) == 6
    assert [n.pair_index for n in both] == [0, 0, 1, 1, 2, 2]
    assert [n.reverse for n in both] == [False, True] * 3


def test_source_front_orientation_ignores_audio(composer):
    pair = WordPair("goodbye", "tạm biệt", target_audio=fake_audio("b"))
    [note] = composer.compose(pair, 0, orientation=Orientation.SOURCE_FRONT)

    assert note.front.text == "goodbye"
    assert note.front.audio is None
    assert note.back.text == "tạm biệt"
    assert note.back.audio.side is AudioSide.TARGET


def test_target_front_orientation(composer):
    pair = WordPair("hello", "xin chào", source_audio=fake_audio("a"))
    [note] = composer.compose(pair, 0, orientation=Orientation.TARGET_FRONT)

    assert note.front.text == "xin chào"
    assert note.back.text == "hello"
    assert note.back.audio.side is AudioSide.SOURCE


def test_separator_and_literal_markers_are_neutralized(composer):
    pair = WordPair("he\x1fllo [sound:evil.mp3]", "  xin chào  ")
    [note] = composer.compose(pair, 0)

    assert "\x1f" not in note.front.text
    assert "[sound:" not in note.front.text
    assert note.front.text == "hello &#91;sound:evil.mp3]"
    assert note.back.text == "xin chào"
