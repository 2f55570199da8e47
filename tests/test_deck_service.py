"""Tests for DeckGenerationService with fake collaborators."""

import asyncio

import pytest

from wordpack.exceptions import InputError
from wordpack.models import SetType
from wordpack.services import DeckGenerationService

DICTIONARY = {"hello": "xin chào", "water": "nước", "cat": "mèo"}


class FakeTranslator:
    def __init__(self, dictionary=None):
        self.dictionary = DICTIONARY if dictionary is None else dictionary

    async def translate(self, words, source_lang, target_lang):
        return [(w, self.dictionary[w]) for w in words if w in self.dictionary]


class FakeSpeech:
    def __init__(self):
        self.calls = []

    async def synthesize(self, word, lang):
        self.calls.append((word, lang))
        return f"{lang}:{word}".encode("utf-8")


class ShortSpeech(FakeSpeech):
    async def synthesize_many(self, words, lang):
        return [b"x"] * (len(words) - 1)


def run(coro):
    return asyncio.run(coro)


def test_generate_with_audio(unpack):
    speech = FakeSpeech()
    service = DeckGenerationService(FakeTranslator(), speech)

    package = unpack(run(service.generate(["hello", "water"], "en", "vi", "Basics")))

    assert package["fields"] == [
        ["hello[sound:0.mp3]", "xin chào[sound:1.mp3]"],
        ["water[sound:2.mp3]", "nước[sound:3.mp3]"],
    ]
    assert package["media"]["1"] == "vi:xin chào".encode("utf-8")
    assert ("hello", "en") in speech.calls


def test_disabled_audio_sides(unpack):
    service = DeckGenerationService(FakeTranslator(), FakeSpeech())

    package = unpack(run(service.generate(
        ["hello"], "en", "vi", "Basics",
        generate_source_audio=False,
    )))

    assert package["fields"] == [["xin chào[sound:0.mp3]", "hello"]]


def test_without_speech_provider(unpack):
    service = DeckGenerationService(FakeTranslator())

    package = unpack(run(service.generate(["hello", "cat"], "en", "vi", set_type=SetType.BIDIRECTIONAL)))

    assert len(package["notes"]) == 4
    assert package["manifest"] == {}
    names = {deck["name"] for deck in package["decks"].values()}
    assert "EN-VI Vocabulary" in names


def test_untranslated_words_are_dropped(unpack):
    service = DeckGenerationService(FakeTranslator())

    package = unpack(run(service.generate(["hello", "unknown"], "en", "vi", "Deck")))

    assert package["fields"] == [["hello", "xin chào"]]


def test_audio_count_mismatch_raises():
    service = DeckGenerationService(FakeTranslator(), ShortSpeech())

    with pytest.raises(InputError, match="Audio count"):
        run(service.generate(["hello", "water"], "en", "vi", "Deck"))


@pytest.mark.parametrize("words", [[], ["", "  "]])
def test_no_words_raises(words):
    service = DeckGenerationService(FakeTranslator())

    with pytest.raises(InputError):
        run(service.generate(words, "en", "vi"))


def test_nothing_translated_raises():
    service = DeckGenerationService(FakeTranslator({}))

    with pytest.raises(InputError, match="no pairs"):
        run(service.generate(["hello"], "en", "vi"))


def test_progress_callback_is_forwarded():
    events = []
    service = DeckGenerationService(FakeTranslator(), progress_callback=events.append)

    run(service.generate(["cat"], "en", "vi", "Deck"))

    assert events[-1]["value"] == 100.0


@pytest.mark.parametrize("name, expected", [
    ("My Deck", "My Deck"),
    ("  ", "EN-VI Vocabulary"),
    (None, "EN-VI Vocabulary"),
    ("???", "EN-VI Vocabulary"),
])
def test_resolve_deck_name(name, expected):
    assert DeckGenerationService.resolve_deck_name(name, "en", "vi") == expected
