"""Tests for the collection database builder."""

import json
import sqlite3

import pytest

from wordpack.config import Config
from wordpack.deck import SchemaBuilder
from wordpack.deck.schema import field_checksum
from wordpack.exceptions import SchemaError
from tests.conftest import FIXED_TIME


@pytest.fixture
def open_image(tmp_path):
    connections = []

    def _open(image):
        path = tmp_path / Config.DATABASE_NAME
        path.write_bytes(image.data)
        conn = sqlite3.connect(str(path))
        conn.row_factory = sqlite3.Row
        connections.append(conn)
        return conn

    yield _open
    for conn in connections:
        conn.close()


def test_collection_tables_and_indexes(fixed_clock, open_image):
    image = SchemaBuilder(clock=fixed_clock).build([("Deck", [("a", "b")])])
    conn = open_image(image)

    names = {row["name"] for row in conn.execute("SELECT name FROM sqlite_master")}
    assert {"col", "notes", "cards", "revlog", "graves"} <= names
    assert {"ix_notes_csum", "ix_cards_nid", "ix_cards_sched"} <= names
    assert conn.execute("SELECT ver FROM col").fetchone()[0] == 11


def test_builds_linked_rows(fixed_clock, open_image):
    fields = [("hello[sound:0.mp3]", "xin chào"), ("cat", "mèo"), ("dog", "chó")]
    image = SchemaBuilder(clock=fixed_clock).build([("Vietnamese", fields)])

    assert len(image.decks) == 1
    assert len(image.notes) == 3
    assert len(image.cards) == 3

    deck_id = image.decks[0].id
    seed = int(FIXED_TIME * 1000)
    note_ids = [n.id for n in image.notes]
    card_ids = [c.id for c in image.cards]
    assert deck_id == seed
    assert note_ids == sorted(note_ids)
    assert min(note_ids + card_ids) > seed
    assert len(set(note_ids + card_ids)) == 6
    assert all(n.deck_id == deck_id for n in image.notes)
    assert [c.note_id for c in image.cards] == note_ids
    assert [c.due for c in image.cards] == [1, 2, 3]
    assert [(n.front, n.back) for n in image.notes] == fields
    assert len({n.guid for n in image.notes}) == 3

    conn = open_image(image)
    rows = conn.execute("SELECT * FROM notes ORDER BY id").fetchall()
    assert [tuple(r["flds"].split(Config.FIELD_SEPARATOR)) for r in rows] == fields
    assert rows[0]["sfld"] == "hello"
    assert rows[0]["csum"] == field_checksum("hello")
    assert rows[1]["csum"] == field_checksum("cat")

    cards = conn.execute("SELECT * FROM cards ORDER BY id").fetchall()
    assert {c["did"] for c in cards} == {deck_id}
    assert all(c["ord"] == 0 and c["queue"] == 0 and c["type"] == 0 for c in cards)
    assert all(c["ivl"] == 0 and c["reps"] == 0 and c["lapses"] == 0 for c in cards)


def test_later_build_gets_larger_ids():
    first = SchemaBuilder(clock=lambda: FIXED_TIME).build([("Deck", [("a", "b")])])
    second = SchemaBuilder(clock=lambda: FIXED_TIME + 1).build([("Deck", [("a", "b")])])

    assert second.notes[0].id > first.notes[0].id
    assert second.cards[0].id > first.cards[-1].id


def test_collection_json_describes_deck_and_model(fixed_clock, open_image):
    image = SchemaBuilder(clock=fixed_clock).build([("My Deck", [("a", "b")])])
    col = open_image(image).execute("SELECT models, decks FROM col").fetchone()

    decks = json.loads(col["decks"])
    models = json.loads(col["models"])
    assert decks[str(image.decks[0].id)]["name"] == "My Deck"
    assert str(Config.DEFAULT_DECK_ID) in decks

    model = next(m for m in models.values() if m["name"] == Config.MODEL_NAME)
    assert [f["name"] for f in model["flds"]] == ["Front", "Back"]
    assert len(model["tmpls"]) == 1
    assert model["tmpls"][0]["qfmt"] == "{{Front}}"


@pytest.mark.parametrize("name", ["Default", "default"])
def test_deck_named_default_replaces_builtin_deck(fixed_clock, open_image, name):
    image = SchemaBuilder(clock=fixed_clock).build([(name, [("a", "b")])])
    decks = json.loads(open_image(image).execute("SELECT decks FROM col").fetchone()["decks"])

    assert [d["name"].casefold() for d in decks.values()] == ["default"]
    assert image.decks[0].id == Config.DEFAULT_DECK_ID
    assert image.cards[0].deck_id == Config.DEFAULT_DECK_ID


def test_multiple_sections_get_their_own_decks(fixed_clock):
    image = SchemaBuilder(clock=fixed_clock).build([
        ("Parent::One", [("a", "b")]),
        ("Parent::Two", [("c", "d"), ("e", "f")]),
    ])

    first, second = image.decks
    assert first.id < second.id
    assert [c.deck_id for c in image.cards] == [first.id, second.id, second.id]
    assert [c.due for c in image.cards] == [1, 2, 3]


def test_zero_notes_is_schema_error(fixed_clock):
    with pytest.raises(SchemaError):
        SchemaBuilder(clock=fixed_clock).build([("Deck", [])])
    with pytest.raises(SchemaError):
        SchemaBuilder(clock=fixed_clock).build([])


def test_empty_deck_name_is_schema_error(fixed_clock):
    with pytest.raises(SchemaError):
        SchemaBuilder(clock=fixed_clock).build([("  ", [("a", "b")])])


def test_separator_in_field_is_schema_error(fixed_clock):
    with pytest.raises(SchemaError):
        SchemaBuilder(clock=fixed_clock).build([("Deck", [("a\x1fb", "c")])])


def test_identical_fields_still_get_distinct_guids(fixed_clock):
    image = SchemaBuilder(clock=fixed_clock).build([("Deck", [("same", "same"), ("same", "same")])])
    assert image.notes[0].guid != image.notes[1].guid
