"""Embedded collection database for a deck package."""

import hashlib
import itertools
import logging
import os
import sqlite3
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Generator, Iterator, List, Sequence, Tuple

import genanki

from ..config import Config
from ..exceptions import SchemaError
from ..models import CardRecord, DeckRecord, NoteRecord
from ..utils.parsing import TextParser

logger = logging.getLogger(__name__)

# (deck name, [(front, back), ...])
DeckSection = Tuple[str, Sequence[Tuple[str, str]]]

CARD_CSS = """.card {
 font-family: arial;
 font-size: 20px;
 text-align: center;
 color: black;
 background-color: white;
}
"""


def _generate_model_id(model_name: str) -> int:
    """Generate deterministic model ID from name."""
    return int(hashlib.md5(model_name.encode()).hexdigest()[:8], 16)


def create_note_model() -> genanki.Model:
    """The two-field front/back note type every package uses."""
    return genanki.Model(
        _generate_model_id(Config.MODEL_NAME),
        Config.MODEL_NAME,
        fields=[
            {'name': 'Front'},
            {'name': 'Back'},
        ],
        templates=[
            {
                'name': 'Card 1',
                'qfmt': '{{Front}}',
                'afmt': '{{FrontSide}}<hr id="answer">{{Back}}',
            },
        ],
        css=CARD_CSS,
    )


def field_checksum(text: str) -> int:
    """Duplicate-detection checksum of a note's first field."""
    plain = TextParser.strip_media_and_html(text)
    return int(hashlib.sha1(plain.encode("utf-8")).hexdigest()[:8], 16)


@dataclass
class DatabaseImage:
    """Serialized database plus the records written into it."""

    data: bytes = field(repr=False)
    decks: List[DeckRecord]
    notes: List[NoteRecord]
    cards: List[CardRecord]


class SchemaBuilder:
    """
    Build the collection database for one package.

    genanki writes the tables, the ``col`` row and the note/card rows; this
    class decides ids, GUIDs and due positions and checks the result.

    Usage:
        image = SchemaBuilder().build([("Spanish", [("hola[sound:0.mp3]", "hello")])])
        image.data  # SQLite file bytes
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock

    def build(self, sections: Sequence[DeckSection]) -> DatabaseImage:
        """
        Create decks, notes and cards and serialize the database.

        Args:
            sections: Deck name with the final (front, back) fields of its notes

        Returns:
            DatabaseImage with the SQLite file contents

        Raises:
            SchemaError: nothing to package, empty deck name, or a broken invariant
        """
        if not sections:
            raise SchemaError("No decks to package")

        now = self._clock()
        # One counter for deck, note and card ids; seeded so a later build never reuses them
        id_gen: Iterator[int] = itertools.count(int(now * 1000))
        decks = self._make_decks(sections, id_gen)

        if not any(deck.notes for deck in decks):
            raise SchemaError("Nothing to package: no notes")

        with tempfile.TemporaryDirectory(prefix="wordpack-") as temp_dir:
            db_path = os.path.join(temp_dir, Config.DATABASE_NAME)
            try:
                with self._get_connection(db_path) as conn:
                    genanki.Package(decks).write_to_db(conn.cursor(), now, id_gen)
                    self._write_checksums(conn)
                    deck_records = [DeckRecord(id=deck.deck_id, name=deck.name) for deck in decks]
                    self._verify_references(conn, deck_records)
                    notes, cards = self._read_records(conn)
                    self._check_records(notes, cards)
                    conn.commit()
            except sqlite3.Error as e:
                raise SchemaError(f"Failed to write collection database: {e}") from e
            with open(db_path, "rb") as f:
                data = f.read()

        logger.info(
            "Built collection database: %d deck(s), %d notes, %d cards, %d bytes",
            len(deck_records), len(notes), len(cards), len(data),
        )
        return DatabaseImage(data=data, decks=deck_records, notes=notes, cards=cards)

    def _make_decks(self, sections: Sequence[DeckSection], id_gen: Iterator[int]) -> List[genanki.Deck]:
        model = create_note_model()
        decks: List[genanki.Deck] = []
        position = 0

        for deck_name, fields in sections:
            if not deck_name or not deck_name.strip():
                raise SchemaError("Deck name is empty")
            deck = genanki.Deck(self._deck_id(deck_name, id_gen), deck_name)

            for front, back in fields:
                self._check_field(front)
                self._check_field(back)
                position += 1
                deck.add_note(genanki.Note(
                    model=model,
                    fields=[front, back],
                    sort_field=TextParser.strip_media_and_html(front),
                    guid=genanki.guid_for(deck.deck_id, position, front, back),
                    due=position,
                ))
            decks.append(deck)

        return decks

    @staticmethod
    def _deck_id(deck_name: str, id_gen: Iterator[int]) -> int:
        # A deck named like the built-in one replaces it instead of sitting beside it
        if deck_name.strip().casefold() == Config.DEFAULT_DECK_TITLE.casefold():
            return Config.DEFAULT_DECK_ID
        return next(id_gen)

    @contextmanager
    def _get_connection(self, db_path: str) -> Generator[sqlite3.Connection, None, None]:
        """Get database connection with context manager."""
        conn = sqlite3.connect(db_path)
        try:
            yield conn
        finally:
            conn.close()

    @staticmethod
    def _check_field(text: str) -> None:
        if Config.FIELD_SEPARATOR in text:
            raise SchemaError("Field contains the field separator", {"field": text})

    @staticmethod
    def _write_checksums(conn: sqlite3.Connection) -> None:
        # genanki leaves csum at 0; the application uses it for duplicate detection
        rows = conn.execute("SELECT id, sfld FROM notes").fetchall()
        conn.executemany(
            "UPDATE notes SET csum = ? WHERE id = ?",
            [(field_checksum(sfld), note_id) for note_id, sfld in rows],
        )

    @staticmethod
    def _read_records(conn: sqlite3.Connection) -> Tuple[List[NoteRecord], List[CardRecord]]:
        notes = []
        for note_id, guid, deck_id, flds in conn.execute(
            "SELECT n.id, n.guid, c.did, n.flds FROM notes n JOIN cards c ON c.nid = n.id ORDER BY n.id"
        ):
            front, back = flds.split(Config.FIELD_SEPARATOR)
            notes.append(NoteRecord(id=note_id, guid=guid, deck_id=deck_id, front=front, back=back))

        cards = [
            CardRecord(id=card_id, note_id=note_id, deck_id=deck_id, ordinal=ordinal, due=due)
            for card_id, note_id, deck_id, ordinal, due in conn.execute(
                "SELECT id, nid, did, ord, due FROM cards ORDER BY id"
            )
        ]
        return notes, cards

    @staticmethod
    def _check_records(notes: List[NoteRecord], cards: List[CardRecord]) -> None:
        guids = [n.guid for n in notes]
        if len(set(guids)) != len(guids):
            raise SchemaError("Duplicate note GUID")
        dues = [c.due for c in cards]
        if dues != list(range(1, len(cards) + 1)):
            raise SchemaError("Card due positions are not sequential")

    @staticmethod
    def _verify_references(conn: sqlite3.Connection, decks: List[DeckRecord]) -> None:
        cursor = conn.cursor()

        cursor.execute(
            "SELECT COUNT(*) FROM cards c LEFT JOIN notes n ON c.nid = n.id WHERE n.id IS NULL"
        )
        orphans = cursor.fetchone()[0]
        if orphans:
            raise SchemaError("Cards reference missing notes", {"orphans": orphans})

        cursor.execute(
            "SELECT COUNT(*) FROM (SELECT n.id FROM notes n LEFT JOIN cards c ON c.nid = n.id "
            "GROUP BY n.id HAVING COUNT(c.id) != 1)"
        )
        unmatched = cursor.fetchone()[0]
        if unmatched:
            raise SchemaError("Notes without exactly one card", {"notes": unmatched})

        deck_ids = {deck.id for deck in decks}
        cursor.execute("SELECT DISTINCT did FROM cards")
        foreign = [row[0] for row in cursor.fetchall() if row[0] not in deck_ids]
        if foreign:
            raise SchemaError("Cards reference unknown decks", {"deck_ids": foreign})
