"""Pytest configuration and fixtures for the test suite."""

import io
import json
import sqlite3
import tempfile
import zipfile
from pathlib import Path
from typing import Any, Dict, List

import pytest

from wordpack.config import Config, SettingsManager
from wordpack.models import WordPair

FIXED_TIME = 1_700_000_000.0


def fake_audio(tag: str) -> bytes:
    """Distinct fake MP3 payload per tag."""
    return b"ID3" + tag.encode("utf-8") * 8


def read_package(data: bytes) -> Dict[str, Any]:
    """Unpack a package into names, manifest, media payloads and table rows."""
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        names = archive.namelist()
        manifest = json.loads(archive.read(Config.MEDIA_MANIFEST_NAME))
        media = {name: archive.read(name) for name in names if name.isdigit()}
        database = archive.read(Config.DATABASE_NAME)

    with tempfile.TemporaryDirectory() as temp_dir:
        db_path = Path(temp_dir) / Config.DATABASE_NAME
        db_path.write_bytes(database)
        conn = sqlite3.connect(str(db_path))
        conn.row_factory = sqlite3.Row
        try:
            notes = [dict(r) for r in conn.execute("SELECT * FROM notes ORDER BY id")]
            cards = [dict(r) for r in conn.execute("SELECT * FROM cards ORDER BY id")]
            col = dict(conn.execute("SELECT * FROM col").fetchone())
        finally:
            conn.close()

    fields: List[List[str]] = [note["flds"].split(Config.FIELD_SEPARATOR) for note in notes]
    return {
        "names": names,
        "manifest": manifest,
        "media": media,
        "notes": notes,
        "cards": cards,
        "col": col,
        "decks": json.loads(col["decks"]),
        "models": json.loads(col["models"]),
        "fields": fields,
    }


@pytest.fixture
def fixed_clock():
    """Deterministic time source for id seeding."""
    return lambda: FIXED_TIME


@pytest.fixture
def audio():
    return fake_audio


@pytest.fixture
def unpack():
    return read_package


@pytest.fixture
def sample_pairs():
    """Three pairs with mixed audio availability."""
    return [
        WordPair("hello", "xin chào", source_audio=fake_audio("hello")),
        WordPair("goodbye", "tạm biệt", target_audio=fake_audio("tam biet")),
        WordPair("water", "nước"),
    ]


@pytest.fixture
def settings_manager(tmp_path, monkeypatch):
    """Fresh settings singleton backed by a temp file."""
    for key in SettingsManager.DEFAULTS:
        monkeypatch.delenv(f"WORDPACK_{key}", raising=False)
    SettingsManager.reset_instance()
    manager = SettingsManager(str(tmp_path / "settings.json"))
    yield manager
    SettingsManager.reset_instance()
