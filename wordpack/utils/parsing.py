"""Text parsing utilities for consistent text processing across the application."""

import re
import unicodedata

from ..config import Config, get_language_code


class TextParser:
    """
    Centralized text cleanup for note fields and deck names.

    Field text ends up inside a stored record where a single control byte
    separates the fields and ``[sound:...]`` tokens are interpreted by the
    flashcard application, so both must be kept out of user content.
    """

    # Audio markers as written by the media allocator
    SOUND_TAG_PATTERN = re.compile(r'\[sound:[^\]]*\]')

    # Literal marker opener inside user text
    SOUND_OPEN_PATTERN = re.compile(r'\[(?=sound:)', re.IGNORECASE)

    # HTML tag removal pattern
    HTML_TAG_PATTERN = re.compile(r'<[^>]+>')

    # Whitespace normalization pattern
    WHITESPACE_PATTERN = re.compile(r'\s+')

    # Characters the application refuses in deck names
    INVALID_DECK_CHARS = re.compile(r'[<>:"/\\|?*]')

    SURROUNDING_QUOTES = re.compile(r'^["\']|["\']$')

    @classmethod
    def normalize_unicode(cls, text: str) -> str:
        """
        Normalize text to NFC form for consistent Unicode handling.

        Prevents issues with characters like é being represented as
        either a single codepoint (NFC) or base + combining accent (NFD).
        """
        if not text:
            return ""
        return unicodedata.normalize('NFC', str(text))

    @classmethod
    def clean_field(cls, text: str) -> str:
        """
        Prepare word text for a note field.

        Strips the field separator byte and neutralizes literal sound
        markers by HTML-encoding their opening bracket.

        Args:
            text: Raw text from the translation provider

        Returns:
            Text safe to place in a field
        """
        if not text:
            return ""
        text = cls.normalize_unicode(text)
        text = text.replace(Config.FIELD_SEPARATOR, "")
        text = cls.SOUND_OPEN_PATTERN.sub("&#91;", text)
        return text.strip()

    @classmethod
    def strip_media_and_html(cls, text: str) -> str:
        """Return the plain text of a field (used for sort field and checksum)."""
        if not text:
            return ""
        text = cls.SOUND_TAG_PATTERN.sub('', str(text))
        text = cls.HTML_TAG_PATTERN.sub('', text)
        return text.strip()

    @classmethod
    def sanitize_deck_name(cls, name: str, fallback: str = Config.DEFAULT_DECK_NAME) -> str:
        """
        Clean a user or AI supplied deck name.

        Args:
            name: Raw deck name
            fallback: Name used when nothing survives cleanup

        Returns:
            Sanitized deck name (the fallback when empty)
        """
        if not name or not isinstance(name, str):
            return fallback

        sanitized = cls.SURROUNDING_QUOTES.sub('', name.strip()).strip()
        sanitized = cls.INVALID_DECK_CHARS.sub('', sanitized)
        sanitized = cls.WHITESPACE_PATTERN.sub(' ', sanitized).strip()

        if len(sanitized) > Config.MAX_DECK_NAME_LENGTH:
            sanitized = sanitized[:Config.MAX_DECK_NAME_LENGTH].strip()

        return sanitized or fallback

    @classmethod
    def fallback_deck_name(cls, source_lang: str, target_lang: str) -> str:
        """Generated name for decks the user did not name ("EN-VI Vocabulary")."""
        return f"{get_language_code(source_lang)}-{get_language_code(target_lang)} Vocabulary"
