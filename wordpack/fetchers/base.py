"""Base fetcher class."""

from abc import ABC, abstractmethod


class BaseFetcher(ABC):
    """
    Abstract base class for speech fetchers.

    Provides lifecycle management and async context manager support.
    Subclasses implement synthesize() and optionally override close().
    """

    @abstractmethod
    async def synthesize(self, word: str, lang: str) -> bytes:
        """
        Produce pronunciation audio for a word.

        Args:
            word: Text to speak
            lang: Language code ('en', 'vi', ...)

        Returns:
            Audio bytes, or b"" when no audio is available
        """

    async def close(self) -> None:
        """Close any open resources (sessions, connections, etc.)."""

    async def __aenter__(self) -> "BaseFetcher":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - ensure resources are closed."""
        await self.close()
