"""Fetchers module - speech synthesis providers."""

from .base import BaseFetcher
from .audio import AudioFetcher

__all__ = [
    'BaseFetcher',
    'AudioFetcher',
]
