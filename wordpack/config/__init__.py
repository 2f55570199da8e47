"""Configuration module for wordpack."""

from .settings import Config
from .languages import LANG_CONFIG, get_language_code
from .config_manager import SettingsManager

__all__ = [
    'Config',
    'LANG_CONFIG',
    'get_language_code',
    'SettingsManager',
]
