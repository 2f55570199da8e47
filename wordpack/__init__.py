"""wordpack - flashcard deck packaging for translated word lists"""

__version__ = "1.0.0"

from .config import Config, LANG_CONFIG, SettingsManager
from .deck import PackageBuilder, build_multi_set_package, build_package, save_package
from .exceptions import InputError, PackagingError, SchemaError, WordPackError
from .models import DeckSet, Orientation, SetType, WordPair

__all__ = [
    'Config',
    'LANG_CONFIG',
    'SettingsManager',
    'PackageBuilder',
    'build_package',
    'build_multi_set_package',
    'save_package',
    'InputError',
    'PackagingError',
    'SchemaError',
    'WordPackError',
    'DeckSet',
    'Orientation',
    'SetType',
    'WordPair',
]
