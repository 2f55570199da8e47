"""Deck packaging module."""

from .builder import PackageBuilder, build_multi_set_package, build_package, save_package
from .composer import FieldComposer
from .container import ContainerWriter
from .media import MediaAllocator
from .schema import DatabaseImage, SchemaBuilder

__all__ = [
    'PackageBuilder',
    'build_package',
    'build_multi_set_package',
    'save_package',
    'FieldComposer',
    'ContainerWriter',
    'MediaAllocator',
    'DatabaseImage',
    'SchemaBuilder',
]
