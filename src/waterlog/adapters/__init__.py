"""Adapters - I/O implementations of ports."""

from .file_settings import FileSettingsStore
from .memory_settings import MemorySettingsStore

__all__ = [
    "FileSettingsStore",
    "MemorySettingsStore",
]
