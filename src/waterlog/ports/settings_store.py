"""Settings storage interface."""

from typing import Protocol


class SettingsStore(Protocol):
    """Interface for an opaque key/value byte store, like device-local settings."""

    def load(self, key: str) -> bytes | None:
        """Load the bytes saved under key. Returns None if absent."""
        ...

    def save(self, key: str, data: bytes) -> None:
        """Write/overwrite the bytes saved under key."""
        ...
