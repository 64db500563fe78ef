"""File-based settings storage adapter."""

import os
import re
from pathlib import Path

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileSettingsStore:
    """
    File-based settings storage.

    Implements SettingsStore protocol. Each key gets its own file under
    data_dir, overwritten whole on every save.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path_for_key(self, key: str) -> Path:
        """Get the file path for a given key."""
        if not _KEY_PATTERN.match(key) or key in (".", ".."):
            raise ValueError(f"Invalid settings key: {key!r}")
        return self.data_dir / key

    def load(self, key: str) -> bytes | None:
        """Load the bytes saved under key. Returns None if not found."""
        path = self._path_for_key(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def save(self, key: str, data: bytes) -> None:
        """Write/overwrite the bytes saved under key."""
        path = self._path_for_key(key)
        # Write beside the target then rename, so a crash never leaves half a file
        tmp_path = path.with_name(f".{key}.tmp")
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)
