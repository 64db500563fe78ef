"""In-memory settings storage adapter."""


class MemorySettingsStore:
    """
    Dict-backed settings storage.

    Implements SettingsStore protocol. Nothing survives the process; used
    for tests and throwaway sessions.
    """

    def __init__(self, initial: dict[str, bytes] | None = None):
        self.data: dict[str, bytes] = dict(initial or {})

    def load(self, key: str) -> bytes | None:
        return self.data.get(key)

    def save(self, key: str, data: bytes) -> None:
        self.data[key] = bytes(data)
