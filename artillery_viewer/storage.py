"""
Key-value persistence areas for the report store.

Both backends expose `get(key)` returning the stored text (or None) and
`set(key, value)`.
"""

from pathlib import Path


class MemoryStorage:
    """Dict-backed storage; contents vanish with the process."""

    def __init__(self, initial=None):
        self._items = dict(initial or {})

    def get(self, key):
        return self._items.get(key)

    def set(self, key, value):
        self._items[key] = value


class FileStorage:
    """One `<key>.json` file per key inside `directory`."""

    def __init__(self, directory):
        self.directory = Path(directory).expanduser()

    def _path(self, key):
        return self.directory / f"{key}.json"

    def get(self, key):
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def set(self, key, value):
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(value)
        tmp_path.replace(path)
