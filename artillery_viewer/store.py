"""
Report store: uploaded reports persisted newest-first under a single storage key.

Every mutation rewrites the whole sequence. Entries are addressed by their
creation timestamp (epoch milliseconds).
"""

import json
import time

from .config import STORAGE_KEY
from .model import ParseError, StoredReport


class PersistenceLoadError(Exception):
    """The persisted report list could not be read back."""


def now_ms():
    return int(time.time() * 1000)


class ReportStore:
    def __init__(self, storage, clock=now_ms, key=STORAGE_KEY):
        self.storage = storage
        self.clock = clock
        self.key = key
        try:
            self._reports = self._load()
        except PersistenceLoadError as e:
            print(f"⚠️ Warning: Stored reports could not be loaded ({e}). Starting with an empty list.")
            self._reports = []

    # ---------------- PERSISTENCE ----------------
    def _load(self):
        try:
            raw = self.storage.get(self.key)
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceLoadError(f"unreadable storage: {e}") from e
        if raw is None:
            return []

        try:
            entries = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            raise PersistenceLoadError(f"invalid JSON: {e}") from e
        if not isinstance(entries, list):
            raise PersistenceLoadError("expected a JSON array of reports")

        reports = []
        for i, entry in enumerate(entries):
            try:
                reports.append(StoredReport.from_dict(entry))
            except (ParseError, KeyError, TypeError, RecursionError) as e:
                raise PersistenceLoadError(f"entry {i} is malformed: {e}") from e
        return reports

    def _save(self):
        self.storage.set(self.key, json.dumps([r.to_dict() for r in self._reports]))

    # ---------------- OPERATIONS ----------------
    def add(self, name, data):
        """Store `data` under `name` as the newest entry and return it."""
        timestamp = self.clock()
        if self._reports and timestamp <= self._reports[0].timestamp:
            # same millisecond as the newest entry (or a clock step back)
            timestamp = self._reports[0].timestamp + 1
        entry = StoredReport(name=name, data=data, timestamp=timestamp)
        self._reports.insert(0, entry)
        self._save()
        return entry

    def remove(self, timestamp):
        self._reports = [r for r in self._reports if r.timestamp != timestamp]
        self._save()

    def rename(self, timestamp, new_name):
        """Rename one entry. Blank names leave the entry unchanged."""
        new_name = new_name.strip()
        if not new_name:
            return
        for report in self._reports:
            if report.timestamp == timestamp:
                report.name = new_name
        self._save()

    def get(self, timestamp):
        return next((r for r in self._reports if r.timestamp == timestamp), None)

    def list(self):
        return list(self._reports)

    def __len__(self):
        return len(self._reports)
