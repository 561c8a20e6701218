"""
Upload controller: turns a user-selected file into a stored, selected report.

This is the only place malformed external input is rejected.
"""

from pathlib import Path

from .model import ParseError, parse_report

UPLOAD_ERROR_MESSAGE = "Error reading file. Please make sure it's a valid Artillery JSON report."


class UploadController:
    def __init__(self, store, on_error=None):
        self.store = store
        self.on_error = on_error
        self.selected = None

    def upload(self, raw, filename):
        """
        Parse `raw` bytes as an Artillery report and store it under `filename`.

        On failure `on_error` receives a user-facing message, the ParseError
        propagates and the store is left as it was.
        """
        try:
            report = parse_report(raw)
        except ParseError:
            if self.on_error is not None:
                self.on_error(UPLOAD_ERROR_MESSAGE)
            raise
        self.selected = self.store.add(filename, report)
        return self.selected

    def upload_file(self, path, name=None):
        path = Path(path)
        with open(path, "rb") as f:
            raw = f.read()
        return self.upload(raw, name or path.name)

    def select(self, timestamp):
        """Select a stored report; returns None (selection unchanged) if unknown."""
        entry = self.store.get(timestamp)
        if entry is not None:
            self.selected = entry
        return entry

    def reset(self):
        self.selected = None
