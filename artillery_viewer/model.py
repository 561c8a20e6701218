"""
Report model: the shapes an Artillery JSON report must conform to.

A Report is validated structurally on ingestion and then held as an immutable
value. Nested JSON objects become read-only mappings and arrays become tuples,
so transformer code can never alter a parsed report.
"""

import json
from dataclasses import dataclass
from types import MappingProxyType

METRIC_SUMMARY_FIELDS = ("min", "max", "count", "mean", "p50", "median", "p75", "p90", "p95", "p99", "p999")
TIMESTAMP_FIELDS = ("firstCounterAt", "lastCounterAt", "firstMetricAt", "lastMetricAt")
NUMERIC_MAPS = ("counters", "rates")
SUMMARY_MAPS = ("summaries", "histograms")


class ParseError(ValueError):
    """Raised when uploaded bytes cannot be turned into a Report."""

    ENCODING = "encoding"
    SYNTAX = "syntax"
    STRUCTURE = "structure"

    def __init__(self, message, reason):
        super().__init__(message)
        self.reason = reason


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _freeze(value):
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value):
    if isinstance(value, MappingProxyType):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


def _check_section(section, where):
    """Structural checks shared by the aggregate and every intermediate result."""
    if not isinstance(section, dict):
        raise ParseError(f"{where} must be an object", ParseError.STRUCTURE)

    for field in TIMESTAMP_FIELDS:
        value = section.get(field)
        if value is not None and not _is_number(value):
            raise ParseError(f"{where}.{field} must be a number", ParseError.STRUCTURE)

    for name in NUMERIC_MAPS:
        mapping = section.get(name)
        if mapping is None:
            continue
        if not isinstance(mapping, dict):
            raise ParseError(f"{where}.{name} must be an object", ParseError.STRUCTURE)
        for key, value in mapping.items():
            if value is not None and not _is_number(value):
                raise ParseError(f"{where}.{name}['{key}'] must be a number", ParseError.STRUCTURE)

    for name in SUMMARY_MAPS:
        mapping = section.get(name)
        if mapping is not None and not isinstance(mapping, dict):
            raise ParseError(f"{where}.{name} must be an object", ParseError.STRUCTURE)


def validate_report(data):
    """Raise ParseError unless `data` has the top-level shape of a report."""
    if not isinstance(data, dict):
        raise ParseError("Report must be a JSON object", ParseError.STRUCTURE)
    if "aggregate" not in data:
        raise ParseError("Report is missing 'aggregate'", ParseError.STRUCTURE)
    if "intermediate" not in data:
        raise ParseError("Report is missing 'intermediate'", ParseError.STRUCTURE)

    _check_section(data["aggregate"], "aggregate")

    intermediate = data["intermediate"]
    if not isinstance(intermediate, list):
        raise ParseError("'intermediate' must be an array", ParseError.STRUCTURE)
    for i, result in enumerate(intermediate):
        _check_section(result, f"intermediate[{i}]")


@dataclass(frozen=True)
class Report:
    aggregate: MappingProxyType
    intermediate: tuple

    @classmethod
    def from_dict(cls, data):
        validate_report(data)
        return cls(aggregate=_freeze(data["aggregate"]), intermediate=_freeze(data["intermediate"]))

    def to_dict(self):
        return {"aggregate": _thaw(self.aggregate), "intermediate": _thaw(self.intermediate)}


def parse_report(raw):
    """
    Parse raw report bytes (or already-decoded text) into a Report.

    Raises ParseError with reason `encoding` for non UTF-8 bytes, `syntax` for
    invalid JSON and `structure` when the JSON is not shaped like a report.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"File is not valid UTF-8 text: {e}", ParseError.ENCODING) from e
    if raw.startswith("\ufeff"):
        raw = raw[1:]

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}", ParseError.SYNTAX) from e
    except RecursionError as e:
        raise ParseError("Invalid JSON: nested too deeply", ParseError.SYNTAX) from e

    try:
        return Report.from_dict(data)
    except RecursionError as e:
        raise ParseError("Report is nested too deeply", ParseError.SYNTAX) from e


@dataclass
class StoredReport:
    name: str
    data: Report
    timestamp: int

    def to_dict(self):
        return {"name": self.name, "data": self.data.to_dict(), "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, entry):
        """Rebuild a persisted entry. Raises ParseError or KeyError on bad shape."""
        name = entry["name"]
        timestamp = entry["timestamp"]
        if not isinstance(name, str):
            raise ParseError("Stored report name must be a string", ParseError.STRUCTURE)
        if not isinstance(timestamp, int) or isinstance(timestamp, bool):
            raise ParseError("Stored report timestamp must be an integer", ParseError.STRUCTURE)
        return cls(name=name, data=Report.from_dict(entry["data"]), timestamp=timestamp)
