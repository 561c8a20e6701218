"""
Shared pytest fixtures for the viewer tests.

Provides realistic Artillery report dicts, an in-memory storage backend and a
controllable clock so store timestamps are deterministic.
"""

import json

import pytest
import pytz

from artillery_viewer.model import Report
from artillery_viewer.storage import MemoryStorage
from artillery_viewer.store import ReportStore

WINDOW_START_MS = 1700000000000  # 2023-11-14 22:13:20 UTC


def make_summary(min_=10.0, max_=250.0, count=50, mean=80.5, p95=200.0, p99=240.0):
    return {
        "min": min_, "max": max_, "count": count, "mean": mean,
        "p50": 70.0, "median": 70.0, "p75": 120.0, "p90": 180.0,
        "p95": p95, "p99": p99, "p999": max_,
    }


def make_window(offset_s=0, counters=None, summaries=None):
    start = WINDOW_START_MS + offset_s * 1000
    return {
        "counters": counters if counters is not None else {},
        "rates": {"http.request_rate": 5},
        "firstCounterAt": start,
        "lastCounterAt": start + 9000,
        "firstMetricAt": start,
        "lastMetricAt": start + 9000,
        "period": str(start),
        "summaries": summaries if summaries is not None else {},
        "histograms": summaries if summaries is not None else {},
    }


@pytest.fixture
def report_dict():
    """A two-scenario run with three 10s windows; the middle window is idle."""
    busy_counters = {
        "http.requests": 50, "http.responses": 50, "http.codes.200": 48,
        "vusers.created": 10, "vusers.skipped": 1,
    }
    return {
        "aggregate": {
            "counters": {
                "http.requests": 100,
                "vusers.created_by_name.Browse catalog": 12,
                "http.codes.200": 95,
                "vusers.created_by_name.Checkout": 8,
                "vusers.created": 20,
            },
            "rates": {"http.request_rate": 5},
            "firstCounterAt": WINDOW_START_MS,
            "lastCounterAt": WINDOW_START_MS + 120000,
            "firstMetricAt": WINDOW_START_MS,
            "lastMetricAt": WINDOW_START_MS + 120000,
            "period": 10000,
            "summaries": {"http.response_time": make_summary(count=100)},
            "histograms": {"http.response_time": make_summary(count=100)},
        },
        "intermediate": [
            make_window(0, busy_counters, {"http.response_time": make_summary()}),
            make_window(10),
            make_window(20, busy_counters, {"http.response_time": make_summary(max_=500.0)}),
        ],
    }


@pytest.fixture
def report(report_dict):
    return Report.from_dict(report_dict)


@pytest.fixture
def report_bytes(report_dict):
    return json.dumps(report_dict).encode("utf-8")


@pytest.fixture
def utc():
    return pytz.utc


@pytest.fixture
def clock():
    """Callable clock returning queued epoch-ms values, then repeating the last one."""

    class FakeClock:
        def __init__(self):
            self.values = [1700000000000]

        def __call__(self):
            if len(self.values) > 1:
                return self.values.pop(0)
            return self.values[0]

    return FakeClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, clock):
    return ReportStore(storage, clock=clock)
