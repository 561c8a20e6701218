"""
Metric transformer: reshapes a Report into chart-ready series and summary values.

Every function here is pure. Missing counters, summaries or fields (and JSON
nulls, which Artillery writes for e.g. `mean` on empty windows) default to zero
through `metric_or_zero`; nothing in this module raises on a sparse report.
"""

from collections.abc import Mapping
from datetime import datetime

import pytz

from .config import DEFAULT_TIME_FORMAT, DEFAULT_TIMEZONE

RESPONSE_TIME_METRIC = "http.response_time"
SCENARIO_PREFIX = "vusers.created_by_name."
PERFORMANCE_FIELDS = ["min", "mean", "p95", "p99", "max"]

# (series key, counter name)
REQUEST_RATE_COUNTERS = [
    ("requests", "http.requests"),
    ("responses", "http.responses"),
    ("success", "http.codes.200"),
    ("skipped", "vusers.skipped"),
    ("vusers", "vusers.created"),
]

TZ_DEFAULT = pytz.timezone(DEFAULT_TIMEZONE)


def metric_or_zero(section, *path):
    """
    Walk `path` through nested mappings of `section` and return the number found.

    Returns 0 when a step is missing or not a mapping, or when the leaf is null
    or not numeric.
    """
    value = section
    for key in path:
        if not isinstance(value, Mapping) or key not in value:
            return 0
        value = value[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def format_window_start(period, tz=None, time_format=DEFAULT_TIME_FORMAT):
    """Render a window's epoch-millisecond `period` as a time of day, or 'N/A'."""
    try:
        ms = int(float(period))
        return datetime.fromtimestamp(ms / 1000.0, tz=tz or TZ_DEFAULT).strftime(time_format)
    except (TypeError, ValueError, OverflowError, OSError):
        return "N/A"


def compute_duration(report):
    """Test duration in minutes. Not clamped: a reversed clock gives a negative value."""
    aggregate = report.aggregate
    return (metric_or_zero(aggregate, "lastMetricAt") - metric_or_zero(aggregate, "firstMetricAt")) / 60000


def derive_response_time_series(report, tz=None, time_format=DEFAULT_TIME_FORMAT):
    """
    Response-time points (seconds) per intermediate window.

    Windows whose `max` is zero (idle, or no `http.response_time` summary) are
    dropped.
    """
    series = []
    for result in report.intermediate:
        point = {"timestamp": format_window_start(result.get("period"), tz, time_format)}
        for field in ("min", "mean", "max", "p95", "p99"):
            point[field] = metric_or_zero(result, "summaries", RESPONSE_TIME_METRIC, field) / 1000
        if point["max"] > 0:
            series.append(point)
    return series


def derive_request_rate_series(report, tz=None, time_format=DEFAULT_TIME_FORMAT):
    """Request and virtual-user counters per intermediate window, one entry each."""
    series = []
    for result in report.intermediate:
        point = {"timestamp": format_window_start(result.get("period"), tz, time_format)}
        for key, counter in REQUEST_RATE_COUNTERS:
            point[key] = metric_or_zero(result, "counters", counter)
        series.append(point)
    return series


def derive_scenario_breakdown(report):
    """Virtual users created per scenario, in the report's counter order."""
    counters = report.aggregate.get("counters") or {}
    return [
        {"name": key[len(SCENARIO_PREFIX):], "count": metric_or_zero(counters, key)}
        for key in counters
        if key.startswith(SCENARIO_PREFIX)
    ]


def compute_success_rate(report):
    """Percentage of requests answered with HTTP 200. Zero requests gives 0.0."""
    aggregate = report.aggregate
    requests = metric_or_zero(aggregate, "counters", "http.requests") or 1
    return metric_or_zero(aggregate, "counters", "http.codes.200") / requests * 100


def summary_field(report, metric_name, field):
    return metric_or_zero(report.aggregate, "summaries", metric_name, field)


def load_summary(report):
    """Headline numbers for the Load Summary card."""
    return {
        "total_requests": metric_or_zero(report.aggregate, "counters", "http.requests"),
        "success_rate": compute_success_rate(report),
        "virtual_users": metric_or_zero(report.aggregate, "counters", "vusers.created"),
        "avg_response": summary_field(report, RESPONSE_TIME_METRIC, "mean") / 1000,
    }


def http_performance(report):
    """
    Aggregate response-time bars: each field in seconds plus its width as a
    percentage of the overall max (max defaults to 1 so the bars never divide by zero).
    """
    scale = summary_field(report, RESPONSE_TIME_METRIC, "max") or 1
    rows = []
    for field in PERFORMANCE_FIELDS:
        value = summary_field(report, RESPONSE_TIME_METRIC, field)
        rows.append({"metric": field, "seconds": value / 1000, "percent": value / scale * 100})
    return rows
