"""Artillery Report Viewer: store Artillery JSON reports and render them as dashboards."""

from .model import ParseError, Report, StoredReport, parse_report
from .store import PersistenceLoadError, ReportStore
from .upload import UploadController

__version__ = "0.1.0"

__all__ = [
    "ParseError",
    "PersistenceLoadError",
    "Report",
    "ReportStore",
    "StoredReport",
    "UploadController",
    "parse_report",
]
