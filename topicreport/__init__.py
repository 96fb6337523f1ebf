from .reporter import (
    DestinationUnavailableError,
    InvalidInputError,
    Reporter,
    ReporterClosedError,
    ReporterError,
    open_reporter,
)
from .types import CatchwordEntry, ClusterInput, ClusterSummary, ReportRun

__all__ = [
    "CatchwordEntry",
    "ClusterInput",
    "ClusterSummary",
    "DestinationUnavailableError",
    "InvalidInputError",
    "ReportRun",
    "Reporter",
    "ReporterClosedError",
    "ReporterError",
    "open_reporter",
]
