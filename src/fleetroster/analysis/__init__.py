"""Resolution, load analysis, and read-side queries over roster collections."""

from fleetroster.analysis.load import analyze_load, classify, utilization_percent
from fleetroster.analysis.queries import FleetSummary, filter_riders, find_operator, find_rider, summarize
from fleetroster.analysis.resolver import ReferenceIndex, resolve, resolve_operator

__all__ = [
    "FleetSummary",
    "ReferenceIndex",
    "analyze_load",
    "classify",
    "filter_riders",
    "find_operator",
    "find_rider",
    "resolve",
    "resolve_operator",
    "summarize",
    "utilization_percent",
]
