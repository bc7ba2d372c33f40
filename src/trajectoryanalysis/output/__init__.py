from .colors import DEFAULT_PALETTE, color_for_id, fnv1a_32
from .sinks import AnalysisCsvSink, AnalysisJsonlSink, ReportSinks
from .trails import TrailView, ViewTransform, scale_points, visible_points

__all__ = [
    "AnalysisCsvSink",
    "AnalysisJsonlSink",
    "DEFAULT_PALETTE",
    "ReportSinks",
    "TrailView",
    "ViewTransform",
    "color_for_id",
    "fnv1a_32",
    "scale_points",
    "visible_points",
]
