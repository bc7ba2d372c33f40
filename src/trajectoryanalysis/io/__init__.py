from .backend import BackendConfig, DetectionBackendClient, GroupBehaviorSummary, summarize_group_behavior
from .files import load_detections_json

__all__ = [
    "BackendConfig",
    "DetectionBackendClient",
    "GroupBehaviorSummary",
    "load_detections_json",
    "summarize_group_behavior",
]
