"""Rendering of the model size chart."""

from .compose import build_chart, export_chart, arrow_annotation
from .layers import add_full_range_layer, add_inset_layer
from .repel import repel_labels, RepelResult
from .scales import short_scale_label, expand_range

__all__ = [
    "build_chart",
    "export_chart",
    "arrow_annotation",
    "add_full_range_layer",
    "add_inset_layer",
    "repel_labels",
    "RepelResult",
    "short_scale_label",
    "expand_range",
]
