"""資料模型模組

包含觀測紀錄、月份與指標列舉、氣候常年值。
"""

from climate_core.models.normals import ClimateNormals
from climate_core.models.observation import (
    FIELD_ACCESSORS,
    METRIC_ACCESSORS,
    MONTH_ORDER,
    ExtremeDirection,
    Metric,
    Month,
    Observation,
    resolve_field,
)

__all__ = [
    "ClimateNormals",
    "ExtremeDirection",
    "FIELD_ACCESSORS",
    "METRIC_ACCESSORS",
    "MONTH_ORDER",
    "Metric",
    "Month",
    "Observation",
    "resolve_field",
]
