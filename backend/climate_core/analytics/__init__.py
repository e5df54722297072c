"""統計分析模組

提供月度氣候資料的查詢、統計與年度彙整功能。
"""

from climate_core.analytics.engine import (
    correlation,
    correlation_matrix,
    correlation_strength,
    data_summary,
    detect_anomalies,
    moving_average,
    pearson,
    rainfall_summary,
    seasonal_correlations,
    seasonal_variation,
    temperature_summary,
)
from climate_core.analytics.aggregation import (
    climate_pattern_distribution,
    climate_pattern_profile,
    normal_deviations,
    seasonal_trends,
    trend_report,
    year_comparison,
    yearly_aggregates,
)
from climate_core.analytics.query import ObservationQuery

__all__ = [
    "ObservationQuery",
    "climate_pattern_distribution",
    "climate_pattern_profile",
    "correlation",
    "correlation_matrix",
    "correlation_strength",
    "data_summary",
    "detect_anomalies",
    "moving_average",
    "normal_deviations",
    "pearson",
    "rainfall_summary",
    "seasonal_correlations",
    "seasonal_trends",
    "seasonal_variation",
    "temperature_summary",
    "trend_report",
    "year_comparison",
    "yearly_aggregates",
]
