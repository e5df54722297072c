# backend/climate_core/schemas/__init__.py
"""Pydantic Schema 模組"""

from climate_core.schemas.climate import (
    ApiResponse,
    CorrelationEntry,
    MetricComparison,
    MetricSummary,
    NormalDeviation,
    OverviewResponse,
    PatternCount,
    PatternProfile,
    RainfallSummary,
    SeasonalCorrelation,
    SeasonalTrend,
    SeasonStats,
    TemperatureSummary,
    TrendReport,
    YearComparison,
    YearlyAggregate,
)

__all__ = [
    "ApiResponse",
    "CorrelationEntry",
    "MetricComparison",
    "MetricSummary",
    "NormalDeviation",
    "OverviewResponse",
    "PatternCount",
    "PatternProfile",
    "RainfallSummary",
    "SeasonalCorrelation",
    "SeasonalTrend",
    "SeasonStats",
    "TemperatureSummary",
    "TrendReport",
    "YearComparison",
    "YearlyAggregate",
]
