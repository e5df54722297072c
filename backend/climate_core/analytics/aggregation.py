"""年度彙整引擎

將多年逐月紀錄彙整為每年一筆，並提供：
- 兩年度指標比較（差值與變化百分比）
- 與氣候常年值的偏差
- 逐年季節趨勢
- 年度氣候型態概況

注意：「常年偏差」只是年度值減去常年值的單純相減，
與 engine.detect_anomalies 的標準差異常偵測是不同概念。
"""

import logging
from typing import Mapping, Optional, Sequence

import pandas as pd

from climate_core.analytics.engine import detect_anomalies, season_lookup
from climate_core.config import settings
from climate_core.models import ClimateNormals, Metric, Observation
from climate_core.schemas.climate import (
    MetricComparison,
    NormalDeviation,
    PatternCount,
    PatternProfile,
    SeasonalTrend,
    SeasonStats,
    TrendReport,
    YearComparison,
    YearlyAggregate,
)
from climate_core.services.store import records_to_frame


logger = logging.getLogger(__name__)

# 年度比較的指標
COMPARISON_METRICS = (Metric.TEMP, Metric.RAINFALL, Metric.HUMIDITY, Metric.SUNSHINE)

DEFAULT_PATTERN = "Normal"


def _optional_round(value: float, digits: Optional[int] = None) -> Optional[float]:
    if pd.isna(value):
        return None
    if digits is None:
        return int(round(float(value)))
    return round(float(value), digits)


def yearly_aggregates(records: Sequence[Observation]) -> list[YearlyAggregate]:
    """計算年度彙整（依年份遞增排序）

    每年計算：
    - total_rainfall: 降雨總和，取整數
    - avg_temp: 平均溫度，一位小數
    - avg_humidity: 平均溼度，取整數
    - total_sunshine: 日照總和，一位小數

    缺值不計入；某年某指標完全沒有資料時該欄為 None。
    """
    frame = records_to_frame(records).dropna(subset=["year"])
    if frame.empty:
        return []

    aggregates = []
    for year, group in frame.groupby("year", sort=True):
        aggregates.append(YearlyAggregate(
            year=int(year),
            total_rainfall=_optional_round(group["rainfall"].sum(min_count=1)),
            avg_temp=_optional_round(group["temp"].mean(), 1),
            avg_humidity=_optional_round(group["humidity"].mean()),
            total_sunshine=_optional_round(group["sunshine"].sum(min_count=1), 1),
        ))
    return aggregates


def _metric_mean(records: Sequence[Observation], metric: Metric) -> Optional[float]:
    values = [v for v in (r.value(metric) for r in records) if v is not None]
    if not values:
        return None
    return sum(values) / len(values)


def year_comparison(
    year1: int, year2: int, records: Sequence[Observation]
) -> Optional[YearComparison]:
    """比較兩個年度的各指標平均

    Args:
        year1: 基準年
        year2: 比較年
        records: 逐年逐月紀錄

    Returns:
        YearComparison；任一年份沒有紀錄時回傳 None
        - difference = year2 平均 - year1 平均
        - percent_change = difference / year1 平均 * 100（基準為 0 時為 0）
    """
    data1 = [r for r in records if r.year == year1]
    data2 = [r for r in records if r.year == year2]

    if not data1 or not data2:
        logger.debug("year comparison %s vs %s: no records for one side", year1, year2)
        return None

    differences = {}
    for metric in COMPARISON_METRICS:
        avg1 = _metric_mean(data1, metric)
        avg2 = _metric_mean(data2, metric)

        if avg1 is None or avg2 is None:
            differences[metric] = MetricComparison(year1=avg1, year2=avg2)
            continue

        difference = avg2 - avg1
        differences[metric] = MetricComparison(
            year1=avg1,
            year2=avg2,
            difference=difference,
            percent_change=(difference / avg1 * 100) if avg1 != 0 else 0.0,
        )

    return YearComparison(year1=year1, year2=year2, differences=differences)


def _subtract(value: Optional[float], reference: float) -> Optional[float]:
    return None if value is None else value - reference


def normal_deviation(
    aggregate: YearlyAggregate, normals: Optional[ClimateNormals] = None
) -> NormalDeviation:
    """單一年度與常年值的偏差（年度值 - 常年值）"""
    normals = normals or settings.climate_normals
    return NormalDeviation(
        year=aggregate.year,
        temp=_subtract(aggregate.avg_temp, normals.temperature),
        rainfall=_subtract(aggregate.total_rainfall, normals.rainfall),
        humidity=_subtract(aggregate.avg_humidity, normals.humidity),
        sunshine=_subtract(aggregate.total_sunshine, normals.sunshine),
    )


def normal_deviations(
    aggregates: Sequence[YearlyAggregate], normals: Optional[ClimateNormals] = None
) -> list[NormalDeviation]:
    """所有年度與常年值的偏差"""
    return [normal_deviation(aggregate, normals) for aggregate in aggregates]


def seasonal_trends(
    records: Sequence[Observation],
    season_months: Optional[Mapping[str, Sequence[str]]] = None,
) -> list[SeasonalTrend]:
    """逐年各季平均溫度與總降雨

    Returns:
        依年份遞增的 SeasonalTrend，各年只包含有紀錄的季節
    """
    seasons = season_lookup(season_months)
    years = sorted({r.year for r in records if r.year is not None})

    trends = []
    for year in years:
        year_records = [r for r in records if r.year == year]
        stats = {}
        for season, months in seasons.items():
            subset = [r for r in year_records if r.month in months]
            if not subset:
                continue
            rainfall = [r.rainfall for r in subset if r.rainfall is not None]
            stats[season] = SeasonStats(
                temp=_metric_mean(subset, Metric.TEMP),
                rainfall=sum(rainfall) if rainfall else None,
            )
        trends.append(SeasonalTrend(year=year, seasons=stats))
    return trends


def climate_pattern_profile(
    records: Sequence[Observation], normals: Optional[ClimateNormals] = None
) -> list[PatternProfile]:
    """年度氣候型態概況

    氣候型態取該年第一筆紀錄的標籤（無標籤視為 Normal），
    極端事件去除重複並保持出現順序。
    """
    profiles = []
    for aggregate in yearly_aggregates(records):
        year_records = [r for r in records if r.year == aggregate.year]
        pattern = year_records[0].climate_pattern or DEFAULT_PATTERN
        events = list(dict.fromkeys(r.extreme_event for r in year_records if r.extreme_event))

        profiles.append(PatternProfile(
            aggregate=aggregate,
            climate_pattern=pattern,
            extreme_events=events,
            deviation=normal_deviation(aggregate, normals),
        ))
    return profiles


def climate_pattern_distribution(profiles: Sequence[PatternProfile]) -> dict[str, PatternCount]:
    """各氣候型態出現的年數與年份"""
    distribution: dict[str, PatternCount] = {}
    for profile in profiles:
        entry = distribution.setdefault(profile.climate_pattern, PatternCount(count=0, years=[]))
        entry.count += 1
        entry.years.append(profile.aggregate.year)
    return distribution


def trend_report(
    records: Sequence[Observation],
    normals: Optional[ClimateNormals] = None,
    temperature_threshold: Optional[float] = None,
    rainfall_threshold: Optional[float] = None,
) -> TrendReport:
    """長期趨勢報告：年度彙整、溫度與降雨異常、氣候型態"""
    if temperature_threshold is None:
        temperature_threshold = settings.temperature_anomaly_threshold
    if rainfall_threshold is None:
        rainfall_threshold = settings.rainfall_anomaly_threshold

    patterns = climate_pattern_profile(records, normals)

    return TrendReport(
        yearly=[profile.aggregate for profile in patterns],
        temperature_anomalies=detect_anomalies(records, Metric.TEMP, temperature_threshold),
        rainfall_anomalies=detect_anomalies(records, Metric.RAINFALL, rainfall_threshold),
        patterns=patterns,
        pattern_distribution=climate_pattern_distribution(patterns),
    )
