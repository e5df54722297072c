# backend/climate_core/api/v1/climate.py
"""氣候分析 API 路由

唯讀端點：查詢紀錄子集，並回傳統計、相關、異常與年度彙整結果。
"""

from datetime import date
from functools import lru_cache
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query

from climate_core.analytics import aggregation, engine
from climate_core.analytics.query import ObservationQuery
from climate_core.config import settings
from climate_core.models import ExtremeDirection, Metric, Month, Observation
from climate_core.schemas.climate import (
    ApiResponse,
    CorrelationEntry,
    OverviewResponse,
    SeasonalCorrelation,
    SeasonalTrend,
    TrendReport,
    YearComparison,
    YearlyAggregate,
)
from climate_core.services.sample_data import generate_sample_store
from climate_core.services.store import ObservationStore

router = APIRouter()


@lru_cache(maxsize=1)
def get_store() -> ObservationStore:
    """取得資料儲存（預設為範例資料，測試時可覆蓋）"""
    return generate_sample_store()


def get_query(store: ObservationStore = Depends(get_store)) -> ObservationQuery:
    return ObservationQuery(store, settings.season_months)


@router.get(
    "/years",
    response_model=ApiResponse[list[int]],
    summary="列出可用年份",
)
async def list_years(query: ObservationQuery = Depends(get_query)) -> ApiResponse[list[int]]:
    """資料中的所有年份，由新到舊"""
    return ApiResponse(success=True, data=query.list_available_years())


@router.get(
    "/records",
    response_model=ApiResponse[list[Observation]],
    summary="依年份查詢紀錄",
    description="year=all 回傳月均氣候值，否則回傳該年份的逐月紀錄",
)
async def get_records(
    year: str = Query("all", description="年份或 all"),
    query: ObservationQuery = Depends(get_query),
) -> ApiResponse[list[Observation]]:
    return ApiResponse(success=True, data=query.filter_by_year(year))


@router.get(
    "/records/range",
    response_model=ApiResponse[list[Observation]],
    summary="依日期區間查詢紀錄",
)
async def get_records_in_range(
    start: date = Query(..., description="起始日期 (YYYY-MM-DD)"),
    end: date = Query(..., description="結束日期 (YYYY-MM-DD)"),
    query: ObservationQuery = Depends(get_query),
) -> ApiResponse[list[Observation]]:
    return ApiResponse(success=True, data=query.filter_by_date_range(start, end))


@router.get(
    "/season/{season}",
    response_model=ApiResponse[list[Observation]],
    summary="依季節查詢紀錄",
)
async def get_season(
    season: str = Path(..., description="季節 (spring / summer / fall / winter)"),
    year: Optional[int] = Query(None, description="年份（未指定時使用月均氣候值）"),
    query: ObservationQuery = Depends(get_query),
) -> ApiResponse[list[Observation]]:
    return ApiResponse(success=True, data=query.filter_by_season(season, year))


@router.get(
    "/month/{month}",
    response_model=ApiResponse[list[Observation]],
    summary="歷年同月份紀錄",
)
async def get_month_across_years(
    month: Month = Path(..., description="月份 (Jan-Dec)"),
    query: ObservationQuery = Depends(get_query),
) -> ApiResponse[list[Observation]]:
    return ApiResponse(success=True, data=query.filter_by_month_across_years(month))


@router.post(
    "/search",
    response_model=ApiResponse[list[Observation]],
    summary="依欄位條件搜尋",
    description='條件值可為精確值或 {"min": x, "max": y} 區間，所有條件皆須符合',
)
async def search_records(
    criteria: dict[str, Any] = Body(..., examples=[{"humidity": {"min": 70, "max": 80}, "year": 2022}]),
    query: ObservationQuery = Depends(get_query),
) -> ApiResponse[list[Observation]]:
    return ApiResponse(success=True, data=query.search_by_criteria(criteria))


@router.get(
    "/extremes/{metric}",
    response_model=ApiResponse[list[Observation]],
    summary="指標極值紀錄",
)
async def get_extremes(
    metric: Metric,
    direction: ExtremeDirection = Query(ExtremeDirection.MAX, description="max 或 min"),
    limit: int = Query(5, ge=1, le=100, description="回傳筆數"),
    query: ObservationQuery = Depends(get_query),
) -> ApiResponse[list[Observation]]:
    return ApiResponse(success=True, data=query.top_extreme_records(metric, direction, limit))


@router.get(
    "/summary",
    response_model=ApiResponse[OverviewResponse],
    summary="統計概覽",
)
async def get_summary(
    year: str = Query("all", description="年份或 all"),
    query: ObservationQuery = Depends(get_query),
) -> ApiResponse[OverviewResponse]:
    """溫度、降雨摘要、季節溫差與各指標摘要"""
    records = query.filter_by_year(year)
    overview = OverviewResponse(
        selector=year,
        record_count=len(records),
        temperature=engine.temperature_summary(records),
        rainfall=engine.rainfall_summary(records),
        seasonal_variation=engine.seasonal_variation(records, settings.season_months),
        metrics=engine.data_summary(records),
    )
    return ApiResponse(success=True, data=overview)


@router.get(
    "/correlations",
    response_model=ApiResponse[list[CorrelationEntry]],
    summary="指標相關矩陣",
)
async def get_correlations(
    year: str = Query("all", description="年份或 all"),
    query: ObservationQuery = Depends(get_query),
) -> ApiResponse[list[CorrelationEntry]]:
    records = query.filter_by_year(year)
    return ApiResponse(success=True, data=engine.correlation_entries(records))


@router.get(
    "/correlations/{metric_a}/{metric_b}/seasonal",
    response_model=ApiResponse[dict[str, SeasonalCorrelation]],
    summary="季節相關係數",
)
async def get_seasonal_correlations(
    metric_a: Metric,
    metric_b: Metric,
    year: str = Query("all", description="年份或 all"),
    query: ObservationQuery = Depends(get_query),
) -> ApiResponse[dict[str, SeasonalCorrelation]]:
    records = query.filter_by_year(year)
    data = engine.seasonal_correlations(records, metric_a, metric_b, settings.season_months)
    return ApiResponse(success=True, data=data)


@router.get(
    "/anomalies/{metric}",
    response_model=ApiResponse[list[Observation]],
    summary="統計異常紀錄",
)
async def get_anomalies(
    metric: Metric,
    threshold: Optional[float] = Query(None, gt=0, description="標準差倍數"),
    store: ObservationStore = Depends(get_store),
) -> ApiResponse[list[Observation]]:
    """逐年資料中偏離平均超過 threshold 個標準差的紀錄"""
    if threshold is None:
        threshold = (
            settings.rainfall_anomaly_threshold
            if metric is Metric.RAINFALL
            else settings.temperature_anomaly_threshold
        )
    return ApiResponse(success=True, data=engine.detect_anomalies(store.yearly, metric, threshold))


@router.get(
    "/aggregates",
    response_model=ApiResponse[list[YearlyAggregate]],
    summary="年度彙整",
)
async def get_aggregates(
    store: ObservationStore = Depends(get_store),
) -> ApiResponse[list[YearlyAggregate]]:
    return ApiResponse(success=True, data=aggregation.yearly_aggregates(store.yearly))


@router.get(
    "/compare/{year1}/{year2}",
    response_model=ApiResponse[YearComparison],
    summary="兩年度比較",
)
async def compare_years(
    year1: int,
    year2: int,
    query: ObservationQuery = Depends(get_query),
) -> ApiResponse[YearComparison]:
    comparison = query.year_comparison(year1, year2)
    if comparison is None:
        raise HTTPException(
            status_code=404,
            detail=f"找不到 {year1} 或 {year2} 年的資料"
        )
    return ApiResponse(success=True, data=comparison)


@router.get(
    "/trends",
    response_model=ApiResponse[TrendReport],
    summary="長期趨勢報告",
)
async def get_trends(
    store: ObservationStore = Depends(get_store),
) -> ApiResponse[TrendReport]:
    report = aggregation.trend_report(store.yearly, settings.climate_normals)
    return ApiResponse(success=True, data=report)


@router.get(
    "/trends/seasonal",
    response_model=ApiResponse[list[SeasonalTrend]],
    summary="逐年季節趨勢",
)
async def get_seasonal_trends(
    store: ObservationStore = Depends(get_store),
) -> ApiResponse[list[SeasonalTrend]]:
    trends = aggregation.seasonal_trends(store.yearly, settings.season_months)
    return ApiResponse(success=True, data=trends)


@router.get(
    "/trends/moving-average/{metric}",
    response_model=ApiResponse[list[Optional[float]]],
    summary="逐月移動平均",
)
async def get_moving_average(
    metric: Metric,
    window: Optional[int] = Query(None, ge=1, le=60, description="視窗大小（月）"),
    store: ObservationStore = Depends(get_store),
) -> ApiResponse[list[Optional[float]]]:
    """依時間排序的逐年資料計算置中移動平均"""
    records = sorted(store.yearly, key=lambda r: (r.year, r.month_index))
    values = [record.value(metric) for record in records]
    window = settings.moving_average_window if window is None else window
    return ApiResponse(success=True, data=engine.moving_average(values, window))
