"""資料查詢與篩選

從觀測資料儲存中挑出紀錄子集，交給統計與彙整引擎使用：
- 依年份（或 "all" 取月均氣候值）
- 依日期區間、季節、跨年同月份
- 依任意欄位條件（精確值或 {min, max} 區間）
- 依指標取極值紀錄

所有操作皆為唯讀；參數無法解析時回傳空結果而非拋出例外。
"""

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence, Union

import pandas as pd

from climate_core.analytics import aggregation, engine
from climate_core.models import (
    ExtremeDirection,
    Metric,
    Month,
    Observation,
    resolve_field,
)
from climate_core.schemas.climate import MetricSummary, YearComparison
from climate_core.services.store import ObservationStore


logger = logging.getLogger(__name__)

ALL_YEARS = "all"

YearSelector = Union[str, int]
DateLike = Union[str, date, pd.Timestamp]


def parse_year(selector: Any) -> Optional[int]:
    """將年份選擇解析為整數，無法解析時回傳 None"""
    if isinstance(selector, bool):
        return None
    if isinstance(selector, int):
        return selector
    try:
        number = float(str(selector).strip())
    except ValueError:
        logger.debug("unparseable year selector: %r", selector)
        return None
    # 2021.0 與 "2021.0" 視為 2021
    if not number.is_integer():
        logger.debug("non-integral year selector: %r", selector)
        return None
    return int(number)


def _record_month_start(record: Observation) -> Optional[pd.Timestamp]:
    """紀錄所屬月份的第一天；date 格式錯誤時月份視為 1 月"""
    if record.year is None:
        return None

    month = 1
    parts = (record.date or "").split("-")
    if len(parts) >= 2 and parts[1].isdigit() and 1 <= int(parts[1]) <= 12:
        month = int(parts[1])
    return pd.Timestamp(year=record.year, month=month, day=1)


def _is_range(condition: Any) -> bool:
    return (
        isinstance(condition, Mapping)
        and condition.get("min") is not None
        and condition.get("max") is not None
    )


def _matches(record: Observation, field: str, condition: Any) -> bool:
    accessor = resolve_field(field)
    if accessor is None:
        return False

    value = accessor(record)
    if _is_range(condition):
        if value is None:
            return False
        try:
            return condition["min"] <= value <= condition["max"]
        except TypeError:
            # 型別無法比較（例如對月份標籤下數值區間）視為不符合
            return False
    return value == condition


class ObservationQuery:
    """觀測資料查詢器

    Attributes:
        store: 觀測資料儲存
    """

    def __init__(
        self,
        store: ObservationStore,
        season_months: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        """初始化查詢器

        Args:
            store: 觀測資料儲存
            season_months: 季節對應月份，未提供時使用設定檔
        """
        self.store = store
        self._seasons = engine.season_lookup(season_months)

    def filter_by_year(self, selector: YearSelector) -> list[Observation]:
        """依年份篩選

        selector 為 "all" 時回傳 12 筆月均氣候值，
        否則回傳該年份的逐月紀錄；無法解析的年份回傳空列表。
        """
        if selector == ALL_YEARS:
            return list(self.store.monthly)

        year = parse_year(selector)
        if year is None:
            return []
        return [r for r in self.store.yearly if r.year == year]

    def list_available_years(self) -> list[int]:
        """資料中的所有年份（去重、由新到舊）"""
        return sorted({r.year for r in self.store.yearly}, reverse=True)

    def filter_by_date_range(self, start: DateLike, end: DateLike) -> list[Observation]:
        """依日期區間篩選逐年資料（含頭尾）

        每筆紀錄以其年份與月份的第一天作為比較日期。
        """
        try:
            start_ts = pd.Timestamp(start)
            end_ts = pd.Timestamp(end)
        except (TypeError, ValueError):
            logger.debug("unparseable date range: %r ~ %r", start, end)
            return []

        if pd.isna(start_ts) or pd.isna(end_ts):
            return []

        result = []
        for record in self.store.yearly:
            month_start = _record_month_start(record)
            if month_start is not None and start_ts <= month_start <= end_ts:
                result.append(record)
        return result

    def filter_by_season(
        self, season: str, year: Optional[YearSelector] = None
    ) -> list[Observation]:
        """依季節篩選

        Args:
            season: 季節名稱（spring / summer / fall / winter，不分大小寫）
            year: 指定年份時從逐年資料篩選，否則從月均氣候值篩選

        Returns:
            該季三個月份的紀錄；未知季節回傳空列表
        """
        months = self._seasons.get(str(season).lower())
        if not months:
            logger.debug("unknown season: %r", season)
            return []

        if year is None:
            source = self.store.monthly
        else:
            parsed = parse_year(year)
            if parsed is None:
                return []
            source = [r for r in self.store.yearly if r.year == parsed]

        return [r for r in source if r.month in months]

    def filter_by_month_across_years(self, month: Union[str, Month]) -> list[Observation]:
        """取得歷年同一月份的紀錄（依年份遞增）"""
        parsed = Month.parse(month)
        if parsed is None:
            return []

        matches = [r for r in self.store.yearly if r.month == parsed]
        return sorted(matches, key=lambda r: r.year)

    def search_by_criteria(self, criteria: Mapping[str, Any]) -> list[Observation]:
        """依欄位條件搜尋逐年資料

        criteria 的值可為精確值，或同時具備 min 與 max 的區間（含邊界）。
        所有條件皆須符合 (AND)；未知欄位不會符合任何紀錄。
        """
        return [
            record
            for record in self.store.yearly
            if all(_matches(record, field, condition) for field, condition in criteria.items())
        ]

    def top_extreme_records(
        self,
        metric: Union[str, Metric],
        direction: Union[str, ExtremeDirection] = ExtremeDirection.MAX,
        limit: int = 5,
    ) -> list[Observation]:
        """依指標排序取前 limit 筆逐年紀錄

        缺值視為 0；同值保持原本順序（穩定排序）。
        """
        try:
            metric = Metric(metric)
            direction = ExtremeDirection(direction)
        except ValueError:
            logger.debug("invalid extreme query: %r / %r", metric, direction)
            return []

        if limit <= 0:
            return []

        def sort_key(record: Observation) -> float:
            value = record.value(metric)
            return 0.0 if value is None else value

        ranked = sorted(
            self.store.yearly,
            key=sort_key,
            reverse=direction is ExtremeDirection.MAX,
        )
        return ranked[:limit]

    def data_summary(
        self, records: Optional[Sequence[Observation]] = None
    ) -> Optional[dict[Metric, MetricSummary]]:
        """各指標摘要，未指定紀錄時使用月均氣候值"""
        working = self.store.monthly if records is None else records
        return engine.data_summary(working)

    def year_comparison(self, year1: int, year2: int) -> Optional[YearComparison]:
        """比較逐年資料中的兩個年度"""
        return aggregation.year_comparison(year1, year2, self.store.yearly)
