"""觀測資料儲存

保存兩組唯讀紀錄：
- monthly: 12 筆月均氣候值（「全部年份」檢視）
- yearly: N 年 x 12 月的逐年資料，為所有年度查詢的依據
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Union

import pandas as pd

from climate_core.models import MONTH_ORDER, Metric, Observation


logger = logging.getLogger(__name__)

RecordInput = Union[Observation, Mapping[str, Any]]


def _to_observation(record: RecordInput) -> Observation:
    if isinstance(record, Observation):
        return record
    return Observation.model_validate(record)


def records_to_frame(records: Iterable[Observation]) -> pd.DataFrame:
    """將紀錄轉換為 DataFrame，缺值以 NaN 表示

    Args:
        records: 觀測紀錄

    Returns:
        欄位包含 year、month、month_index 與所有數值指標的 DataFrame
    """
    rows = []
    for record in records:
        row = {
            "year": record.year,
            "month": record.month.value,
            "month_index": record.month_index,
        }
        for metric in Metric:
            row[metric.value] = record.value(metric)
        rows.append(row)

    columns = ["year", "month", "month_index"] + [metric.value for metric in Metric]
    frame = pd.DataFrame(rows, columns=columns)
    # None 需轉為 NaN 才能讓 pandas 正確排除缺值
    for metric in Metric:
        frame[metric.value] = pd.to_numeric(frame[metric.value], errors="coerce")
    return frame


class ObservationStore:
    """觀測資料儲存（建立後不可變更）

    Attributes:
        monthly: 月均氣候值（0 或 12 筆）
        yearly: 逐年逐月資料
    """

    def __init__(
        self,
        monthly: Iterable[RecordInput] = (),
        yearly: Iterable[RecordInput] = (),
    ):
        self._monthly = tuple(_to_observation(r) for r in monthly)
        self._yearly = tuple(_to_observation(r) for r in yearly)

        if self._monthly:
            months = [record.month for record in self._monthly]
            if len(months) != 12 or set(months) != set(MONTH_ORDER):
                raise ValueError("月均氣候值必須恰好包含 12 個不同月份各一筆")

        missing_year = sum(1 for record in self._yearly if record.year is None)
        if missing_year:
            raise ValueError(f"逐年資料有 {missing_year} 筆缺少年份")

        logger.debug(
            "observation store ready: %d monthly, %d yearly records",
            len(self._monthly),
            len(self._yearly),
        )

    @classmethod
    def from_yearly(cls, yearly: Iterable[RecordInput]) -> "ObservationStore":
        """只提供逐年資料時，由其推算月均氣候值"""
        records = [_to_observation(r) for r in yearly]
        monthly = build_climatology(records) if records else []
        return cls(monthly=monthly, yearly=records)

    @property
    def monthly(self) -> tuple[Observation, ...]:
        return self._monthly

    @property
    def yearly(self) -> tuple[Observation, ...]:
        return self._yearly

    @property
    def is_empty(self) -> bool:
        return not self._monthly and not self._yearly

    def to_frame(self, which: str = "yearly") -> pd.DataFrame:
        """取得指定資料集的 DataFrame（yearly 或 monthly）"""
        if which == "monthly":
            return records_to_frame(self._monthly)
        if which == "yearly":
            return records_to_frame(self._yearly)
        raise ValueError(f"未知的資料集: {which}")


def _rounded(value: float, digits: Optional[int]) -> Optional[float]:
    if pd.isna(value):
        return None
    if digits is None:
        return float(round(value))
    return round(float(value), digits)


def build_climatology(yearly: Iterable[Observation]) -> list[Observation]:
    """由逐年資料推算 12 筆月均氣候值

    各月份跨年平均；溫度、降雨、日照取一位小數，溼度取整數。
    某月份完全沒有資料時，該月各數值為 None（而非 0）。

    Args:
        yearly: 逐年逐月紀錄

    Returns:
        依月份排序的 12 筆紀錄
    """
    frame = records_to_frame(yearly)
    value_columns = [metric.value for metric in Metric]
    means = frame.groupby("month_index")[value_columns].mean()

    climatology = []
    for month in MONTH_ORDER:
        fields: dict[str, Any] = {"month": month}
        if month.position in means.index:
            row = means.loc[month.position]
            for metric in Metric:
                digits = None if metric is Metric.HUMIDITY else 1
                fields[metric.value] = _rounded(row[metric.value], digits)
        climatology.append(Observation(**fields))

    return climatology
