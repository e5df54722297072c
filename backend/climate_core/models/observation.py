"""月度觀測紀錄模型

定義氣候分析使用的基本資料單位：
- Month: 12 個固定順序的月份標籤
- Metric: 可計算統計量的數值欄位
- Observation: 單月觀測紀錄（月均氣候值或某年某月）

上游資料來源須提供已正規化的紀錄，欄位名稱可使用 snake_case
或前端慣用的 camelCase（例如 tempMin、monthIndex）。
"""

from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Month(str, Enum):
    """月份標籤，順序即為日曆順序"""

    JAN = "Jan"
    FEB = "Feb"
    MAR = "Mar"
    APR = "Apr"
    MAY = "May"
    JUN = "Jun"
    JUL = "Jul"
    AUG = "Aug"
    SEP = "Sep"
    OCT = "Oct"
    NOV = "Nov"
    DEC = "Dec"

    @property
    def position(self) -> int:
        """月份索引 (0-11)"""
        return MONTH_ORDER.index(self)

    @classmethod
    def from_index(cls, index: int) -> "Month":
        return MONTH_ORDER[index]

    @classmethod
    def parse(cls, value: Any) -> Optional["Month"]:
        """解析月份標籤，無法辨識時回傳 None"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for month in MONTH_ORDER:
                if month.value.lower() == value.strip().lower():
                    return month
        return None


MONTH_ORDER: tuple[Month, ...] = tuple(Month)


class Metric(str, Enum):
    """數值型氣象指標"""

    TEMP = "temp"
    TEMP_MIN = "temp_min"
    TEMP_MAX = "temp_max"
    RAINFALL = "rainfall"
    HUMIDITY = "humidity"
    SUNSHINE = "sunshine"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Metric"]:
        # 接受前端的 camelCase 名稱（tempMin / tempMax）
        if isinstance(value, str):
            for metric in cls:
                if to_camel(metric.value) == value:
                    return metric
        return None


class ExtremeDirection(str, Enum):
    """極值排序方向"""

    MAX = "max"
    MIN = "min"


class Observation(BaseModel):
    """單月氣候觀測紀錄

    月均氣候值（climatology）沒有年份；逐年資料必須帶有 year。
    任何數值欄位都可能缺值（None），統計時一律排除而非視為 0。
    """

    year: Optional[int] = Field(None, description="日曆年份（月均氣候值為 None）")
    month: Month = Field(..., description="月份標籤 (Jan-Dec)")
    month_index: int = Field(..., ge=0, le=11, description="月份索引 (0-11)")
    date: Optional[str] = Field(None, description="年月鍵值 (YYYY-MM)")
    temp: Optional[float] = Field(None, description="平均溫度 (°C)")
    temp_min: Optional[float] = Field(None, description="最低溫度 (°C)")
    temp_max: Optional[float] = Field(None, description="最高溫度 (°C)")
    rainfall: Optional[float] = Field(None, description="累積降雨量 (mm)")
    humidity: Optional[float] = Field(None, description="相對溼度 (%)")
    sunshine: Optional[float] = Field(None, description="累積日照時數 (小時)")
    climate_pattern: Optional[str] = Field(None, description="氣候型態（如 La Niña）")
    extreme_event: Optional[str] = Field(None, description="當期極端天氣事件")

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @model_validator(mode="before")
    @classmethod
    def _fill_derived_fields(cls, data: Any) -> Any:
        """補上可由 month / year 推得的 month_index 與 date"""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        month = Month.parse(data.get("month"))
        if month is None:
            return data

        if data.get("month_index") is None and data.get("monthIndex") is None:
            data["month_index"] = month.position

        year = data.get("year")
        if data.get("date") is None and year is not None:
            data["date"] = f"{int(year)}-{month.position + 1:02d}"

        return data

    @model_validator(mode="after")
    def _check_month_index(self) -> "Observation":
        if self.month_index != self.month.position:
            raise ValueError(
                f"month_index {self.month_index} 與月份 {self.month.value} 不一致"
            )
        return self

    def value(self, metric: Metric) -> Optional[float]:
        """取得指定指標的數值"""
        return METRIC_ACCESSORS[metric](self)


METRIC_ACCESSORS: dict[Metric, Callable[[Observation], Optional[float]]] = {
    Metric.TEMP: lambda record: record.temp,
    Metric.TEMP_MIN: lambda record: record.temp_min,
    Metric.TEMP_MAX: lambda record: record.temp_max,
    Metric.RAINFALL: lambda record: record.rainfall,
    Metric.HUMIDITY: lambda record: record.humidity,
    Metric.SUNSHINE: lambda record: record.sunshine,
}

# 可用於條件搜尋的欄位（含非數值欄位）
FIELD_ACCESSORS: dict[str, Callable[[Observation], Any]] = {
    "year": lambda record: record.year,
    "month": lambda record: record.month,
    "month_index": lambda record: record.month_index,
    "date": lambda record: record.date,
    "climate_pattern": lambda record: record.climate_pattern,
    "extreme_event": lambda record: record.extreme_event,
    **{metric.value: accessor for metric, accessor in METRIC_ACCESSORS.items()},
}


def resolve_field(name: str) -> Optional[Callable[[Observation], Any]]:
    """依欄位名稱（snake_case 或 camelCase）取得存取函式"""
    if name in FIELD_ACCESSORS:
        return FIELD_ACCESSORS[name]
    for field_name, accessor in FIELD_ACCESSORS.items():
        if to_camel(field_name) == name:
            return accessor
    return None
