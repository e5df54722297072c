# backend/climate_core/schemas/climate.py
"""氣候分析結果 Pydantic Schema 定義

所有結果皆由輸入紀錄重新計算，呼叫端只能讀取，不應回寫分析引擎。
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from climate_core.models import Metric, Month, Observation

T = TypeVar("T")


class TemperatureSummary(BaseModel):
    """溫度統計摘要"""

    average: float = Field(..., description="平均溫度 (°C)")
    max: float = Field(..., description="最高溫 (°C)")
    min: float = Field(..., description="最低溫 (°C)")
    range: float = Field(..., description="溫差 (°C)")
    hottest_month: Month = Field(..., description="最高溫所在月份")
    coldest_month: Month = Field(..., description="最低溫所在月份")


class RainfallSummary(BaseModel):
    """降雨統計摘要"""

    total: float = Field(..., ge=0, description="總降雨量 (mm)")
    average: float = Field(..., description="平均降雨量 (mm)")
    max: float = Field(..., description="最大月降雨量 (mm)")
    min: float = Field(..., description="最小月降雨量 (mm)")
    wettest_month: Month = Field(..., description="最濕月份")
    driest_month: Month = Field(..., description="最乾月份")


class MetricSummary(BaseModel):
    """單一指標摘要"""

    min: float
    max: float
    avg: float
    total: Optional[float] = Field(None, description="累積量（僅降雨與日照）")


class CorrelationEntry(BaseModel):
    """相關係數矩陣中的一格"""

    metric_a: Metric
    metric_b: Metric
    coefficient: float = Field(..., ge=-1, le=1, description="Pearson 相關係數")
    strength: str = Field(..., description="相關強度描述")


class SeasonalCorrelation(BaseModel):
    """季節相關係數"""

    correlation: float = Field(..., ge=-1, le=1)
    data_points: int = Field(..., ge=0, description="該季紀錄筆數")
    avg_a: Optional[float] = Field(None, description="第一個指標的季平均")
    avg_b: Optional[float] = Field(None, description="第二個指標的季平均")


class YearlyAggregate(BaseModel):
    """年度彙整"""

    year: int
    total_rainfall: Optional[int] = Field(None, description="年總降雨量 (mm，取整數)")
    avg_temp: Optional[float] = Field(None, description="年平均溫度 (°C，一位小數)")
    avg_humidity: Optional[int] = Field(None, description="年平均溼度 (%，取整數)")
    total_sunshine: Optional[float] = Field(None, description="年總日照 (小時，一位小數)")


class MetricComparison(BaseModel):
    """兩年度單一指標比較"""

    year1: Optional[float] = Field(None, description="第一年平均")
    year2: Optional[float] = Field(None, description="第二年平均")
    difference: Optional[float] = Field(None, description="差值 (year2 - year1)")
    percent_change: Optional[float] = Field(None, description="變化百分比")


class YearComparison(BaseModel):
    """年度比較結果"""

    year1: int
    year2: int
    differences: dict[Metric, MetricComparison]


class NormalDeviation(BaseModel):
    """年度彙整與常年值的差（單純相減，非統計檢定）"""

    year: int
    temp: Optional[float] = None
    rainfall: Optional[float] = None
    humidity: Optional[float] = None
    sunshine: Optional[float] = None


class SeasonStats(BaseModel):
    """單季統計"""

    temp: Optional[float] = Field(None, description="季平均溫度 (°C)")
    rainfall: Optional[float] = Field(None, description="季總降雨量 (mm)")


class SeasonalTrend(BaseModel):
    """逐年季節趨勢"""

    year: int
    seasons: dict[str, SeasonStats]


class PatternProfile(BaseModel):
    """年度氣候型態概況"""

    aggregate: YearlyAggregate
    climate_pattern: str = Field("Normal", description="氣候型態")
    extreme_events: list[str] = Field(default_factory=list, description="當年極端事件")
    deviation: NormalDeviation


class PatternCount(BaseModel):
    """氣候型態出現次數"""

    count: int
    years: list[int]


class TrendReport(BaseModel):
    """長期趨勢報告"""

    yearly: list[YearlyAggregate]
    temperature_anomalies: list[Observation]
    rainfall_anomalies: list[Observation]
    patterns: list[PatternProfile]
    pattern_distribution: dict[str, PatternCount]


class OverviewResponse(BaseModel):
    """概覽回應"""

    selector: str = Field(..., description="年份選擇（all 為月均氣候值）")
    record_count: int
    temperature: Optional[TemperatureSummary] = None
    rainfall: Optional[RainfallSummary] = None
    seasonal_variation: Optional[float] = Field(None, description="夏季與冬季平均溫差 (°C)")
    metrics: Optional[dict[Metric, MetricSummary]] = None


class ApiResponse(BaseModel, Generic[T]):
    """API 回應包裝"""

    success: bool = Field(True, description="請求是否成功")
    data: Optional[T] = Field(None, description="回應資料")
    error: Optional[str] = Field(None, description="錯誤訊息")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "data": {},
                "error": None
            }
        }
    )
