"""統計分析引擎

提供月度氣候紀錄的統計計算功能，包括：
- 溫度、降雨摘要（平均、極值、極值月份）
- 各指標摘要（min / max / avg / total）
- Pearson 相關係數與相關矩陣
- 移動平均
- 標準差異常偵測

缺值一律排除後再計算，不視為 0。
無資料時回傳 None 或空集合，分母為 0 時回傳 0，
任何情況都不會回傳 NaN 或 Infinity。
"""

import logging
from typing import Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from climate_core.config import settings
from climate_core.models import Metric, Month, Observation
from climate_core.schemas.climate import (
    CorrelationEntry,
    MetricSummary,
    RainfallSummary,
    SeasonalCorrelation,
    TemperatureSummary,
)


logger = logging.getLogger(__name__)


# ============================================================================
# 常數定義
# ============================================================================

# 相關矩陣預設涵蓋的指標
CORRELATION_METRICS = (Metric.TEMP, Metric.RAINFALL, Metric.HUMIDITY, Metric.SUNSHINE)

# 具累積意義的指標（摘要中提供 total）
CUMULATIVE_METRICS = (Metric.RAINFALL, Metric.SUNSHINE)

# 相關強度分級（依 |r| 由高至低比對）
CORRELATION_STRENGTHS = (
    (0.8, "Very Strong"),
    (0.6, "Strong"),
    (0.4, "Moderate"),
    (0.2, "Weak"),
)


# ============================================================================
# 內部工具
# ============================================================================


def metric_series(records: Sequence[Observation], metric: Metric) -> pd.Series:
    """取出指定指標的數值序列（缺值為 NaN，索引對應紀錄位置）"""
    return pd.Series([record.value(metric) for record in records], dtype="float64")


def season_lookup(
    season_months: Optional[Mapping[str, Sequence[str]]] = None,
) -> dict[str, tuple[Month, ...]]:
    """將季節設定正規化為 {小寫季節名: (Month, ...)}

    未提供時使用設定檔中的季節定義；無法辨識的月份標籤會被忽略。
    """
    source = settings.season_months if season_months is None else season_months
    lookup = {}
    for season, months in source.items():
        parsed = tuple(m for m in (Month.parse(label) for label in months) if m is not None)
        lookup[season.lower()] = parsed
    return lookup


def _first_month_with(
    records: Sequence[Observation], metric: Metric, target: float
) -> Optional[Month]:
    # 同值時取第一筆
    for record in records:
        if record.value(metric) == target:
            return record.month
    return None


def _mean_or_none(values: pd.Series) -> Optional[float]:
    clean = values.dropna()
    if clean.empty:
        return None
    return float(clean.mean())


# ============================================================================
# 摘要統計
# ============================================================================


def temperature_summary(records: Sequence[Observation]) -> Optional[TemperatureSummary]:
    """計算溫度統計摘要

    Args:
        records: 觀測紀錄

    Returns:
        TemperatureSummary；temp、temp_max、temp_min 任一全為缺值時回傳 None
        - average: temp 平均
        - max / min: temp_max 最大值 / temp_min 最小值
        - range: max - min
        - hottest_month / coldest_month: 第一筆等於極值的紀錄月份
    """
    temps = metric_series(records, Metric.TEMP).dropna()
    highs = metric_series(records, Metric.TEMP_MAX).dropna()
    lows = metric_series(records, Metric.TEMP_MIN).dropna()

    if temps.empty or highs.empty or lows.empty:
        return None

    max_temp = float(highs.max())
    min_temp = float(lows.min())

    return TemperatureSummary(
        average=float(temps.mean()),
        max=max_temp,
        min=min_temp,
        range=max_temp - min_temp,
        hottest_month=_first_month_with(records, Metric.TEMP_MAX, max_temp),
        coldest_month=_first_month_with(records, Metric.TEMP_MIN, min_temp),
    )


def rainfall_summary(records: Sequence[Observation]) -> Optional[RainfallSummary]:
    """計算降雨統計摘要

    Returns:
        RainfallSummary（total / average / max / min / 最濕與最乾月份）；
        無降雨資料時回傳 None
    """
    rainfall = metric_series(records, Metric.RAINFALL).dropna()
    if rainfall.empty:
        return None

    max_rain = float(rainfall.max())
    min_rain = float(rainfall.min())

    return RainfallSummary(
        total=float(rainfall.sum()),
        average=float(rainfall.mean()),
        max=max_rain,
        min=min_rain,
        wettest_month=_first_month_with(records, Metric.RAINFALL, max_rain),
        driest_month=_first_month_with(records, Metric.RAINFALL, min_rain),
    )


def data_summary(records: Sequence[Observation]) -> Optional[dict[Metric, MetricSummary]]:
    """計算各指標摘要

    Returns:
        {指標: MetricSummary}，僅包含有資料的指標；
        total 只提供給降雨與日照。紀錄為空時回傳 None
    """
    if not records:
        return None

    summary = {}
    for metric in Metric:
        values = metric_series(records, metric).dropna()
        if values.empty:
            continue
        summary[metric] = MetricSummary(
            min=float(values.min()),
            max=float(values.max()),
            avg=float(values.mean()),
            total=float(values.sum()) if metric in CUMULATIVE_METRICS else None,
        )
    return summary


def seasonal_variation(
    records: Sequence[Observation],
    season_months: Optional[Mapping[str, Sequence[str]]] = None,
) -> Optional[float]:
    """夏季平均溫度減冬季平均溫度

    Returns:
        溫差 (°C)；夏季或冬季沒有溫度資料時回傳 None
    """
    seasons = season_lookup(season_months)
    summer = [r for r in records if r.month in seasons.get("summer", ())]
    winter = [r for r in records if r.month in seasons.get("winter", ())]

    summer_avg = _mean_or_none(metric_series(summer, Metric.TEMP))
    winter_avg = _mean_or_none(metric_series(winter, Metric.TEMP))

    if summer_avg is None or winter_avg is None:
        return None
    return summer_avg - winter_avg


# ============================================================================
# 相關分析
# ============================================================================


def pearson(x: Sequence[float], y: Sequence[float]) -> float:
    """計算 Pearson 相關係數

    r = (nΣxy − ΣxΣy) / sqrt((nΣx² − (Σx)²)(nΣy² − (Σy)²))

    長度不同、為空、或任一序列變異數為 0 時回傳 0。

    Returns:
        介於 -1 與 1 之間的係數
    """
    if len(x) != len(y) or len(x) == 0:
        return 0.0

    xs = np.asarray(x, dtype="float64")
    ys = np.asarray(y, dtype="float64")

    # 常數序列直接視為退化情況，避免浮點誤差產生假的相關
    if np.ptp(xs) == 0 or np.ptp(ys) == 0:
        return 0.0

    n = len(xs)
    sum_x = xs.sum()
    sum_y = ys.sum()
    numerator = n * (xs * ys).sum() - sum_x * sum_y
    denominator = np.sqrt(
        (n * (xs * xs).sum() - sum_x * sum_x) * (n * (ys * ys).sum() - sum_y * sum_y)
    )

    if denominator == 0 or not np.isfinite(denominator):
        return 0.0

    return float(np.clip(numerator / denominator, -1.0, 1.0))


def correlation(
    metric_a: Metric, metric_b: Metric, records: Sequence[Observation]
) -> float:
    """兩指標間的 Pearson 相關係數

    只使用兩指標皆有值的紀錄；沒有可用資料時回傳 0。
    """
    pairs = pd.DataFrame({
        "a": metric_series(records, metric_a),
        "b": metric_series(records, metric_b),
    }).dropna()

    r = pearson(pairs["a"].to_numpy(), pairs["b"].to_numpy())
    if r == 0.0:
        logger.debug(
            "degenerate correlation %s/%s over %d paired values",
            metric_a.value, metric_b.value, len(pairs),
        )
    return r


def correlation_matrix(
    records: Sequence[Observation],
    metrics: Sequence[Metric] = CORRELATION_METRICS,
) -> dict[tuple[Metric, Metric], float]:
    """計算所有指標組合的相關矩陣

    對角線（同指標）固定為 1.0，不實際計算。

    Returns:
        {(指標A, 指標B): r}；紀錄為空時回傳空字典
    """
    if not records:
        return {}

    matrix = {}
    for metric_a in metrics:
        for metric_b in metrics:
            if metric_a == metric_b:
                matrix[(metric_a, metric_b)] = 1.0
            else:
                matrix[(metric_a, metric_b)] = correlation(metric_a, metric_b, records)
    return matrix


def correlation_strength(r: float) -> str:
    """相關強度描述（依 |r|）"""
    magnitude = abs(r)
    for lower_bound, label in CORRELATION_STRENGTHS:
        if magnitude >= lower_bound:
            return label
    return "Very Weak"


def correlation_entries(
    records: Sequence[Observation],
    metrics: Sequence[Metric] = CORRELATION_METRICS,
) -> list[CorrelationEntry]:
    """相關矩陣的扁平列表形式（供 API 輸出）"""
    return [
        CorrelationEntry(
            metric_a=metric_a,
            metric_b=metric_b,
            coefficient=r,
            strength=correlation_strength(r),
        )
        for (metric_a, metric_b), r in correlation_matrix(records, metrics).items()
    ]


def seasonal_correlations(
    records: Sequence[Observation],
    metric_a: Metric,
    metric_b: Metric,
    season_months: Optional[Mapping[str, Sequence[str]]] = None,
) -> dict[str, SeasonalCorrelation]:
    """各季節的兩指標相關係數

    Returns:
        {季節: SeasonalCorrelation}，僅包含有紀錄的季節
    """
    result = {}
    for season, months in season_lookup(season_months).items():
        subset = [r for r in records if r.month in months]
        if not subset:
            continue
        result[season] = SeasonalCorrelation(
            correlation=correlation(metric_a, metric_b, subset),
            data_points=len(subset),
            avg_a=_mean_or_none(metric_series(subset, metric_a)),
            avg_b=_mean_or_none(metric_series(subset, metric_b)),
        )
    return result


# ============================================================================
# 趨勢與異常
# ============================================================================


def moving_average(values: Sequence[Optional[float]], window: int = 3) -> list[Optional[float]]:
    """置中移動平均

    第 i 點取 [i - window // 2, i + ceil(window / 2)) 區間，
    在序列兩端視窗自動縮小（不補值、不環繞）。
    window 小於 1 時視為 1。缺值不參與平均；視窗內全為缺值時為 None。

    Returns:
        與輸入等長的列表
    """
    window = max(1, int(window))
    data = np.asarray([np.nan if v is None else v for v in values], dtype="float64")
    n = len(data)
    half_before = window // 2
    half_after = -(-window // 2)

    result: list[Optional[float]] = []
    for i in range(n):
        start = max(0, i - half_before)
        end = min(n, i + half_after)
        subset = data[start:end]
        subset = subset[~np.isnan(subset)]
        result.append(float(subset.mean()) if subset.size else None)
    return result


def detect_anomalies(
    records: Sequence[Observation], metric: Metric, threshold: float
) -> list[Observation]:
    """以標準差偵測統計異常

    使用母體標準差 (ddof=0)；缺值同時排除於統計量與候選紀錄之外。

    Args:
        records: 觀測紀錄
        metric: 分析指標
        threshold: 標準差倍數

    Returns:
        |value - mean| > threshold * std 的紀錄（保持原順序）
    """
    values = metric_series(records, metric)
    clean = values.dropna()
    if clean.empty:
        return []

    mean = clean.mean()
    std_dev = clean.std(ddof=0)

    return [
        record
        for record, value in zip(records, values)
        if not np.isnan(value) and abs(value - mean) > threshold * std_dev
    ]
