"""範例資料產生器

依溫哥華氣候常年值產生多年月度範例資料：
- 冬季多雨、夏季乾燥、氣溫溫和
- 逐年輕微增溫趨勢（每年 +0.005 °C）
- 2022 拉尼娜年：冬季偏冷偏濕、其餘季節偏暖偏乾
- 各年 ENSO 型態標籤（CLIMATE_PATTERNS）僅為示意，只有 2022 的拉尼娜效應實際反映在數值上
- 每筆紀錄加上有界的隨機變化

使用 numpy 亂數產生器，相同 seed 產生相同資料。
"""

from typing import Optional, Sequence

import numpy as np

from climate_core.config import settings
from climate_core.models import MONTH_ORDER, Observation
from climate_core.services.store import ObservationStore


# 溫哥華月均氣候值（1981-2010 常年值）
BASE_CLIMATOLOGY: list[dict] = [
    {"month": "Jan", "rainfall": 168, "temp": 3, "temp_min": 1, "temp_max": 6, "humidity": 84, "sunshine": 3.9},
    {"month": "Feb", "rainfall": 106, "temp": 5, "temp_min": 2, "temp_max": 8, "humidity": 82, "sunshine": 5.2},
    {"month": "Mar", "rainfall": 114, "temp": 7, "temp_min": 4, "temp_max": 11, "humidity": 79, "sunshine": 6.8},
    {"month": "Apr", "rainfall": 84, "temp": 10, "temp_min": 6, "temp_max": 15, "humidity": 74, "sunshine": 8.1},
    {"month": "May", "rainfall": 65, "temp": 14, "temp_min": 9, "temp_max": 19, "humidity": 71, "sunshine": 9.4},
    {"month": "Jun", "rainfall": 54, "temp": 17, "temp_min": 12, "temp_max": 22, "humidity": 69, "sunshine": 10.1},
    {"month": "Jul", "rainfall": 31, "temp": 20, "temp_min": 14, "temp_max": 25, "humidity": 67, "sunshine": 10.6},
    {"month": "Aug", "rainfall": 37, "temp": 20, "temp_min": 14, "temp_max": 25, "humidity": 68, "sunshine": 9.8},
    {"month": "Sep", "rainfall": 64, "temp": 17, "temp_min": 11, "temp_max": 22, "humidity": 72, "sunshine": 7.5},
    {"month": "Oct", "rainfall": 121, "temp": 12, "temp_min": 7, "temp_max": 16, "humidity": 78, "sunshine": 5.3},
    {"month": "Nov", "rainfall": 182, "temp": 7, "temp_min": 4, "temp_max": 10, "humidity": 83, "sunshine": 4.1},
    {"month": "Dec", "rainfall": 168, "temp": 4, "temp_min": 1, "temp_max": 7, "humidity": 85, "sunshine": 3.9},
]

# 各年份的 ENSO 氣候型態
CLIMATE_PATTERNS = {
    2020: "La Niña",
    2021: "La Niña",
    2022: "La Niña",
    2023: "El Niño",
    2024: "Normal",
}

# 歷史極端天氣事件 (年, 月份索引) -> 事件
EXTREME_EVENTS = {
    (2021, 5): "Heat Dome",
    (2022, 10): "Atmospheric River",
    (2024, 0): "Arctic Outflow",
}

LA_NINA_YEAR = 2022
TREND_BASE_YEAR = 2020

HUMIDITY_BOUNDS = (40, 100)


def climate_variation(year: int, month_index: int) -> dict[str, float]:
    """依年份與月份模擬氣候變化因子

    Args:
        year: 年份
        month_index: 月份索引 (0-11)

    Returns:
        temp 為溫度偏移 (°C)；其餘為相對比例
    """
    year_factor = (year - TREND_BASE_YEAR) * 0.01
    la_nina = 0.1 if year == LA_NINA_YEAR else 0.0
    is_winter = month_index <= 1 or month_index >= 11

    return {
        "temp": year_factor * 0.5 + la_nina * (-0.5 if is_winter else 0.2),
        "rainfall": la_nina * (0.2 if is_winter else -0.1),
        "humidity": la_nina * 0.05,
        "sunshine": -la_nina * 0.1,
    }


def random_variation(rng: np.random.Generator) -> dict[str, float]:
    """有界隨機變化：降雨 ±20%、溫度 ±1.5°C、溼度 ±10%、日照 ±15%"""
    return {
        "rainfall": (rng.random() - 0.5) * 0.4,
        "temp": (rng.random() - 0.5) * 3,
        "humidity": (rng.random() - 0.5) * 0.2,
        "sunshine": (rng.random() - 0.5) * 0.3,
    }


def generate_yearly_records(
    years: Sequence[int],
    rng: np.random.Generator,
) -> list[Observation]:
    """產生逐年逐月範例紀錄"""
    records = []
    low, high = HUMIDITY_BOUNDS

    for year in years:
        for month_index, base in enumerate(BASE_CLIMATOLOGY):
            climate = climate_variation(year, month_index)
            noise = random_variation(rng)
            temp_shift = climate["temp"] + noise["temp"]

            records.append(Observation(
                year=year,
                month=MONTH_ORDER[month_index],
                temp=round(base["temp"] + temp_shift, 1),
                temp_min=round(base["temp_min"] + temp_shift, 1),
                temp_max=round(base["temp_max"] + temp_shift, 1),
                rainfall=round(max(
                    0.0, base["rainfall"] * (1 + climate["rainfall"] + noise["rainfall"])
                ), 1),
                humidity=float(round(np.clip(
                    base["humidity"] * (1 + climate["humidity"] + noise["humidity"]),
                    low,
                    high,
                ))),
                sunshine=round(max(
                    0.0, base["sunshine"] * (1 + climate["sunshine"] + noise["sunshine"])
                ), 1),
                climate_pattern=CLIMATE_PATTERNS.get(year, "Normal"),
                extreme_event=EXTREME_EVENTS.get((year, month_index)),
            ))

    return records


def generate_sample_store(
    years: Optional[Sequence[int]] = None,
    seed: Optional[int] = None,
) -> ObservationStore:
    """產生範例資料儲存

    月均氣候值直接使用溫哥華常年值，逐年資料由其加上變化產生。

    Args:
        years: 涵蓋年份（預設取自設定）
        seed: 亂數種子（預設取自設定）

    Returns:
        ObservationStore
    """
    years = list(settings.sample_years if years is None else years)
    seed = settings.sample_seed if seed is None else seed
    rng = np.random.default_rng(seed)

    monthly = [Observation(**base) for base in BASE_CLIMATOLOGY]
    yearly = generate_yearly_records(years, rng)

    return ObservationStore(monthly=monthly, yearly=yearly)
