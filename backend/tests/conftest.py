"""共用測試資料"""

import pytest

from climate_core.models import MONTH_ORDER, Observation
from climate_core.services.sample_data import BASE_CLIMATOLOGY
from climate_core.services.store import ObservationStore


def make_year(year: int, temp_shift: float = 0.0, **overrides) -> list[Observation]:
    """以溫哥華月均值為基礎建立某年 12 筆紀錄

    overrides 為 {欄位: 12 個值的列表}，用於覆寫個別月份的值。
    """
    records = []
    for index, base in enumerate(BASE_CLIMATOLOGY):
        fields = dict(base)
        fields["temp"] = base["temp"] + temp_shift
        fields["temp_min"] = base["temp_min"] + temp_shift
        fields["temp_max"] = base["temp_max"] + temp_shift
        for name, values in overrides.items():
            fields[name] = values[index]
        fields["year"] = year
        fields["month"] = MONTH_ORDER[index]
        records.append(Observation(**fields))
    return records


@pytest.fixture
def climatology():
    """12 筆月均氣候值（Jul 20°C、Jan 3°C）"""
    return [Observation(**base) for base in BASE_CLIMATOLOGY]


@pytest.fixture
def yearly_records():
    """2020-2022 三年逐月資料，每年整體增溫 1°C"""
    return make_year(2020) + make_year(2021, temp_shift=1.0) + make_year(2022, temp_shift=2.0)


@pytest.fixture
def store(climatology, yearly_records):
    return ObservationStore(monthly=climatology, yearly=yearly_records)


@pytest.fixture
def year_factory():
    """建立某年 12 筆紀錄的函式"""
    return make_year
