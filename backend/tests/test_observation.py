"""觀測紀錄模型測試"""

import pytest
from pydantic import ValidationError

from climate_core.models import Metric, Month, Observation


class TestObservation:
    """測試紀錄驗證與衍生欄位"""

    def test_camel_case_input(self):
        """前端 camelCase 欄位名稱可直接使用"""
        record = Observation.model_validate({
            "year": 2021,
            "month": "Jun",
            "monthIndex": 5,
            "tempMin": 12.0,
            "tempMax": 22.0,
            "temp": 17.0,
            "climatePattern": "La Niña",
        })

        assert record.temp_min == 12.0
        assert record.temp_max == 22.0
        assert record.climate_pattern == "La Niña"

    def test_month_index_and_date_derived(self):
        """未提供 month_index 與 date 時由月份與年份推得"""
        record = Observation(year=2023, month="Oct", temp=12.0)

        assert record.month is Month.OCT
        assert record.month_index == 9
        assert record.date == "2023-10"

    def test_climatology_record_has_no_date(self):
        record = Observation(month="Jan", temp=3.0)
        assert record.year is None
        assert record.date is None

    def test_inconsistent_month_index_rejected(self):
        """month_index 必須與月份一致"""
        with pytest.raises(ValidationError):
            Observation(year=2020, month="Jan", month_index=3)

    def test_unknown_month_rejected(self):
        with pytest.raises(ValidationError):
            Observation(year=2020, month="Foo")

    def test_missing_values_stay_none(self):
        record = Observation(year=2020, month="Feb")
        assert record.value(Metric.RAINFALL) is None
        assert record.value(Metric.TEMP) is None

    def test_records_are_immutable(self):
        record = Observation(year=2020, month="Feb", temp=5.0)
        with pytest.raises(ValidationError):
            record.temp = 6.0

    def test_camel_case_output(self):
        record = Observation(year=2020, month="Mar", temp_max=11.0)
        dumped = record.model_dump(by_alias=True)
        assert dumped["tempMax"] == 11.0
        assert dumped["monthIndex"] == 2


class TestEnums:
    """測試月份與指標列舉"""

    def test_month_order(self):
        assert Month.JAN.position == 0
        assert Month.DEC.position == 11
        assert Month.from_index(6) is Month.JUL

    def test_month_parse(self):
        assert Month.parse("jul") is Month.JUL
        assert Month.parse(" Dec ") is Month.DEC
        assert Month.parse("July") is None
        assert Month.parse(7) is None

    def test_metric_accepts_camel_case(self):
        assert Metric("tempMin") is Metric.TEMP_MIN
        assert Metric("temp_max") is Metric.TEMP_MAX
        with pytest.raises(ValueError):
            Metric("pressure")
