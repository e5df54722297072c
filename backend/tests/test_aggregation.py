"""年度彙整與趨勢測試"""

import pytest

from climate_core.analytics.aggregation import (
    climate_pattern_distribution,
    climate_pattern_profile,
    normal_deviations,
    seasonal_trends,
    trend_report,
    year_comparison,
    yearly_aggregates,
)
from climate_core.models import ClimateNormals, Metric, Observation


class TestYearlyAggregates:
    """測試年度彙整"""

    def test_single_year_matches_direct_computation(self, year_factory):
        records = year_factory(2020)

        aggregates = yearly_aggregates(records)

        assert len(aggregates) == 1
        row = aggregates[0]
        assert row.year == 2020
        assert row.total_rainfall == 1194
        assert row.avg_temp == pytest.approx(11.3)  # 136 / 12
        assert row.avg_humidity == 76  # 912 / 12
        assert row.total_sunshine == pytest.approx(84.7)

    def test_sorted_by_year(self, year_factory):
        records = year_factory(2022) + year_factory(2020, temp_shift=1.0)
        assert [a.year for a in yearly_aggregates(records)] == [2020, 2022]

    def test_missing_values_ignored(self):
        records = [
            Observation(year=2021, month="Jan", rainfall=100.4, temp=2.0),
            Observation(year=2021, month="Feb", rainfall=None, temp=4.0),
        ]
        row = yearly_aggregates(records)[0]

        assert row.total_rainfall == 100
        assert row.avg_temp == 3.0
        assert row.avg_humidity is None
        assert row.total_sunshine is None

    def test_climatology_records_skipped(self, climatology):
        assert yearly_aggregates(climatology) == []
        assert yearly_aggregates([]) == []


class TestYearComparison:
    """測試兩年度比較"""

    def test_difference_and_percent(self):
        records = [
            Observation(year=2020, month="Jan", temp=10.0),
            Observation(year=2021, month="Jan", temp=12.0),
        ]
        comparison = year_comparison(2020, 2021, records)

        temp = comparison.differences[Metric.TEMP]
        assert temp.year1 == 10.0
        assert temp.year2 == 12.0
        assert temp.difference == pytest.approx(2.0)
        assert temp.percent_change == pytest.approx(20.0)

    def test_missing_metric_has_no_difference(self):
        records = [
            Observation(year=2020, month="Jan", temp=10.0),
            Observation(year=2021, month="Jan", temp=12.0),
        ]
        rainfall = year_comparison(2020, 2021, records).differences[Metric.RAINFALL]

        assert rainfall.difference is None
        assert rainfall.percent_change is None

    def test_zero_base(self):
        records = [
            Observation(year=2020, month="Jan", rainfall=0.0),
            Observation(year=2021, month="Jan", rainfall=25.0),
        ]
        rainfall = year_comparison(2020, 2021, records).differences[Metric.RAINFALL]

        assert rainfall.difference == 25.0
        assert rainfall.percent_change == 0.0

    def test_missing_year(self, yearly_records):
        assert year_comparison(2020, 1999, yearly_records) is None
        assert year_comparison(1999, 2020, yearly_records) is None

    def test_three_years_of_warming(self, yearly_records):
        comparison = year_comparison(2020, 2022, yearly_records)

        assert comparison.differences[Metric.TEMP].difference == pytest.approx(2.0)
        assert comparison.differences[Metric.RAINFALL].difference == pytest.approx(0.0)
        assert set(comparison.differences) == {
            Metric.TEMP, Metric.RAINFALL, Metric.HUMIDITY, Metric.SUNSHINE,
        }


class TestNormalDeviations:
    def test_default_normals(self, yearly_records):
        deviations = normal_deviations(yearly_aggregates(yearly_records))

        first = deviations[0]
        assert first.year == 2020
        assert first.temp == pytest.approx(0.1)  # 11.3 - 11.2
        assert first.rainfall == 0
        assert first.humidity == 0

    def test_custom_normals(self, year_factory):
        normals = ClimateNormals(temperature=10.0, rainfall=1000.0, humidity=80.0, sunshine=80.0)
        deviation = normal_deviations(yearly_aggregates(year_factory(2020)), normals)[0]

        assert deviation.temp == pytest.approx(1.3)
        assert deviation.rainfall == 194
        assert deviation.humidity == -4
        assert deviation.sunshine == pytest.approx(4.7)


class TestSeasonalTrends:
    def test_seasons_per_year(self, yearly_records):
        trends = seasonal_trends(yearly_records)

        assert [t.year for t in trends] == [2020, 2021, 2022]
        first = trends[0].seasons
        assert first["summer"].temp == pytest.approx(19.0)
        assert first["summer"].rainfall == 122  # 54 + 31 + 37
        assert first["winter"].rainfall == 442  # Jan + Feb + Dec 同一日曆年
        assert trends[2].seasons["summer"].temp == pytest.approx(21.0)

    def test_only_seasons_with_records(self):
        records = [Observation(year=2020, month="Jul", temp=20.0, rainfall=30.0)]
        trends = seasonal_trends(records)

        assert list(trends[0].seasons) == ["summer"]


class TestClimatePatterns:
    """測試氣候型態概況"""

    def test_profile_and_distribution(self, year_factory):
        records = (
            year_factory(2020, climate_pattern=["La Niña"] * 12)
            + year_factory(2021, climate_pattern=["La Niña"] * 12)
            + year_factory(2023, climate_pattern=["El Niño"] * 12)
        )

        profiles = climate_pattern_profile(records)
        distribution = climate_pattern_distribution(profiles)

        assert [p.climate_pattern for p in profiles] == ["La Niña", "La Niña", "El Niño"]
        assert distribution["La Niña"].count == 2
        assert distribution["La Niña"].years == [2020, 2021]
        assert distribution["El Niño"].years == [2023]

    def test_missing_pattern_defaults_to_normal(self, yearly_records):
        profiles = climate_pattern_profile(yearly_records)
        assert {p.climate_pattern for p in profiles} == {"Normal"}

    def test_extreme_events_deduplicated(self):
        records = [
            Observation(year=2021, month="Jun", extreme_event="Heat Dome", temp=25.0),
            Observation(year=2021, month="Jul", extreme_event="Heat Dome", temp=24.0),
            Observation(year=2021, month="Nov", extreme_event="Atmospheric River", temp=8.0),
        ]
        profile = climate_pattern_profile(records)[0]

        assert profile.extreme_events == ["Heat Dome", "Atmospheric River"]


class TestTrendReport:
    def test_report_sections(self, yearly_records):
        report = trend_report(yearly_records)

        assert [row.year for row in report.yearly] == [2020, 2021, 2022]
        assert report.pattern_distribution["Normal"].count == 3
        assert len(report.patterns) == 3
        assert all(r.year is not None for r in report.temperature_anomalies)

    def test_thresholds_applied(self, yearly_records):
        loose = trend_report(yearly_records, temperature_threshold=0.5, rainfall_threshold=0.5)
        strict = trend_report(yearly_records, temperature_threshold=3.0, rainfall_threshold=3.0)

        assert len(loose.temperature_anomalies) >= len(strict.temperature_anomalies)
        assert len(loose.rainfall_anomalies) >= len(strict.rainfall_anomalies)
        assert strict.rainfall_anomalies == []
