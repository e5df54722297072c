"""觀測資料儲存與範例資料測試"""

import pytest

from climate_core.models import MONTH_ORDER, Month, Observation
from climate_core.services.sample_data import generate_sample_store
from climate_core.services.store import ObservationStore, build_climatology


class TestObservationStore:
    """測試資料儲存"""

    def test_store_from_dicts(self):
        store = ObservationStore(
            yearly=[{"year": 2020, "month": "Jan", "temp": 3.2}]
        )
        assert len(store.yearly) == 1
        assert isinstance(store.yearly[0], Observation)
        assert store.monthly == ()

    def test_empty_store(self):
        store = ObservationStore()
        assert store.is_empty
        assert store.to_frame().empty

    def test_climatology_must_have_twelve_months(self, climatology):
        with pytest.raises(ValueError):
            ObservationStore(monthly=climatology[:11])

    def test_yearly_records_require_year(self, climatology):
        with pytest.raises(ValueError):
            ObservationStore(yearly=climatology)

    def test_collections_are_tuples(self, store):
        assert isinstance(store.monthly, tuple)
        assert isinstance(store.yearly, tuple)

    def test_to_frame_keeps_missing_as_nan(self):
        store = ObservationStore(yearly=[
            {"year": 2020, "month": "Jan", "rainfall": 100.0},
            {"year": 2020, "month": "Feb"},
        ])
        frame = store.to_frame()

        assert len(frame) == 2
        assert frame["rainfall"].isna().sum() == 1
        assert frame["rainfall"].dropna().iloc[0] == 100.0


class TestBuildClimatology:
    """測試由逐年資料推算月均氣候值"""

    def test_monthly_means_across_years(self, yearly_records):
        climatology = build_climatology(yearly_records)

        assert [r.month for r in climatology] == list(MONTH_ORDER)
        # 三年溫度偏移 0, 1, 2 -> 平均偏移 1
        jul = climatology[Month.JUL.position]
        assert jul.temp == 21.0
        assert jul.year is None

    def test_missing_month_stays_empty(self):
        climatology = build_climatology([
            Observation(year=2020, month="Jan", temp=2.0, humidity=83.6),
        ])

        assert len(climatology) == 12
        assert climatology[0].temp == 2.0
        assert climatology[0].humidity == 84.0
        assert climatology[1].temp is None

    def test_from_yearly(self, yearly_records):
        store = ObservationStore.from_yearly(yearly_records)
        assert len(store.monthly) == 12
        assert len(store.yearly) == 36


class TestSampleData:
    """測試範例資料產生"""

    def test_sample_shape(self):
        store = generate_sample_store(years=[2020, 2021, 2022, 2023, 2024], seed=1)

        assert len(store.monthly) == 12
        assert len(store.yearly) == 60

    def test_sample_is_deterministic(self):
        first = generate_sample_store(years=[2021], seed=7)
        second = generate_sample_store(years=[2021], seed=7)
        assert first.yearly == second.yearly

    def test_sample_values_are_bounded(self):
        store = generate_sample_store(years=[2020, 2021, 2022], seed=3)

        for record in store.yearly:
            assert 40 <= record.humidity <= 100
            assert record.rainfall >= 0
            assert record.sunshine >= 0
            assert record.temp_min <= record.temp <= record.temp_max

    def test_sample_extreme_events(self):
        store = generate_sample_store(years=[2021, 2022], seed=3)
        events = {(r.year, r.month): r.extreme_event for r in store.yearly if r.extreme_event}

        assert events == {
            (2021, Month.JUN): "Heat Dome",
            (2022, Month.NOV): "Atmospheric River",
        }
