"""服務模組

觀測資料儲存與範例資料產生。
"""

from climate_core.services.sample_data import generate_sample_store
from climate_core.services.store import ObservationStore, build_climatology, records_to_frame

__all__ = [
    "ObservationStore",
    "build_climatology",
    "generate_sample_store",
    "records_to_frame",
]
