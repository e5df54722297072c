"""應用程式設定模組

使用 pydantic-settings 管理應用程式配置，
支援從環境變數（CLIMATE_ 前綴）和 .env 檔案載入設定。

季節對應月份與氣候常年值屬於設定資料而非運算邏輯，
分析引擎以參數接收，這裡只提供預設值。
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from climate_core.models.normals import ClimateNormals


DEFAULT_SEASON_MONTHS: dict[str, list[str]] = {
    "spring": ["Mar", "Apr", "May"],
    "summer": ["Jun", "Jul", "Aug"],
    "fall": ["Sep", "Oct", "Nov"],
    "winter": ["Dec", "Jan", "Feb"],
}


class Settings(BaseSettings):
    """應用程式設定類別

    Attributes:
        app_name: 應用程式名稱
        debug: 是否啟用除錯模式（DEBUG 等級日誌）
        season_months: 季節名稱對應的三個月份
        climate_normals: 年度氣候常年值
        temperature_anomaly_threshold: 溫度異常判定的標準差倍數
        rainfall_anomaly_threshold: 降雨異常判定的標準差倍數
        moving_average_window: 移動平均預設視窗大小
        sample_years: 範例資料涵蓋年份
        sample_seed: 範例資料亂數種子
    """

    app_name: str = "Vancouver Climate API"
    debug: bool = False
    season_months: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_SEASON_MONTHS.items()}
    )
    climate_normals: ClimateNormals = Field(default_factory=ClimateNormals)
    temperature_anomaly_threshold: float = 1.5
    rainfall_anomaly_threshold: float = 1.8
    moving_average_window: int = 3
    sample_years: list[int] = Field(default_factory=lambda: [2020, 2021, 2022, 2023, 2024])
    sample_seed: int = 42

    model_config = SettingsConfigDict(
        env_prefix="CLIMATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# 全域設定實例
settings = Settings()
