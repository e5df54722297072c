"""氣候常年值（climate normals）

作為年度彙整「常年偏差」的參考基準；
偏差僅為單純相減，與統計異常偵測無關。
"""

from pydantic import BaseModel, Field


class ClimateNormals(BaseModel):
    """年度氣候常年值"""

    period: str = Field("1981-2010", description="常年值統計期間")
    temperature: float = Field(11.2, description="年平均溫度 (°C)")
    rainfall: float = Field(1194.0, ge=0, description="年總降雨量 (mm)")
    humidity: float = Field(76.0, description="年平均相對溼度 (%)")
    sunshine: float = Field(1928.0, ge=0, description="年總日照時數 (小時)")
