# backend/climate_core/main.py
"""FastAPI 應用程式入口"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from climate_core import __version__
from climate_core.api.v1 import climate
from climate_core.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="月度氣候觀測統計、相關分析與年度趨勢 API",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """健康檢查端點"""
    return {"status": "ok", "version": __version__}


# 註冊 API 路由
app.include_router(
    climate.router,
    prefix="/api/v1/climate",
    tags=["climate"]
)

logger.info("%s %s ready", settings.app_name, __version__)
