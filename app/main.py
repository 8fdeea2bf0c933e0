"""
Главный модуль FastAPI приложения Storefront Admin API.

Содержит конфигурацию приложения, middleware и роутеры.
Обеспечивает экспорт каталога, подписку на рассылку и навигацию витрины.
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.v1.routers import api_router
from app.core.config import settings

# Настройка логирования
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Создание экземпляра FastAPI приложения
app = FastAPI(
    title="Storefront Admin API",
    description="API витрины и административной панели: экспорт товаров, подписка на рассылку, навигация",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Подключение статических файлов для локального хранилища
if settings.STORAGE_TYPE == "local":
    storage_path = os.path.abspath(settings.STORAGE_PATH)
    if os.path.isdir(storage_path):
        app.mount("/static", StaticFiles(directory=storage_path), name="static")
        logger.info(f"Static files mounted at /static from directory: {storage_path}")
    else:
        logger.warning(f"Storage directory does not exist, static files not mounted: {storage_path}")


# Настройка CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # TODO: сузить в продакшене до конкретных доменов
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
def healthz():
    """
    Health check endpoint для мониторинга состояния приложения.

    Returns:
        dict: Статус приложения
    """
    return {"status": "ok", "service": "Storefront Admin API", "version": "1.0.0"}


# Подключение API роутеров
app.include_router(api_router, prefix="/api/v1")
