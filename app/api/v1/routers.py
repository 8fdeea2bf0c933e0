"""
Основной роутер API v1.

Подключает все endpoint'ы приложения.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import admin, categories, subscription

# Создание основного роутера API v1
api_router = APIRouter()

# Подключение роутеров для различных ресурсов
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(subscription.router, prefix="/subscription", tags=["subscription"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
