"""
Схемы для экспорта товаров.
"""

import enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ExportFormat(str, enum.Enum):
    """Поддерживаемые форматы файла экспорта."""

    XLSX = "xlsx"
    CSV = "csv"


class ProductExportFilters(BaseModel):
    """
    Фильтры таблицы товаров, применяемые к экспорту.

    Attributes:
        q: Поиск по названию или артикулу
        sku: Точное совпадение артикула
        type: Тип товара
        status: Статус товара (включен/выключен)
        attribute_family_id: ID семейства атрибутов
    """

    q: Optional[str] = Field(None, description="Поиск по названию или артикулу")
    sku: Optional[str] = Field(None, description="Артикул")
    type: Optional[str] = Field(None, description="Тип товара")
    status: Optional[bool] = Field(None, description="Статус товара")
    attribute_family_id: Optional[int] = Field(None, description="ID семейства атрибутов")


class ExportPreview(BaseModel):
    """Предпросмотр экспорта: заголовки и первые строки."""

    headings: List[str]
    rows: List[List[Any]]
    total: int
