"""
API эндпоинты для административной панели: экспорт таблицы товаров.
"""

import io
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.core.auth import require_admin
from app.core.config import settings
from app.core.i18n import get_channel, get_locale
from app.db.database import get_db
from app.db.models import User
from app.exports import (
    MEDIA_TYPES,
    ExportContext,
    ProductDataGrid,
    ProductDataGridExport,
    write_export,
)
from app.schemas.export import ExportFormat, ExportPreview, ProductExportFilters
from app.services.storage_service import StorageProvider, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


def get_export_filters(
    q: Optional[str] = Query(None, description="Поиск по названию или артикулу"),
    sku: Optional[str] = Query(None, description="Артикул"),
    type: Optional[str] = Query(None, description="Тип товара"),
    status: Optional[bool] = Query(None, description="Статус товара"),
    attribute_family_id: Optional[int] = Query(None, description="ID семейства атрибутов"),
) -> ProductExportFilters:
    """Dependency: фильтры таблицы товаров из query-параметров."""
    return ProductExportFilters(
        q=q,
        sku=sku,
        type=type,
        status=status,
        attribute_family_id=attribute_family_id,
    )


def build_product_export(
    db: Session = Depends(get_db),
    storage: StorageProvider = Depends(get_storage),
    filters: ProductExportFilters = Depends(get_export_filters),
    locale: str = Depends(get_locale),
    channel: str = Depends(get_channel),
) -> ProductDataGridExport:
    """Dependency: экспорт таблицы товаров для активной локали и канала."""
    datagrid = ProductDataGrid(db, locale=locale, channel=channel, filters=filters)
    return ProductDataGridExport(
        db, datagrid, storage, ExportContext(locale=locale, channel=channel)
    )


def _check_export_size(export: ProductDataGridExport) -> int:
    total = len(export.collection())
    if settings.EXPORT_MAX_ROWS and total > settings.EXPORT_MAX_ROWS:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Export is limited to {settings.EXPORT_MAX_ROWS} rows, got {total}",
        )
    return total


# ==================== ЭКСПОРТ ТОВАРОВ ====================


@router.get("/products/export")
def export_products(
    format: ExportFormat = Query(ExportFormat.XLSX, description="Формат файла"),
    export: ProductDataGridExport = Depends(build_product_export),
    current_user: User = Depends(require_admin),
):
    """
    Выгрузить таблицу товаров в файл.

    Колонки: экспортируемые колонки таблицы, атрибуты всех семейств
    выбранных товаров, изображения и видео.

    Args:
        format: xlsx или csv
        export: Экспорт с учетом фильтров, локали и канала

    Returns:
        StreamingResponse: Файл экспорта

    Raises:
        HTTPException: 413 при превышении EXPORT_MAX_ROWS
    """
    total = _check_export_size(export)
    content = write_export(export, format)

    filename = f"products-{datetime.now().strftime('%Y%m%d-%H%M%S')}.{format.value}"
    logger.info(f"User {current_user.id} exported {total} products to {filename}")

    return StreamingResponse(
        io.BytesIO(content),
        media_type=MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/products/export/preview", response_model=ExportPreview)
def preview_export(
    limit: int = Query(20, ge=1, le=100, description="Количество строк"),
    export: ProductDataGridExport = Depends(build_product_export),
    current_user: User = Depends(require_admin),
):
    """
    Предпросмотр экспорта: заголовки и первые строки.
    """
    records = export.collection()
    rows = [export.map(record) for record in records[:limit]]
    return ExportPreview(headings=export.headings(), rows=rows, total=len(records))
