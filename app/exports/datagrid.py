"""
Таблица товаров административной панели.

Описывает колонки таблицы и строит базовый запрос с фильтрами.
Экспорт использует её как источник строк и список экспортируемых колонок.
"""

from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import Select, and_, or_, select
from sqlalchemy.orm import Session

from app.core.i18n import Translator
from app.db.models import AttributeFamily, ProductFlat, ProductImage
from app.schemas.export import ProductExportFilters


@dataclass(frozen=True)
class ColumnDescriptor:
    """
    Колонка таблицы.

    Attributes:
        index: Имя поля в строке запроса
        label: Отображаемый заголовок
        exportable: Участвует ли колонка в экспорте
    """

    index: str
    label: str
    exportable: bool = True


class ProductDataGrid:
    """Таблица товаров для активной локали и канала."""

    def __init__(
        self,
        db: Session,
        locale: str,
        channel: str,
        filters: Optional[ProductExportFilters] = None,
    ):
        self.db = db
        self.locale = locale
        self.channel = channel
        self.filters = filters or ProductExportFilters()
        self.trans = Translator(locale)

    def get_columns(self) -> List[ColumnDescriptor]:
        """Колонки таблицы в порядке отображения."""
        return [
            ColumnDescriptor("product_id", self.trans("export.columns.id")),
            ColumnDescriptor("sku", self.trans("export.columns.sku")),
            ColumnDescriptor("name", self.trans("export.columns.name")),
            ColumnDescriptor("attribute_family", self.trans("export.columns.attribute_family")),
            ColumnDescriptor("type", self.trans("export.columns.type")),
            ColumnDescriptor("price", self.trans("export.columns.price")),
            ColumnDescriptor("quantity", self.trans("export.columns.quantity")),
            ColumnDescriptor("status", self.trans("export.columns.status")),
            ColumnDescriptor("base_image", self.trans("export.columns.base_image"), exportable=False),
        ]

    def get_exportable_columns(self) -> List[ColumnDescriptor]:
        return [column for column in self.get_columns() if column.exportable]

    def get_query(self) -> Select:
        """
        Базовый запрос таблицы с учетом фильтров.

        Returns:
            Select: Запрос по product_flat для активной локали и канала
        """
        base_image = (
            select(ProductImage.path)
            .where(ProductImage.product_id == ProductFlat.product_id)
            .order_by(ProductImage.position)
            .limit(1)
            .scalar_subquery()
        )

        stmt = (
            select(
                ProductFlat.product_id,
                ProductFlat.sku,
                ProductFlat.name,
                AttributeFamily.name.label("attribute_family"),
                ProductFlat.type,
                ProductFlat.price,
                ProductFlat.quantity,
                ProductFlat.status,
                base_image.label("base_image"),
            )
            .outerjoin(AttributeFamily, AttributeFamily.id == ProductFlat.attribute_family_id)
            .where(
                and_(
                    ProductFlat.locale == self.locale,
                    ProductFlat.channel == self.channel,
                )
            )
        )

        # Формирование условий WHERE
        conditions = []
        if self.filters.q:
            pattern = f"%{self.filters.q}%"
            conditions.append(or_(ProductFlat.name.ilike(pattern), ProductFlat.sku.ilike(pattern)))
        if self.filters.sku:
            conditions.append(ProductFlat.sku == self.filters.sku)
        if self.filters.type:
            conditions.append(ProductFlat.type == self.filters.type)
        if self.filters.status is not None:
            conditions.append(ProductFlat.status == self.filters.status)
        if self.filters.attribute_family_id is not None:
            conditions.append(ProductFlat.attribute_family_id == self.filters.attribute_family_id)

        if conditions:
            stmt = stmt.where(and_(*conditions))

        return stmt.order_by(ProductFlat.product_id)
