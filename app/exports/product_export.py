"""
Экспорт таблицы товаров в электронную таблицу.

Собирает денормализованные строки из EAV-схемы: базовые колонки таблицы,
одна колонка на каждый атрибут из объединения семейств экспортируемых
товаров, затем ссылки на изображения и видео. Все связанные данные
загружаются несколькими пакетными запросами при первом обращении.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Set, Tuple

from sqlalchemy import select
from sqlalchemy.engine import Row, RowMapping
from sqlalchemy.orm import Session

from app.core.i18n import Translator
from app.db.models import (
    ATTRIBUTE_TYPE_FIELDS,
    Attribute,
    AttributeGroup,
    AttributeOptionTranslation,
    AttributeType,
    ProductAttributeValue,
    ProductFlat,
    ProductImage,
    ProductVideo,
    attribute_group_mappings,
)
from app.exports.datagrid import ProductDataGrid
from app.services.storage_service import StorageProvider

logger = logging.getLogger(__name__)

# Символы, с которых табличные редакторы начинают формулу
FORMULA_TRIGGERS = frozenset(["=", "+", "-", "@", "\t", "\r", "\n", "|", "%"])

EMPTY_IDS: FrozenSet[int] = frozenset()


def sanitize(value: Any) -> Any:
    """
    Защита ячейки от formula injection.

    Строка, первый значимый символ которой запускает формулу, получает
    префикс-апостроф. Исходная строка (с ведущими пробелами) сохраняется.
    Нестроковые значения возвращаются без изменений.
    """
    if not isinstance(value, str):
        return value

    trimmed = value.lstrip(" ")
    if not trimmed:
        return value

    if trimmed[0] in FORMULA_TRIGGERS:
        return "'" + value

    return value


@dataclass(frozen=True)
class ExportContext:
    """Активная локаль и канал экспорта."""

    locale: str
    channel: str


@dataclass
class PreloadState:
    """
    Кэши одного запуска экспорта.

    Все поля заполняются один раз в ProductDataGridExport.ensure_preloaded().
    Методы доступа возвращают пустые значения вместо None.
    """

    loaded: bool = False
    products: List[RowMapping] = field(default_factory=list)
    attributes: List[Row] = field(default_factory=list)
    product_families: Dict[int, Optional[int]] = field(default_factory=dict)
    family_attributes: Dict[int, Set[int]] = field(default_factory=dict)
    values: Dict[Tuple[int, int], Row] = field(default_factory=dict)
    option_labels: Dict[int, str] = field(default_factory=dict)
    images: Dict[int, List[str]] = field(default_factory=dict)
    videos: Dict[int, List[str]] = field(default_factory=dict)

    def family_of(self, product_id: int) -> Optional[int]:
        return self.product_families.get(product_id)

    def attributes_of_family(self, family_id: Optional[int]) -> FrozenSet[int]:
        if family_id is None:
            return EMPTY_IDS
        return frozenset(self.family_attributes.get(family_id, EMPTY_IDS))

    def value_of(self, product_id: int, attribute_id: int) -> Optional[Row]:
        return self.values.get((product_id, attribute_id))

    def label_of(self, option_id: int, default: Any) -> Any:
        return self.option_labels.get(option_id, default)

    def images_of(self, product_id: int) -> List[str]:
        return self.images.get(product_id, [])

    def videos_of(self, product_id: int) -> List[str]:
        return self.videos.get(product_id, [])


def _numeric_tokens(text: str) -> Iterator[int]:
    """Целые числа из строки вида "3,7,99"; нечисловые части пропускаются."""
    for token in text.split(","):
        token = token.strip()
        if token.isdecimal():
            yield int(token)


class ProductDataGridExport:
    """
    Экспорт таблицы товаров.

    Точки входа headings() и rows()/collection() используют одни и те же
    кэши и одинаковый порядок колонок. Экземпляр рассчитан на один запуск.

    Args:
        db: Сессия базы данных
        datagrid: Таблица товаров (базовый запрос и описание колонок)
        storage: Провайдер хранилища для построения URL медиафайлов
        context: Активная локаль и канал
    """

    def __init__(
        self,
        db: Session,
        datagrid: ProductDataGrid,
        storage: StorageProvider,
        context: ExportContext,
    ):
        self.db = db
        self.datagrid = datagrid
        self.storage = storage
        self.context = context
        self.trans = Translator(context.locale)
        self.state = PreloadState()

    # ==================== ТОЧКИ ВХОДА ====================

    def collection(self) -> List[RowMapping]:
        """Строки базового запроса (загружаются один раз)."""
        self.ensure_preloaded()
        return self.state.products

    def headings(self) -> List[str]:
        """
        Заголовок: экспортируемые колонки таблицы, атрибуты, изображения, видео.
        """
        self.ensure_preloaded()

        datagrid_headers = [column.label for column in self.datagrid.get_exportable_columns()]
        attribute_headers = [attribute.admin_name for attribute in self.state.attributes]

        return (
            datagrid_headers
            + attribute_headers
            + [self.trans("export.images"), self.trans("export.videos")]
        )

    def rows(self) -> Iterator[List[Any]]:
        """Строки экспорта в порядке базового запроса."""
        for record in self.collection():
            yield self.map(record)

    def map(self, record: RowMapping) -> List[Any]:
        """
        Преобразовать строку товара в значения ячеек.

        Значение атрибута выводится только если атрибут входит в семейство
        самого товара, иначе ячейка пустая.
        """
        self.ensure_preloaded()
        product_id = record["product_id"]

        datagrid_values = [
            sanitize(record[column.index])
            for column in self.datagrid.get_exportable_columns()
        ]

        family_attribute_ids = self.state.attributes_of_family(self.state.family_of(product_id))

        attribute_values = [
            self.resolve_attribute_value(product_id, attribute)
            if attribute.id in family_attribute_ids
            else None
            for attribute in self.state.attributes
        ]

        # TODO: решить, нужно ли пропускать ячейки медиа через sanitize()
        images = ", ".join(self.state.images_of(product_id))
        videos = ", ".join(self.state.videos_of(product_id))

        return datagrid_values + attribute_values + [images, videos]

    # ==================== ПРЕДЗАГРУЗКА ====================

    def ensure_preloaded(self) -> None:
        """
        Выполнить базовый запрос и все пакетные загрузки.

        Повторные вызовы ничего не делают.
        """
        if self.state.loaded:
            return

        self.state.products = list(self.db.execute(self.datagrid.get_query()).mappings().all())

        if not self.state.products:
            logger.info("Product export: base query returned no rows")
            self.state.loaded = True
            return

        product_ids = list(dict.fromkeys(row["product_id"] for row in self.state.products))

        self._preload_family_attributes(product_ids)
        self._preload_attribute_values(product_ids)
        self._preload_media(product_ids)
        self.state.loaded = True

        logger.info(
            f"Product export preloaded: {len(self.state.products)} rows, "
            f"{len(self.state.attributes)} attributes, {len(self.state.values)} values, "
            f"{len(self.state.option_labels)} option labels"
        )

    def _preload_family_attributes(self, product_ids: List[int]) -> None:
        """
        Загрузить семейства товаров и объединение их атрибутов.

        1. product_id -> attribute_family_id (по product_flat активной локали)
        2. Атрибуты всех семейств, по position, уникальные по id
        3. family_id -> множество attribute_id
        """
        family_rows = self.db.execute(
            select(ProductFlat.product_id, ProductFlat.attribute_family_id).where(
                ProductFlat.product_id.in_(product_ids),
                ProductFlat.locale == self.context.locale,
            )
        ).all()

        self.state.product_families = {
            row.product_id: row.attribute_family_id for row in family_rows
        }

        family_ids = sorted(
            {family_id for family_id in self.state.product_families.values() if family_id}
        )
        if not family_ids:
            return

        attribute_rows = self.db.execute(
            select(
                Attribute.id,
                Attribute.code,
                Attribute.admin_name,
                Attribute.type,
                Attribute.value_per_locale,
                Attribute.value_per_channel,
                AttributeGroup.attribute_family_id,
            )
            .join(attribute_group_mappings, attribute_group_mappings.c.attribute_id == Attribute.id)
            .join(AttributeGroup, AttributeGroup.id == attribute_group_mappings.c.attribute_group_id)
            .where(AttributeGroup.attribute_family_id.in_(family_ids))
            .order_by(Attribute.position, Attribute.id)
        ).all()

        seen: Set[int] = set()
        for row in attribute_rows:
            self.state.family_attributes.setdefault(row.attribute_family_id, set()).add(row.id)
            if row.id not in seen:
                seen.add(row.id)
                self.state.attributes.append(row)

    def _preload_attribute_values(self, product_ids: List[int]) -> None:
        """
        Загрузить значения атрибутов и переводы опций.

        Сохраняется только строка, подходящая под активные локаль и канал,
        по одной на пару (product_id, attribute_id).
        """
        raw_values = self.db.execute(
            select(
                ProductAttributeValue.product_id,
                ProductAttributeValue.attribute_id,
                ProductAttributeValue.locale,
                ProductAttributeValue.channel,
                ProductAttributeValue.text_value,
                ProductAttributeValue.boolean_value,
                ProductAttributeValue.integer_value,
                ProductAttributeValue.float_value,
                ProductAttributeValue.datetime_value,
                ProductAttributeValue.date_value,
            ).where(ProductAttributeValue.product_id.in_(product_ids))
        ).all()

        self._preload_option_labels(raw_values)

        attributes_by_id = {attribute.id: attribute for attribute in self.state.attributes}
        locale = self.context.locale
        channel = self.context.channel

        for row in raw_values:
            attribute = attributes_by_id.get(row.attribute_id)
            if attribute is None:
                continue

            matches_locale = row.locale == locale if attribute.value_per_locale else row.locale is None
            matches_channel = (
                row.channel == channel if attribute.value_per_channel else row.channel is None
            )
            if not matches_locale or not matches_channel:
                continue

            self.state.values[(row.product_id, row.attribute_id)] = row

    def _preload_option_labels(self, raw_values: List[Row]) -> None:
        """Перевести все упомянутые id опций одним запросом."""
        option_ids: Set[int] = set()
        for row in raw_values:
            if row.integer_value is not None:
                option_ids.add(int(row.integer_value))
            if row.text_value:
                option_ids.update(_numeric_tokens(row.text_value))

        option_ids.discard(0)
        if not option_ids:
            return

        label_rows = self.db.execute(
            select(
                AttributeOptionTranslation.attribute_option_id,
                AttributeOptionTranslation.label,
            ).where(
                AttributeOptionTranslation.attribute_option_id.in_(sorted(option_ids)),
                AttributeOptionTranslation.locale == self.context.locale,
            )
        ).all()

        self.state.option_labels = {
            row.attribute_option_id: row.label for row in label_rows if row.label is not None
        }

    def _preload_media(self, product_ids: List[int]) -> None:
        """Загрузить изображения и видео товаров, сгруппированные по product_id."""
        self.state.images = self._load_media_urls(ProductImage, product_ids)
        self.state.videos = self._load_media_urls(ProductVideo, product_ids)

    def _load_media_urls(self, model, product_ids: List[int]) -> Dict[int, List[str]]:
        rows = self.db.execute(
            select(model.product_id, model.path)
            .where(model.product_id.in_(product_ids))
            .order_by(model.product_id, model.position, model.id)
        ).all()

        grouped: Dict[int, List[str]] = {}
        for row in rows:
            grouped.setdefault(row.product_id, []).append(self.storage.get_file_url(row.path))
        return grouped

    # ==================== ЗНАЧЕНИЯ АТРИБУТОВ ====================

    def resolve_attribute_value(self, product_id: int, attribute: Row) -> Any:
        """
        Отображаемое значение атрибута товара.

        Returns:
            Значение ячейки или None, если значения нет
        """
        row = self.state.value_of(product_id, attribute.id)
        if row is None:
            return None

        column = ATTRIBUTE_TYPE_FIELDS.get(attribute.type, "text_value")
        value = getattr(row, column)

        if value is None or value == "":
            return None

        if attribute.type == AttributeType.SELECT.value:
            return sanitize(self._option_label(value))

        if attribute.type in (AttributeType.MULTISELECT.value, AttributeType.CHECKBOX.value):
            labels = [self._option_label(token.strip()) for token in str(value).split(",")]
            # пустые токены и "0" не выводятся
            return sanitize(
                ", ".join(str(label) for label in labels if label and label != "0")
            )

        if attribute.type == AttributeType.BOOLEAN.value:
            return self.trans("export.yes") if value else self.trans("export.no")

        return sanitize(value)

    def _option_label(self, value: Any) -> Any:
        """Перевод опции по id; при отсутствии перевода возвращается исходное значение."""
        if isinstance(value, int) and not isinstance(value, bool):
            return self.state.label_of(value, value)
        if isinstance(value, str) and value.isdecimal():
            return self.state.label_of(int(value), value)
        return value
