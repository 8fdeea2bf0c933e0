"""
Модель значения атрибута товара.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .attribute import AttributeType
from .base import Base


# Колонка хранения значения для каждого типа атрибута
ATTRIBUTE_TYPE_FIELDS: Dict[str, str] = {
    AttributeType.TEXT.value: "text_value",
    AttributeType.TEXTAREA.value: "text_value",
    AttributeType.PRICE.value: "float_value",
    AttributeType.BOOLEAN.value: "boolean_value",
    AttributeType.SELECT.value: "integer_value",
    AttributeType.MULTISELECT.value: "text_value",
    AttributeType.CHECKBOX.value: "text_value",
    AttributeType.DATETIME.value: "datetime_value",
    AttributeType.DATE.value: "date_value",
    AttributeType.IMAGE.value: "text_value",
    AttributeType.FILE.value: "text_value",
}


class ProductAttributeValue(Base):
    """
    Значение атрибута товара (одна строка EAV).

    Осмысленна только одна типизированная колонка, выбираемая
    по типу атрибута (см. ATTRIBUTE_TYPE_FIELDS).

    Attributes:
        product_id: ID товара
        attribute_id: ID атрибута
        locale: Локаль (NULL для атрибутов без value_per_locale)
        channel: Канал (NULL для атрибутов без value_per_channel)
    """

    __tablename__ = "product_attribute_values"

    __table_args__ = (
        Index("ix_product_attribute_values_product_id", "product_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE")
    )
    attribute_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("attributes.id", ondelete="CASCADE")
    )
    locale: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    channel: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    # Типизированные колонки
    text_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    boolean_value: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    integer_value: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    float_value: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 4), nullable=True)
    datetime_value: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    date_value: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    product: Mapped["Product"] = relationship(back_populates="attribute_values")

    def __repr__(self) -> str:
        return (
            f"<ProductAttributeValue(product_id={self.product_id}, "
            f"attribute_id={self.attribute_id}, locale='{self.locale}', channel='{self.channel}')>"
        )
