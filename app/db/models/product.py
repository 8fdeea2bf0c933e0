"""
Модели товара и его плоского представления.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Product(Base):
    """
    Модель товара.

    Attributes:
        id: Уникальный идентификатор товара
        sku: Артикул
        type: Тип товара (simple/configurable/virtual/...)
        attribute_family_id: ID семейства атрибутов
        images: Связь с изображениями товара
        videos: Связь с видео товара
        attribute_values: Значения атрибутов (EAV)
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sku: Mapped[str] = mapped_column(String(191), unique=True, index=True)
    type: Mapped[str] = mapped_column(String(32), default="simple")
    attribute_family_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("attribute_families.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    # Связи с другими моделями
    images: Mapped[List["ProductImage"]] = relationship(
        back_populates="product", cascade="all,delete"
    )
    videos: Mapped[List["ProductVideo"]] = relationship(
        back_populates="product", cascade="all,delete"
    )
    attribute_values: Mapped[List["ProductAttributeValue"]] = relationship(
        back_populates="product", cascade="all,delete"
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, sku='{self.sku}')>"


class ProductFlat(Base):
    """
    Денормализованное представление товара для конкретной локали и канала.

    Используется таблицами админки и экспортом как источник базовых колонок.
    """

    __tablename__ = "product_flat"

    __table_args__ = (
        UniqueConstraint(
            "product_id", "channel", "locale", name="uq_product_flat_product_channel_locale"
        ),
        Index("ix_product_flat_product_id", "product_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE")
    )
    sku: Mapped[str] = mapped_column(String(191))
    type: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 4), nullable=True)
    quantity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    status: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    url_key: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    locale: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    channel: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    attribute_family_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("attribute_families.id", ondelete="RESTRICT"), nullable=True
    )

    def __repr__(self) -> str:
        return f"<ProductFlat(product_id={self.product_id}, locale='{self.locale}')>"
