"""
Модели медиафайлов товара (изображения и видео).
"""

from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class ProductImage(Base):
    """
    Модель изображения товара.

    Attributes:
        id: Уникальный идентификатор изображения
        product_id: ID товара
        type: Тип медиа
        path: Относительный путь к файлу в хранилище
        position: Порядок сортировки
        product: Связь с товаром
    """

    __tablename__ = "product_images"

    __table_args__ = (Index("ix_product_images_product_id", "product_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE")
    )
    type: Mapped[Optional[str]] = mapped_column(String(32), nullable=True, default="images")
    path: Mapped[str] = mapped_column(Text)
    position: Mapped[int] = mapped_column(Integer, default=0)

    # Связь с товаром
    product: Mapped["Product"] = relationship(back_populates="images")


class ProductVideo(Base):
    """Модель видео товара. Структура совпадает с ProductImage."""

    __tablename__ = "product_videos"

    __table_args__ = (Index("ix_product_videos_product_id", "product_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE")
    )
    type: Mapped[Optional[str]] = mapped_column(String(32), nullable=True, default="videos")
    path: Mapped[str] = mapped_column(Text)
    position: Mapped[int] = mapped_column(Integer, default=0)

    product: Mapped["Product"] = relationship(back_populates="videos")
