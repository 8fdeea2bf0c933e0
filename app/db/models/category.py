"""
Модели категорий товаров и каналов продаж.
"""

from typing import List, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Category(Base):
    """
    Модель категории товаров (дерево через parent_id).

    Attributes:
        id: Уникальный идентификатор категории
        parent_id: ID родительской категории
        position: Порядок сортировки среди соседей
        status: Видимость категории на витрине
        children: Дочерние категории
        translations: Переводы названия и slug
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=True, index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[bool] = mapped_column(Boolean, default=True)

    children: Mapped[List["Category"]] = relationship(
        back_populates="parent", cascade="all,delete"
    )
    parent: Mapped[Optional["Category"]] = relationship(
        back_populates="children", remote_side="Category.id"
    )
    translations: Mapped[List["CategoryTranslation"]] = relationship(
        back_populates="category", cascade="all,delete", lazy="selectin"
    )

    def translation(self, locale: str) -> Optional["CategoryTranslation"]:
        """Перевод категории для локали (или None)."""
        for item in self.translations:
            if item.locale == locale:
                return item
        return None


class CategoryTranslation(Base):
    """Перевод категории: название, slug и путь для URL."""

    __tablename__ = "category_translations"

    __table_args__ = (
        UniqueConstraint("category_id", "locale", name="uq_category_translation_locale"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="CASCADE"), index=True
    )
    locale: Mapped[str] = mapped_column(String(16))
    name: Mapped[str] = mapped_column(Text)
    slug: Mapped[str] = mapped_column(String(191))
    url_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    category: Mapped["Category"] = relationship(back_populates="translations")


class Channel(Base):
    """
    Канал продаж (витрина).

    Attributes:
        id: Уникальный идентификатор канала
        code: Код канала
        name: Название канала
        root_category_id: Корневая категория витрины
    """

    __tablename__ = "channels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    name: Mapped[str] = mapped_column(Text)
    root_category_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )

    def __repr__(self) -> str:
        return f"<Channel(id={self.id}, code='{self.code}')>"
