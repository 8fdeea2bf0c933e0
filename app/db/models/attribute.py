"""
Модели атрибутов каталога (EAV).

Семейство атрибутов состоит из групп, группы ссылаются на атрибуты
через таблицу attribute_group_mappings. Опции атрибутов типа
select/multiselect/checkbox имеют переводы по локалям.
"""

import enum
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class AttributeType(str, enum.Enum):
    """Типы атрибутов. Определяют колонку хранения и правило отображения."""

    TEXT = "text"
    TEXTAREA = "textarea"
    PRICE = "price"
    BOOLEAN = "boolean"
    SELECT = "select"
    MULTISELECT = "multiselect"
    CHECKBOX = "checkbox"
    DATETIME = "datetime"
    DATE = "date"
    IMAGE = "image"
    FILE = "file"


# Связь атрибутов с группами (многие-ко-многим)
attribute_group_mappings = Table(
    "attribute_group_mappings",
    Base.metadata,
    Column(
        "attribute_id",
        Integer,
        ForeignKey("attributes.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "attribute_group_id",
        Integer,
        ForeignKey("attribute_groups.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("position", Integer, nullable=True),
)


class AttributeFamily(Base):
    """
    Семейство атрибутов (набор атрибутов для типа товара).

    Attributes:
        id: Уникальный идентификатор семейства
        code: Код семейства
        name: Название семейства
        groups: Группы атрибутов семейства
    """

    __tablename__ = "attribute_families"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(191), unique=True)
    name: Mapped[str] = mapped_column(Text)
    status: Mapped[bool] = mapped_column(Boolean, default=False)

    groups: Mapped[List["AttributeGroup"]] = relationship(
        back_populates="family", cascade="all,delete"
    )

    def __repr__(self) -> str:
        return f"<AttributeFamily(id={self.id}, code='{self.code}')>"


class AttributeGroup(Base):
    """Группа атрибутов внутри семейства."""

    __tablename__ = "attribute_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    attribute_family_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("attribute_families.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(Text)
    position: Mapped[int] = mapped_column(Integer, default=0)

    family: Mapped["AttributeFamily"] = relationship(back_populates="groups")
    attributes: Mapped[List["Attribute"]] = relationship(
        secondary=attribute_group_mappings
    )


class Attribute(Base):
    """
    Атрибут товара.

    Attributes:
        id: Уникальный идентификатор атрибута
        code: Код атрибута
        admin_name: Название для административной панели
        type: Тип атрибута (см. AttributeType)
        position: Порядок сортировки
        value_per_locale: Значение хранится отдельно для каждой локали
        value_per_channel: Значение хранится отдельно для каждого канала
    """

    __tablename__ = "attributes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(191), unique=True)
    admin_name: Mapped[str] = mapped_column(Text)
    type: Mapped[str] = mapped_column(String(32))
    position: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_required: Mapped[bool] = mapped_column(Boolean, default=False)
    value_per_locale: Mapped[bool] = mapped_column(Boolean, default=False)
    value_per_channel: Mapped[bool] = mapped_column(Boolean, default=False)

    options: Mapped[List["AttributeOption"]] = relationship(
        back_populates="attribute", cascade="all,delete"
    )

    def __repr__(self) -> str:
        return f"<Attribute(id={self.id}, code='{self.code}', type='{self.type}')>"


class AttributeOption(Base):
    """Опция атрибута типа select/multiselect/checkbox."""

    __tablename__ = "attribute_options"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    attribute_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("attributes.id", ondelete="CASCADE"), index=True
    )
    admin_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sort_order: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    attribute: Mapped["Attribute"] = relationship(back_populates="options")
    translations: Mapped[List["AttributeOptionTranslation"]] = relationship(
        back_populates="option", cascade="all,delete"
    )


class AttributeOptionTranslation(Base):
    """
    Перевод опции атрибута.

    Attributes:
        attribute_option_id: ID опции
        locale: Код локали
        label: Отображаемое название
    """

    __tablename__ = "attribute_option_translations"

    __table_args__ = (
        UniqueConstraint(
            "attribute_option_id", "locale", name="uq_attribute_option_translation_locale"
        ),
        Index("ix_attribute_option_translations_option_id", "attribute_option_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    attribute_option_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("attribute_options.id", ondelete="CASCADE")
    )
    locale: Mapped[str] = mapped_column(String(16))
    label: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    option: Mapped["AttributeOption"] = relationship(back_populates="translations")
