"""
Модели базы данных.

Импортирует все модели для корректной работы SQLAlchemy.
"""

from .attribute import (
    Attribute,
    AttributeFamily,
    AttributeGroup,
    AttributeOption,
    AttributeOptionTranslation,
    AttributeType,
    attribute_group_mappings,
)
from .base import Base
from .category import Category, CategoryTranslation, Channel
from .product import Product, ProductFlat
from .product_attribute_value import ATTRIBUTE_TYPE_FIELDS, ProductAttributeValue
from .product_image import ProductImage, ProductVideo
from .subscriber import SubscribersList
from .user import User

__all__ = [
    "Base",
    "Attribute",
    "AttributeFamily",
    "AttributeGroup",
    "AttributeOption",
    "AttributeOptionTranslation",
    "AttributeType",
    "attribute_group_mappings",
    "ATTRIBUTE_TYPE_FIELDS",
    "Category",
    "CategoryTranslation",
    "Channel",
    "Product",
    "ProductFlat",
    "ProductAttributeValue",
    "ProductImage",
    "ProductVideo",
    "SubscribersList",
    "User",
]
