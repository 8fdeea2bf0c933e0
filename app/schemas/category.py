"""
Схемы для навигации по категориям.
"""

from typing import List

from pydantic import BaseModel


class CategoryNode(BaseModel):
    """Узел дерева категорий."""

    id: int
    name: str
    slug: str
    url: str
    children: List["CategoryNode"] = []


class HeaderNavigation(BaseModel):
    """
    Данные для шапки витрины.

    Attributes:
        categories: Видимые категории (до трех уровней)
        show_compare: Показывать ссылку на сравнение
        show_wishlist: Показывать ссылку на избранное
    """

    categories: List[CategoryNode]
    show_compare: bool
    show_wishlist: bool


CategoryNode.model_rebuild()
