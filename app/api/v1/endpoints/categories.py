"""
API endpoints для работы с категориями товаров.

Содержит дерево категорий для навигации в шапке витрины,
список категорий и информацию о конкретной категории.
"""

import time
from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.i18n import get_channel, get_locale
from app.db.database import get_db
from app.db.models import Category, Channel
from app.schemas.category import CategoryNode, HeaderNavigation

router = APIRouter()

# Глубина дерева в шапке: первый, второй и третий уровни
NAVIGATION_DEPTH = 3

# Простое in-memory кэширование дерева категорий
_tree_cache: Dict[Tuple[str, str], Tuple[float, List[CategoryNode]]] = {}
CACHE_TTL = 300  # 5 минут


def clear_tree_cache() -> None:
    _tree_cache.clear()


def _build_tree(
    categories: List[Category], parent_id: Optional[int], locale: str, depth: int
) -> List[CategoryNode]:
    """Рекурсивно собрать видимые дочерние категории parent_id."""
    if depth == 0:
        return []

    nodes = []
    children = [c for c in categories if c.parent_id == parent_id]
    for category in sorted(children, key=lambda c: (c.position, c.id)):
        translation = category.translation(locale)
        if translation is None:
            continue
        nodes.append(
            CategoryNode(
                id=category.id,
                name=translation.name,
                slug=translation.slug,
                url=f"/{translation.url_path or translation.slug}",
                children=_build_tree(categories, category.id, locale, depth - 1),
            )
        )
    return nodes


def get_visible_category_tree(
    db: Session, root_category_id: int, locale: str
) -> List[CategoryNode]:
    """Дерево видимых категорий под корневой категорией канала."""
    categories = db.scalars(select(Category).where(Category.status.is_(True))).all()
    return _build_tree(list(categories), root_category_id, locale, NAVIGATION_DEPTH)


@router.get("/tree", response_model=HeaderNavigation)
def category_tree(
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    channel_code: str = Depends(get_channel),
):
    """
    Навигация для шапки витрины.

    Возвращает видимые категории канала на трех уровнях вложенности
    и флаги отображения сравнения и избранного.

    Raises:
        HTTPException: Если канал не найден
    """
    channel = db.scalar(select(Channel).where(Channel.code == channel_code))
    if channel is None:
        raise HTTPException(404, detail="Channel not found")

    cache_key = (channel_code, locale)
    cached = _tree_cache.get(cache_key)
    current_time = time.time()

    if cached and (current_time - cached[0]) < CACHE_TTL:
        categories = cached[1]
    else:
        categories = (
            get_visible_category_tree(db, channel.root_category_id, locale)
            if channel.root_category_id
            else []
        )
        _tree_cache[cache_key] = (current_time, categories)

    return HeaderNavigation(
        categories=categories,
        show_compare=settings.SHOW_COMPARE,
        show_wishlist=settings.SHOW_WISHLIST,
    )


@router.get("", response_model=List[dict])
def list_categories(
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
):
    """
    Получить плоский список категорий.

    Returns:
        List[dict]: Категории с id, parent_id, названием и slug для локали
    """
    categories = db.scalars(select(Category).order_by(Category.position, Category.id)).all()

    result = []
    for category in categories:
        translation = category.translation(locale)
        result.append(
            {
                "id": category.id,
                "parent_id": category.parent_id,
                "name": translation.name if translation else None,
                "slug": translation.slug if translation else None,
            }
        )
    return result


@router.get("/{category_id}", response_model=dict)
def get_category(
    category_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
):
    """
    Получить категорию по ID.

    Raises:
        HTTPException: Если категория не найдена
    """
    category = db.get(Category, category_id)
    if not category:
        raise HTTPException(404, detail="Category not found")

    translation = category.translation(locale)
    return {
        "id": category.id,
        "parent_id": category.parent_id,
        "status": category.status,
        "name": translation.name if translation else None,
        "slug": translation.slug if translation else None,
    }
