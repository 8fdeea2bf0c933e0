"""
Локализация сообщений и определение контекста запроса.

Содержит каталог переводов для фиксированных строк (заголовки экспорта,
Да/Нет, сообщения подписки) и dependency для получения активной
локали и канала.
"""

from typing import Dict, Optional

from fastapi import Header, Query

from app.core.config import settings

FALLBACK_LOCALE = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "export.images": "Images",
        "export.videos": "Videos",
        "export.yes": "Yes",
        "export.no": "No",
        "export.columns.id": "ID",
        "export.columns.sku": "SKU",
        "export.columns.name": "Name",
        "export.columns.attribute_family": "Attribute Family",
        "export.columns.type": "Type",
        "export.columns.price": "Price",
        "export.columns.quantity": "Quantity",
        "export.columns.status": "Status",
        "export.columns.base_image": "Image",
        "subscription.already": "You are already subscribed to our newsletter.",
        "subscription.subscribe-success": "You have successfully subscribed to our newsletter.",
        "subscription.unsubscribe-success": "You have successfully unsubscribed from our newsletter.",
    },
    "ru": {
        "export.images": "Изображения",
        "export.videos": "Видео",
        "export.yes": "Да",
        "export.no": "Нет",
        "export.columns.id": "ID",
        "export.columns.sku": "Артикул",
        "export.columns.name": "Название",
        "export.columns.attribute_family": "Семейство атрибутов",
        "export.columns.type": "Тип",
        "export.columns.price": "Цена",
        "export.columns.quantity": "Количество",
        "export.columns.status": "Статус",
        "export.columns.base_image": "Изображение",
        "subscription.already": "Вы уже подписаны на нашу рассылку.",
        "subscription.subscribe-success": "Вы успешно подписались на рассылку.",
        "subscription.unsubscribe-success": "Вы успешно отписались от рассылки.",
    },
}


class Translator:
    """
    Переводчик фиксированных строк для одной локали.

    Неизвестная локаль использует английский каталог,
    неизвестный ключ возвращается как есть.
    """

    def __init__(self, locale: str):
        self.locale = locale
        self._messages = MESSAGES.get(locale) or MESSAGES[FALLBACK_LOCALE]

    def __call__(self, key: str) -> str:
        message = self._messages.get(key)
        if message is None:
            message = MESSAGES[FALLBACK_LOCALE].get(key, key)
        return message


def _parse_accept_language(header: Optional[str]) -> Optional[str]:
    """Первая локаль из Accept-Language, для которой есть каталог."""
    if not header:
        return None
    for part in header.split(","):
        code = part.split(";")[0].strip().lower()
        if not code:
            continue
        if code in MESSAGES:
            return code
        primary = code.split("-")[0]
        if primary in MESSAGES:
            return primary
    return None


def get_locale(
    locale: Optional[str] = Query(None, description="Код локали"),
    accept_language: Optional[str] = Header(None),
) -> str:
    """
    Dependency: активная локаль запроса.

    Порядок: параметр ?locale=, заголовок Accept-Language, DEFAULT_LOCALE.
    """
    if locale:
        return locale
    return _parse_accept_language(accept_language) or settings.DEFAULT_LOCALE


def get_channel(
    channel: Optional[str] = Query(None, description="Код канала"),
) -> str:
    """Dependency: активный канал запроса."""
    return channel or settings.DEFAULT_CHANNEL