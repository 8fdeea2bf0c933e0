"""
Сервис подписки на рассылку.

Содержит проверку существующей подписки, создание/обновление записи,
синхронизацию флага пользователя и хуки событий до/после подписки.
"""

import logging
import uuid
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.db.models import Channel, SubscribersList, User

logger = logging.getLogger(__name__)

EVENT_BEFORE = "customer.subscription.before"
EVENT_AFTER = "customer.subscription.after"


class SubscriptionEvents:
    """
    Реестр обработчиков событий подписки.

    Ошибка в обработчике логируется и не прерывает подписку.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Callable[[Any], None]]] = {}

    def on(self, event: str, callback: Callable[[Any], None]) -> None:
        """Зарегистрировать обработчик события."""
        self._listeners.setdefault(event, []).append(callback)

    def clear(self) -> None:
        self._listeners.clear()

    def dispatch(self, event: str, payload: Any = None) -> None:
        """Вызвать все обработчики события."""
        for callback in self._listeners.get(event, []):
            try:
                callback(payload)
            except Exception as e:
                logger.error(f"Error in {event} listener {callback!r}: {e}")


# Глобальный реестр событий
subscription_events = SubscriptionEvents()


def generate_token() -> str:
    """Токен для ссылки отписки."""
    return uuid.uuid4().hex[:13]


class SubscriptionService:
    """Операции со списком подписчиков."""

    def __init__(self, db: Session, events: SubscriptionEvents = None):
        self.db = db
        self.events = events or subscription_events

    def is_already_subscribed(self, email: str) -> bool:
        """Есть ли активная подписка для email."""
        stmt = select(SubscribersList.id).where(
            SubscribersList.email == email,
            SubscribersList.is_subscribed.is_(True),
        )
        return self.db.scalar(stmt.limit(1)) is not None

    def upsert(
        self, email: str, customer: Optional[User], channel: Optional[Channel]
    ) -> SubscribersList:
        """
        Создать подписку или обновить существующую запись для email.

        Существующая запись (например, после отписки) получает новый токен
        и снова становится активной.
        """
        existing = self.db.scalar(
            select(SubscribersList).where(SubscribersList.email == email).limit(1)
        )

        if existing is not None:
            existing.is_subscribed = True
            existing.token = generate_token()
            existing.customer_id = customer.id if customer else None
            subscription = existing
        else:
            subscription = SubscribersList(
                email=email,
                is_subscribed=True,
                token=generate_token(),
                customer_id=customer.id if customer else None,
                channel_id=channel.id if channel else None,
            )
            self.db.add(subscription)

        return subscription

    def subscribe(
        self, email: str, customer: Optional[User], channel: Optional[Channel]
    ) -> Optional[SubscribersList]:
        """
        Подписать email на рассылку.

        Returns:
            SubscribersList: Запись подписки или None, если email уже подписан
        """
        self.events.dispatch(EVENT_BEFORE, email)

        if self.is_already_subscribed(email):
            logger.info(f"Subscription skipped, already subscribed: {email}")
            return None

        subscription = self.upsert(email, customer, channel)

        if customer is not None:
            customer.subscribed_to_news_letter = True

        self.db.commit()
        self.db.refresh(subscription)
        logger.info(f"Subscribed {email} (customer_id={subscription.customer_id})")

        self.events.dispatch(EVENT_AFTER, subscription)
        return subscription

    def unsubscribe(self, token: str) -> int:
        """
        Удалить записи подписки по токену.

        Returns:
            int: Количество удаленных записей
        """
        result = self.db.execute(delete(SubscribersList).where(SubscribersList.token == token))
        self.db.commit()
        logger.info(f"Unsubscribed token {token}: {result.rowcount} record(s) removed")
        return result.rowcount
