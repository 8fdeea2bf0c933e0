"""
Модель подписчика рассылки.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .base import Base


class SubscribersList(Base):
    """
    Запись в списке подписчиков рассылки.

    Attributes:
        email: Email подписчика
        is_subscribed: Активна ли подписка
        token: Токен для отписки по ссылке из письма
        customer_id: ID пользователя (если подписался авторизованным)
        channel_id: Канал, в котором оформлена подписка
    """

    __tablename__ = "subscribers_list"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), index=True)
    is_subscribed: Mapped[bool] = mapped_column(Boolean, default=False)
    token: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    customer_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    channel_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("channels.id", ondelete="CASCADE"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<SubscribersList(id={self.id}, email='{self.email}', subscribed={self.is_subscribed})>"
