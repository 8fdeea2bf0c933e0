"""
API endpoints для подписки на рассылку.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.auth import get_optional_user
from app.core.i18n import Translator, get_channel, get_locale
from app.db.database import get_db
from app.db.models import Channel, User
from app.schemas.subscription import SubscriptionRequest, SubscriptionResponse
from app.services.subscription_service import SubscriptionService

router = APIRouter()


@router.post("", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
def subscribe(
    payload: SubscriptionRequest,
    db: Session = Depends(get_db),
    customer: Optional[User] = Depends(get_optional_user),
    locale: str = Depends(get_locale),
    channel_code: str = Depends(get_channel),
):
    """
    Подписать email на рассылку.

    Args:
        payload: Email подписчика
        customer: Авторизованный пользователь (если есть)

    Returns:
        SubscriptionResponse: Сообщение об успешной подписке

    Raises:
        HTTPException: 409 если email уже подписан
    """
    trans = Translator(locale)
    channel = db.scalar(select(Channel).where(Channel.code == channel_code))

    subscription = SubscriptionService(db).subscribe(payload.email, customer, channel)
    if subscription is None:
        raise HTTPException(status.HTTP_409_CONFLICT, detail=trans("subscription.already"))

    return {"status": "success", "message": trans("subscription.subscribe-success")}


def _unsubscribe(token: str, db: Session, locale: str) -> dict:
    SubscriptionService(db).unsubscribe(token)
    return {
        "status": "success",
        "message": Translator(locale)("subscription.unsubscribe-success"),
    }


@router.delete("/{token}", response_model=SubscriptionResponse)
def unsubscribe(
    token: str,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
):
    """
    Отписаться от рассылки по токену.

    Ответ успешный даже если токен не найден.
    """
    return _unsubscribe(token, db, locale)


@router.get("/{token}", response_model=SubscriptionResponse)
def unsubscribe_by_link(
    token: str,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
):
    """Отписка по ссылке из письма."""
    return _unsubscribe(token, db, locale)
