"""
Схемы для подписки на рассылку.
"""

from pydantic import BaseModel, EmailStr, Field


class SubscriptionRequest(BaseModel):
    """Запрос на подписку."""

    email: EmailStr = Field(..., description="Email подписчика")


class SubscriptionResponse(BaseModel):
    """Результат операции с подпиской."""

    status: str
    message: str
