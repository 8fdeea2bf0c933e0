"""
Конфигурация базы данных.

Содержит настройки подключения к PostgreSQL и фабрику сессий.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings


# Создание движка SQLAlchemy
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Проверка соединения перед использованием
    echo=bool(settings.DEBUG),  # Логирование SQL запросов в режиме отладки
)


# Фабрика сессий базы данных
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency для получения сессии базы данных.

    Yields:
        Session: Сессия SQLAlchemy

    Note:
        Автоматически закрывает сессию после использования
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
