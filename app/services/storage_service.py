"""
Сервис для работы с хранилищами медиафайлов.

Поддерживает локальное хранилище и Amazon S3 (или совместимые сервисы).
Отвечает за преобразование относительного пути файла в полный URL
независимо от типа хранилища.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError, NoCredentialsError

from app.core.config import settings

logger = logging.getLogger(__name__)


class StorageProvider(ABC):
    """
    Абстрактный базовый класс для провайдеров хранилища.
    """

    @abstractmethod
    def get_file_url(self, file_path: str) -> str:
        pass

    @abstractmethod
    def file_exists(self, file_path: str) -> bool:
        pass


class LocalStorageProvider(StorageProvider):
    """
    Локальное хранилище файлов.

    URL строится от CDN_BASE_URL, если он задан, иначе от /static.
    """

    def __init__(self, base_path: str = None, base_url: str = None):
        self.base_path = Path(base_path or settings.STORAGE_PATH)
        self.base_url = settings.CDN_BASE_URL if base_url is None else base_url

    def get_file_url(self, file_path: str) -> str:
        if self.base_url:
            return f"{self.base_url.rstrip('/')}/{file_path.lstrip('/')}"
        return f"/static/{file_path.lstrip('/')}"

    def file_exists(self, file_path: str) -> bool:
        return (self.base_path / file_path).exists()


class S3StorageProvider(StorageProvider):
    """
    Amazon S3 хранилище (или совместимые сервисы, например MinIO).
    """

    def __init__(
        self,
        bucket_name: str,
        region: str = None,
        endpoint_url: str = None,
        presign: bool = False,
    ):
        self.bucket_name = bucket_name
        self.region = region or "us-east-1"
        self.endpoint_url = endpoint_url
        self.presign = presign

        config = Config(
            retries={"max_attempts": 3, "mode": "adaptive"},
            connect_timeout=10,
            read_timeout=30,
            s3={"addressing_style": "path"},
            signature_version="s3v4",
        )

        self.s3_client = boto3.client(
            "s3",
            region_name=self.region,
            endpoint_url=endpoint_url,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            config=config,
            use_ssl=False if endpoint_url and "localhost" in endpoint_url else True,
        )

    def get_file_url(self, file_path: str) -> str:
        key = file_path.lstrip("/")
        if settings.CDN_BASE_URL:
            return f"{settings.CDN_BASE_URL.rstrip('/')}/{key}"

        if self.presign:
            try:
                return self.s3_client.generate_presigned_url(
                    "get_object",
                    Params={"Bucket": self.bucket_name, "Key": key},
                    ExpiresIn=3600,
                )
            except (ClientError, NoCredentialsError) as e:
                logger.warning(f"Presigned URL generation failed for {key}: {e}")

        endpoint = (self.endpoint_url or self.s3_client.meta.endpoint_url).rstrip("/")
        return f"{endpoint}/{self.bucket_name}/{key}"

    def file_exists(self, file_path: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=file_path.lstrip("/"))
            return True
        except ClientError:
            return False


def create_storage_provider() -> StorageProvider:
    """Создать провайдер хранилища по настройке STORAGE_TYPE."""
    if settings.STORAGE_TYPE == "s3":
        logger.info(
            f"Using S3 storage: bucket={settings.S3_BUCKET_NAME}, endpoint={settings.S3_ENDPOINT_URL}"
        )
        return S3StorageProvider(
            bucket_name=settings.S3_BUCKET_NAME,
            region=settings.AWS_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
            presign=settings.S3_PRESIGN_URLS,
        )

    logger.info(f"Using local storage: {settings.STORAGE_PATH}")
    return LocalStorageProvider()


# Глобальный экземпляр провайдера
storage_service = create_storage_provider()


def get_storage() -> StorageProvider:
    """Dependency для получения провайдера хранилища."""
    return storage_service
