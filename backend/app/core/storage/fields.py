import io
import logging
import os
import uuid
from typing import Dict, Optional, Union

import boto3
from PIL import Image, UnidentifiedImageError
from sqlalchemy.types import TypeDecorator, String

from app.config import settings

logger = logging.getLogger(__name__)


class LocalStorage:
    """Writes files below ``settings.MEDIA_ROOT`` and serves them from ``MEDIA_URL``."""

    def __init__(self, root: str, base_url: str):
        self.root = root
        self.base_url = base_url

    def save(self, key: str, buffer: io.BytesIO, content_type: str):
        path = os.path.join(self.root, key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as fp:
            fp.write(buffer.getvalue())

    def url(self, key: str) -> str:
        return self.base_url.rstrip("/") + "/" + key

    def delete(self, key: str):
        path = os.path.join(self.root, key)
        if os.path.exists(path):
            os.remove(path)


class S3Storage:
    def __init__(self, bucket: str, base_path: str):
        self.bucket = bucket
        self.base_path = base_path
        self.client = boto3.client(
            "s3",
            aws_access_key_id=settings.S3_ACCESS_KEY,
            aws_secret_access_key=settings.S3_SECRET_KEY,
        )

    def _key(self, key: str) -> str:
        return os.path.join(self.base_path, key) if self.base_path else key

    def save(self, key: str, buffer: io.BytesIO, content_type: str):
        self.client.upload_fileobj(
            buffer,
            self.bucket,
            self._key(key),
            ExtraArgs={"ContentType": content_type},
        )

    def url(self, key: str) -> str:
        return self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": self._key(key)},
            ExpiresIn=3600,
        )

    def delete(self, key: str):
        self.client.delete_object(Bucket=self.bucket, Key=self._key(key))


def get_storage():
    if settings.STORAGE_BACKEND == "s3":
        return S3Storage(settings.S3_BUCKET, settings.S3_BASE_PATH)
    return LocalStorage(settings.MEDIA_ROOT, settings.MEDIA_URL)


class StoredImage(dict):
    """URLs of a stored image keyed by variation, remembering the storage keys."""

    def __init__(self, keys: Dict[str, str], **urls):
        self.keys_by_variation = keys
        super().__init__(urls)

    @property
    def path(self) -> str:
        return self.keys_by_variation["original"]

    def delete(self):
        storage = get_storage()
        for key in self.keys_by_variation.values():
            try:
                storage.delete(key)
            except Exception:
                logger.exception("Could not delete stored file %s", key)


class ImageField(TypeDecorator):
    """
    SQLAlchemy column for uploaded images.

    Binding a ``{"bytes": ..., "filename": ...}`` dict validates the image with
    Pillow, writes the original plus resized variations under a random name and
    stores the original's key. Reading returns a ``StoredImage`` of URLs.
    """

    impl = String
    cache_ok = True

    def __init__(
        self,
        upload_to: str = "uploads",
        max_size: int = 5 * 1024 * 1024,
        allowed_formats: tuple = ("jpeg", "png", "gif", "webp"),
        variations: Optional[dict] = None,
    ):
        super().__init__(length=300)
        self.upload_to = upload_to.strip("/")
        self.max_size = max_size
        self.allowed_formats = allowed_formats
        self.variations = variations or {}

    def _open_image(self, data: bytes) -> tuple:
        if self.max_size and len(data) > self.max_size:
            raise ValueError(
                f"Image size exceeds maximum allowed size of {self.max_size} bytes"
            )
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except UnidentifiedImageError:
            raise ValueError("Invalid image file")

        fmt = (img.format or "").lower()
        if fmt not in self.allowed_formats:
            raise ValueError(
                f"Unsupported image format. Allowed formats: {list(self.allowed_formats)}"
            )
        return img, fmt

    @staticmethod
    def resize_image(img: Image.Image, width: int, height: int) -> Image.Image:
        resized = img.copy()
        resized.thumbnail((width, height), Image.LANCZOS)
        return resized

    def store(self, data: bytes) -> str:
        img, fmt = self._open_image(data)
        storage = get_storage()
        file_uid = uuid.uuid4().hex
        content_type = f"image/{fmt}"

        original_key = f"{self.upload_to}/{file_uid}.{fmt}"
        storage.save(original_key, io.BytesIO(data), content_type)

        for name, size in self.variations.items():
            variant = self.resize_image(img, size["width"], size["height"])
            buffer = io.BytesIO()
            variant.save(buffer, format=img.format)
            buffer.seek(0)
            storage.save(f"{self.upload_to}/{file_uid}.{name}.{fmt}", buffer, content_type)

        logger.info("Stored image %s", original_key)
        return original_key

    def process_bind_param(self, value: Union[Dict, bytes, str, None], dialect):
        if not value:
            return None

        if isinstance(value, StoredImage):
            return value.path

        if isinstance(value, str):
            return value

        if isinstance(value, dict) and "bytes" in value:
            data = value["bytes"]
        elif isinstance(value, (bytes, io.BytesIO)):
            data = value
        else:
            raise ValueError("Unsupported input type")

        if isinstance(data, io.BytesIO):
            data = data.getvalue()
        return self.store(data)

    def process_result_value(self, value: Optional[str], dialect):
        if not value:
            return None

        storage = get_storage()
        stem, ext = value.rsplit(".", 1)
        keys = {"original": value}
        for name in self.variations:
            keys[name] = f"{stem}.{name}.{ext}"
        return StoredImage(keys, **{name: storage.url(key) for name, key in keys.items()})
