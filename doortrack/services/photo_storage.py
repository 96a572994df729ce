"""Order photo uploads to the remote blob bucket."""

from __future__ import annotations

import logging
from urllib.parse import unquote, urlparse

from pydantic import BaseModel

from doortrack.storage.remote_client import RemoteStoreClient

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION: str = "jpg"


class PhotoUpload(BaseModel):
    """Photo file handed over by the upload transport."""

    data: bytes
    filename: str
    content_type: str = "image/jpeg"

    @property
    def extension(self) -> str:
        if "." not in self.filename:
            return DEFAULT_EXTENSION
        return self.filename.rsplit(".", 1)[-1].lower() or DEFAULT_EXTENSION


def photo_key(order_id: str, timestamp_ms: int, extension: str) -> str:
    return f"{order_id}-{timestamp_ms}.{extension}"


class SupabasePhotoStorage:
    """Blob store contract: upload returns a public URL, delete takes it back."""

    def __init__(self, client: RemoteStoreClient) -> None:
        self.client = client

    def upload(self, photo: PhotoUpload, key: str) -> str | None:
        try:
            return self.client.upload_blob(key, photo.data, photo.content_type)
        except Exception:
            logger.warning("[PHOTOS] Upload of %s failed", key, exc_info=True)
            return None

    def path_from_url(self, url: str) -> str | None:
        """Return the bucket-relative path of a public URL.

        URL format: .../storage/v1/object/public/<bucket>/<path>
        """
        marker = f"/{self.client.bucket}/"
        path = unquote(urlparse(url).path)
        if marker not in path:
            return None
        return path.split(marker, 1)[-1] or None

    def delete(self, url: str) -> bool:
        path = self.path_from_url(url)
        if path is None:
            logger.warning("[PHOTOS] Not a photo bucket URL: %s", url)
            return False
        try:
            self.client.remove_blobs([path])
        except Exception:
            logger.warning("[PHOTOS] Delete of %s failed", path, exc_info=True)
            return False
        return True


def build_photo_storage(client: RemoteStoreClient | None) -> SupabasePhotoStorage | None:
    if client is None:
        return None
    return SupabasePhotoStorage(client)
