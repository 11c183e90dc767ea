# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Attachment store adapter: uploads, deletes and signs URLs for todo images
# kept in a Supabase Storage bucket.
#
# Object keys follow "{owner_id}/{filename}". Two uploads with the same
# filename from the same owner land on the same key and the later one wins.
# =============================================================================

import logging
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import StorageError

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "image"


class StorageService:
    """
    Service for Supabase Storage operations.

    Every operation raises StorageError on failure so callers can tell
    storage faults apart from database faults.
    """

    @staticmethod
    def _bucket():
        client = SupabaseClient.get_client()
        return client.storage.from_(settings.STORAGE_BUCKET)

    @staticmethod
    def attachment_key(owner_id: str, filename: str | None) -> str:
        """
        Build the object key for an owner's attachment.

        Only the final path component of `filename` is kept, so a crafted
        name cannot escape the owner's prefix.
        """
        name = PurePosixPath((filename or "").replace("\\", "/")).name
        if name in ("", ".", ".."):
            name = DEFAULT_FILENAME
        return f"{owner_id}/{name}"

    @staticmethod
    def upload(data: bytes, content_type: str | None, key: str) -> str:
        """
        Upload bytes under `key` and make them publicly readable.

        Args:
            data: File bytes
            content_type: MIME type stored with the object
            key: Object key inside the bucket

        Returns:
            Public URL of the uploaded object

        Raises:
            StorageError: If upload fails
        """
        bucket = StorageService._bucket()

        try:
            bucket.upload(
                path=key,
                file=data,
                file_options={
                    "content-type": content_type or "application/octet-stream",
                    "upsert": "true",
                },
            )
            public_url = bucket.get_public_url(key)
        except Exception as e:
            logger.error(f"Storage upload failed for {key}: {e}")
            raise StorageError("upload", key) from e

        logger.info(f"Uploaded attachment to storage: {key}")
        return public_url.rstrip("?")

    @staticmethod
    def delete(key: str) -> None:
        """
        Delete the object stored under `key`.

        Raises:
            StorageError: If delete fails
        """
        bucket = StorageService._bucket()

        try:
            bucket.remove([key])
        except Exception as e:
            logger.error(f"Storage delete failed for {key}: {e}")
            raise StorageError("delete", key) from e

        logger.info(f"Deleted attachment from storage: {key}")

    @staticmethod
    def signed_url(key: str, ttl_seconds: int | None = None) -> str:
        """
        Create a temporary URL for reading the object under `key`.

        Args:
            key: Object key inside the bucket
            ttl_seconds: Lifetime of the URL (defaults to SIGNED_URL_TTL_SECONDS)

        Raises:
            StorageError: If signing fails
        """
        bucket = StorageService._bucket()
        ttl = ttl_seconds or settings.SIGNED_URL_TTL_SECONDS

        try:
            result = bucket.create_signed_url(key, ttl)
        except Exception as e:
            logger.error(f"Failed to sign URL for {key}: {e}")
            raise StorageError("sign", key) from e

        # storage3 has used both spellings across releases
        url = result.get("signedURL") or result.get("signedUrl") if result else None
        if not url:
            logger.error(f"Signed URL response for {key} had no URL")
            raise StorageError("sign", key)
        return url

    @staticmethod
    def key_from_reference(reference: str) -> str:
        """
        Recover the object key from a stored attachment reference.

        Accepts the public URL returned by `upload`, or a bare key.

        Example:
            https://x.supabase.co/storage/v1/object/public/todo-attachments/u1/a.png
            -> "u1/a.png"
        """
        parsed = urlparse(reference)
        if not parsed.scheme:
            return reference.lstrip("/")

        path = unquote(parsed.path)
        marker = f"/object/public/{settings.STORAGE_BUCKET}/"
        if marker in path:
            return path.split(marker, 1)[1]
        return path.lstrip("/")
