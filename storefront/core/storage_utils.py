# storefront/core/storage_utils.py
import logging

from storefront.core.config import get_settings
from storefront.core.supabase_client import storage_bucket

logger = logging.getLogger(__name__)

settings = get_settings()

IMAGE_BUCKET = settings.STORAGE_BUCKET
VIDEO_BUCKET = settings.VIDEO_BUCKET


def upload_to_storage(
    path: str,
    file_bytes: bytes,
    content_type: str,
    bucket: str = IMAGE_BUCKET,
) -> str:
    """
    Upload raw bytes to Supabase Storage and return a public URL.

    If a file already exists at this path, it is overwritten
    thanks to the 'upsert' option.

    Args:
        path: Full object path inside the bucket.
              Example: "products/<uuid>/hero.png"
        file_bytes: File content in bytes.
        content_type: MIME type stored alongside the object.
        bucket: Target bucket, images by default.

    Returns:
        Public URL to the uploaded file.
    """
    handle = storage_bucket(bucket)
    handle.upload(
        path,
        file_bytes,
        {"upsert": "true", "content-type": content_type},
    )
    return handle.get_public_url(path)


def delete_from_storage(path: str, bucket: str = IMAGE_BUCKET) -> None:
    """
    Delete a file from Supabase Storage by its object path.

    Example path (relative to bucket):
        'products/<uuid>/gallery/<uuid>.png'
    """
    # Supabase Python client expects a list of paths.
    storage_bucket(bucket).remove([path])


def extract_path_from_public_url(url: str) -> tuple[str, str] | None:
    """
    Given a public URL, return (bucket, object path) for one of our buckets.

    Example:
        https://<proj>.supabase.co/storage/v1/object/public/product-images/products/p/hero.png
        -> ('product-images', 'products/p/hero.png')
    """
    for bucket in (IMAGE_BUCKET, VIDEO_BUCKET):
        marker = f"/storage/v1/object/public/{bucket}/"
        idx = url.find(marker)
        if idx != -1:
            return bucket, url[idx + len(marker) :]
    return None


def delete_public_url(url: str) -> None:
    """
    Best-effort delete of a file by its public URL.

    No-op if the URL does not belong to our buckets. Storage failures
    are logged, never raised: the database row is the source of truth.
    """
    location = extract_path_from_public_url(url)
    if location is None:
        return
    bucket, path = location
    try:
        delete_from_storage(path, bucket)
    except Exception:
        logger.exception("Failed to delete storage object %s/%s", bucket, path)
