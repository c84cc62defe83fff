"""Image and avatar helpers."""

from typing import Optional
from idrhub.models.property import Property
from idrhub.services.supabase_client import get_public_url
from idrhub.utils.config import AppConfig


def resolve_file_url(path: Optional[str], bucket: str = AppConfig.PROPERTY_IMAGES_BUCKET) -> str:
    """Turn a stored image reference into a retrievable URL.

    Absolute URLs pass through, storage keys resolve to public bucket URLs,
    and a missing reference falls back to the placeholder image.
    """
    if not path:
        return AppConfig.PLACEHOLDER_IMAGE_URL
    if path.startswith("http"):
        return path
    return get_public_url(bucket, path)


def property_cover_image(prop: Property) -> str:
    return resolve_file_url(prop.images[0] if prop.images else None)


def avatar_url(path: Optional[str]) -> Optional[str]:
    """Avatar URL, or None so the caller renders initials instead."""
    if not path:
        return None
    return resolve_file_url(path, bucket=AppConfig.AVATARS_BUCKET)


def avatar_initials(full_name: Optional[str]) -> str:
    """Up to two upper-case initials, e.g. ``"Jane Q Public"`` -> ``"JQ"``."""
    if not full_name:
        return ""
    return "".join(word[0] for word in full_name.split()).upper()[:2]
