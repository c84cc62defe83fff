"""Application configuration read from environment variables."""

import os


class AppConfig:
    """Centralized client configuration."""

    SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
    SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")

    FAVORITES_MIN_FETCH_INTERVAL_SECONDS = float(
        os.environ.get("FAVORITES_MIN_FETCH_INTERVAL_SECONDS", "2")
    )
    FAVORITES_REFETCH_DELAY_SECONDS = float(
        os.environ.get("FAVORITES_REFETCH_DELAY_SECONDS", "1")
    )
    PROPERTIES_FETCH_LIMIT = int(os.environ.get("PROPERTIES_FETCH_LIMIT", "50"))

    COOKIE_CONSENT_PATH = os.environ.get(
        "COOKIE_CONSENT_PATH",
        os.path.join(os.path.expanduser("~"), ".idrhub", "local_storage.json"),
    )

    PROPERTY_IMAGES_BUCKET = os.environ.get("PROPERTY_IMAGES_BUCKET", "properties")
    AVATARS_BUCKET = os.environ.get("AVATARS_BUCKET", "avatars")
    PLACEHOLDER_IMAGE_URL = os.environ.get(
        "PLACEHOLDER_IMAGE_URL",
        "https://images.pexels.com/photos/106399/pexels-photo-106399.jpeg"
        "?auto=compress&cs=tinysrgb&w=800",
    )
