"""Resolve the signed-in Supabase Auth user to a Viewer."""

import logging
from typing import Optional
from idrhub.models.user import Viewer
from idrhub.services.supabase_client import SupabaseClient
from idrhub.utils.errors import SupabaseError
from idrhub.utils.logging import mask_user_id

logger = logging.getLogger(__name__)


async def resolve_viewer() -> Optional[Viewer]:
    """
    Return the current session's Viewer, or None when signed out.

    The role comes from the users table; a user without a profile row is a buyer.
    """
    async with SupabaseClient() as client:
        try:
            response = client.auth.get_user()
        except Exception as e:
            logger.info(f"No active session: {e}")
            return None

        auth_user = getattr(response, "user", None)
        if auth_user is None:
            return None

        try:
            result = (
                client.table("users")
                .select("id, full_name, email, role")
                .eq("id", auth_user.id)
                .execute()
            )
        except Exception as e:
            raise SupabaseError(f"Failed to load user profile: {e}")

        profile = result.data[0] if result.data else {}
        viewer = Viewer(
            id=auth_user.id,
            role=profile.get("role") or "buyer",
            full_name=profile.get("full_name"),
            email=profile.get("email") or auth_user.email,
        )
        logger.info(
            "Resolved session viewer",
            extra={"user_id": mask_user_id(viewer.id), "role": viewer.role}
        )
        return viewer
