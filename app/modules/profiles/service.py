import logging
from postgrest.exceptions import APIError
from supabase import Client
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from typing import Any, Dict, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def _is_username_conflict(error: APIError) -> bool:
    if error.code != UNIQUE_VIOLATION:
        return False
    text = f"{error.message or ''} {error.details or ''}"
    return "username" in text


class ProfileService:
    """
    Profile reads and writes.

    `supabase` is the caller-scoped client (RLS applies). `system` is the
    service-role client and is used for two things only: the username
    uniqueness lookup, which must see other users' rows, and the fallback
    insert when the signup trigger did not create the row.
    """

    def __init__(self, supabase: Client, system: Optional[Client] = None):
        self.supabase = supabase
        self.system = system

    def find_profile(self, user_id: str) -> Optional[ProfileResponse]:
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except APIError as e:
            logger.error("Failed to load profile %s: %s", user_id, e.message)
            raise HTTPException(status_code=500, detail=f"Failed to load profile: {e.message}")

        if not result.data:
            return None
        return ProfileResponse(**result.data[0])

    def get_profile(self, user_id: str) -> ProfileResponse:
        profile = self.find_profile(user_id)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile

    def is_username_taken(self, username: str, user_id: str) -> bool:
        """True when another identity already holds this username"""
        result = self.system.table("profiles")\
            .select("id")\
            .eq("username", username)\
            .neq("id", user_id)\
            .limit(1)\
            .execute()
        return bool(result.data)

    def upsert_profile(self, user: Dict[str, Any], profile_data: ProfileUpdate) -> ProfileResponse:
        """Update the caller's profile, creating it if the signup trigger never did"""
        if self.system is None:
            logger.error("Profile upsert needs the service role client")
            raise HTTPException(status_code=500, detail="Server configuration error")

        user_id = user["id"]
        # Empty values clear the field, matching the settings form
        update_data = {
            "username": profile_data.username or None,
            "full_name": profile_data.full_name or None,
            "bio": profile_data.bio or None,
        }

        try:
            if update_data["username"] and self.is_username_taken(update_data["username"], user_id):
                raise HTTPException(status_code=400, detail="Username already taken")

            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()

            if result.data:
                return ProfileResponse(**result.data[0])

            logger.warning("Profile missing for user %s, creating it", user_id)
            result = self.system.table("profiles").insert({
                "id": user_id,
                "email": user["email"],
                **update_data,
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create profile")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except APIError as e:
            if _is_username_conflict(e):
                raise HTTPException(status_code=400, detail="Username already taken")
            logger.error("Profile update failed for user %s: %s", user_id, e.message)
            raise HTTPException(status_code=500, detail=f"Failed to update profile: {e.message}")
        except Exception as e:
            logger.exception("Profile update failed for user %s", user_id)
            raise HTTPException(status_code=500, detail=f"Failed to update profile: {e}")
