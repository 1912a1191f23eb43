from fastapi import APIRouter, Depends
from app.modules.profiles.schemas import ProfileUpdate, ProfileEnvelope
from app.modules.profiles.service import ProfileService
from app.core.dependencies import get_current_user, get_user_supabase, get_optional_system_supabase
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/profile", tags=["profile"])


def get_profile_service(
    supabase: Client = Depends(get_user_supabase),
    system: Optional[Client] = Depends(get_optional_system_supabase)
) -> ProfileService:
    return ProfileService(supabase, system)


@router.get("", response_model=ProfileEnvelope)
async def get_profile(
    current_user: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the caller's own profile"""
    return {"profile": service.get_profile(current_user["id"])}


@router.post("", response_model=ProfileEnvelope)
@router.put("", response_model=ProfileEnvelope, include_in_schema=False)
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Update username, full name and bio; 400 if the username belongs to someone else"""
    return {"profile": service.upsert_profile(current_user, profile_data)}
