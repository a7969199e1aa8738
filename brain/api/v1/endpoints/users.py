# backend/brain/api/v1/endpoints/users.py

from fastapi import APIRouter, Depends, HTTPException
from supabase import Client
from brain.schemas.user import User, Profile, ProfileUpdate
from brain.api import deps
from brain.api.routing import SanitizedRoute
from brain.db.session import get_supabase
import logging

router = APIRouter(route_class=SanitizedRoute)

def _content_count(supabase: Client, user_id: str) -> int:
    response = supabase.table("contents").select("id", count="exact").eq("user_id", user_id).execute()
    return response.count or 0

def _to_profile(supabase: Client, profile: dict) -> Profile:
    return Profile(
        id=profile["id"],
        username=profile["username"],
        created_at=profile["created_at"],
        content_count=_content_count(supabase, profile["id"]),
    )

@router.get("/me", response_model=User)
def read_users_me(current_user: User = Depends(deps.get_current_user)):
    return current_user

@router.get("/me/profile", response_model=Profile)
def read_profile(current_user: User = Depends(deps.get_current_user), supabase: Client = Depends(get_supabase)):
    try:
        response = supabase.table("profiles").select("*").eq("id", current_user.id).limit(1).execute()
        if not response.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return _to_profile(supabase, response.data[0])
    except HTTPException:
        raise
    except Exception as e:
        logging.error(f"Error reading profile: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

@router.put("/me/profile", response_model=Profile)
def update_profile(
    profile_update: ProfileUpdate,
    current_user: User = Depends(deps.get_current_user),
    supabase: Client = Depends(get_supabase),
):
    try:
        response = supabase.table("profiles").upsert(
            {"id": current_user.id, "username": profile_update.username}
        ).execute()
        if not response.data:
            logging.error(f"Failed to save profile. Supabase response: {response}")
            raise HTTPException(status_code=400, detail="Failed to save profile")
        logging.info(f"Profile saved for user {current_user.id}")
        return _to_profile(supabase, response.data[0])
    except HTTPException:
        raise
    except Exception as e:
        logging.error(f"Error saving profile: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
