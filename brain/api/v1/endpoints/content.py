# backend/brain/api/v1/endpoints/content.py

from fastapi import APIRouter, Depends, HTTPException
from typing import List, Optional
from supabase import Client
from brain.schemas.content import Content, ContentCreate, ContentType
from brain.schemas.user import User
from brain.api import deps
from brain.api.routing import SanitizedRoute
from brain.db.session import get_supabase
import logging

router = APIRouter(route_class=SanitizedRoute)

@router.post("/", response_model=Content, status_code=201)
def create_content(
    content: ContentCreate,
    current_user: User = Depends(deps.get_current_user),
    supabase: Client = Depends(get_supabase),
):
    content_data = {
        "user_id": current_user.id,
        "title": content.title,
        "link": content.link,
        "type": content.type,
        "tags": content.tags,
    }
    try:
        response = supabase.table("contents").insert(content_data).execute()
    except Exception as e:
        logging.error(f"Error creating content: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    if not response.data:
        logging.error(f"Failed to create content. Supabase response: {response}")
        raise HTTPException(status_code=400, detail="Failed to create content")

    logging.info(f"Content {response.data[0]['id']} created for user {current_user.id}")
    return Content(**response.data[0])

@router.get("/", response_model=List[Content])
def get_user_content(
    type: Optional[ContentType] = None,
    current_user: User = Depends(deps.get_current_user),
    supabase: Client = Depends(get_supabase),
):
    query = supabase.table("contents").select("*").eq("user_id", current_user.id)
    if type:
        query = query.eq("type", type)
    try:
        response = query.order("created_at", desc=True).execute()
    except Exception as e:
        logging.error(f"Error listing content: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
    return [Content(**row) for row in response.data]

@router.delete("/{content_id}", status_code=204)
def delete_content(
    content_id: str,
    current_user: User = Depends(deps.get_current_user),
    supabase: Client = Depends(get_supabase),
):
    logging.info(f"Delete request for content {content_id} by user {current_user.id}")
    # Scoped to the owner so other users' rows never match
    response = supabase.table("contents").delete().eq("id", content_id).eq("user_id", current_user.id).execute()
    if not response.data:
        raise HTTPException(status_code=404, detail="Content not found or not authorized")
