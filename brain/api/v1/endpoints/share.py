# backend/brain/api/v1/endpoints/share.py

from fastapi import APIRouter, Depends, HTTPException
from brain.schemas.share import ShareToggle, ShareStatus, SharedBrain
from brain.schemas.user import User
from brain.api import deps
from brain.api.routing import SanitizedRoute
from brain.services.share_service import (
    ShareTokenService,
    ShareLinkNotFound,
    ShareOwnerMissing,
    ProfileRequired,
    TokenSpaceExhausted,
)
import logging

router = APIRouter(route_class=SanitizedRoute)

@router.post("/share", response_model=ShareStatus)
def toggle_share(
    payload: ShareToggle,
    current_user: User = Depends(deps.get_current_user),
    service: ShareTokenService = Depends(deps.get_share_service),
):
    try:
        if payload.share:
            return ShareStatus(shared=True, token=service.issue(current_user.id))
        service.revoke(current_user.id)
        return ShareStatus(shared=False)
    except ProfileRequired:
        raise HTTPException(status_code=409, detail="Create a profile before sharing")
    except TokenSpaceExhausted as e:
        logging.error(f"Share token space exhausted for user {current_user.id}: {e}")
        raise HTTPException(status_code=500, detail="Could not create a share link, please try again")
    except Exception as e:
        logging.error(f"Error toggling share link: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/share", response_model=ShareStatus)
def get_share_status(
    current_user: User = Depends(deps.get_current_user),
    service: ShareTokenService = Depends(deps.get_share_service),
):
    try:
        token = service.get(current_user.id)
    except Exception as e:
        logging.error(f"Error reading share status: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
    return ShareStatus(shared=token is not None, token=token)

@router.get("/{token}", response_model=SharedBrain)
def get_shared_brain(token: str, service: ShareTokenService = Depends(deps.get_share_service)):
    try:
        return service.resolve(token)
    except ShareLinkNotFound:
        raise HTTPException(status_code=404, detail="Share link is invalid or has expired")
    except ShareOwnerMissing:
        raise HTTPException(status_code=404, detail="The owner of this share link no longer exists")
    except Exception as e:
        logging.error(f"Error resolving share link: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
