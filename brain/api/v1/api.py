from fastapi import APIRouter
from brain.api.v1.endpoints import users, content, share

api_router = APIRouter()
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(content.router, prefix="/content", tags=["content"])
api_router.include_router(share.router, prefix="/brain", tags=["share"])
