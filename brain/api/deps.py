# backend/brain/api/deps.py

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt
from jose.exceptions import JWTError, ExpiredSignatureError, JWTClaimsError
from supabase import Client
from brain.core.config import settings
from brain.db.session import get_supabase
from brain.schemas.user import User
from brain.services.share_service import ShareTokenService

logger = logging.getLogger(__name__)
security = HTTPBearer()

# Supabase issues access tokens for signed-in users with this audience
SUPABASE_AUDIENCE = "authenticated"

def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def decode_access_token(token: str) -> dict:
    """Verify a Supabase access token and return its claims."""
    return jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=[settings.ALGORITHM],
        audience=SUPABASE_AUDIENCE,
        issuer=f"{settings.SUPABASE_URL}/auth/v1",
    )

def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> User:
    token = credentials.credentials
    # Log only the first 10 characters of the token
    logger.debug(f"Received token: {token[:10]}...")
    try:
        payload = decode_access_token(token)
    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise _unauthorized("Token has expired")
    except JWTClaimsError as e:
        logger.warning(f"JWT claims error: {e}")
        raise _unauthorized("Invalid token claims")
    except JWTError as e:
        logger.warning(f"JWT error: {e}")
        raise _unauthorized("Could not validate credentials")

    user_id: Optional[str] = payload.get("sub")
    email: Optional[str] = payload.get("email")
    if user_id is None or email is None:
        logger.warning("Token is missing the sub or email claim")
        raise _unauthorized("Could not validate credentials")

    logger.debug(f"User authenticated: {user_id}")
    return User(id=user_id, email=email)

def get_share_service(supabase: Client = Depends(get_supabase)) -> ShareTokenService:
    return ShareTokenService(
        supabase,
        token_length=settings.SHARE_TOKEN_LENGTH,
        alphabet=settings.SHARE_TOKEN_ALPHABET,
        max_attempts=settings.SHARE_TOKEN_MAX_ATTEMPTS,
    )
