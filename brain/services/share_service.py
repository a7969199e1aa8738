# backend/brain/services/share_service.py

import logging
from typing import Callable, Optional
from postgrest.exceptions import APIError
from supabase import Client
from brain.schemas.content import Content
from brain.schemas.share import SharedBrain
from brain.services.link_generator import DEFAULT_ALPHABET, DEFAULT_LENGTH, generate_share_token

logger = logging.getLogger(__name__)

SHARE_LINKS_TABLE = "share_links"
PROFILES_TABLE = "profiles"
CONTENTS_TABLE = "contents"

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class ShareError(Exception):
    """Base class for share link failures."""


class ShareLinkNotFound(ShareError):
    """No share link exists for the token (never issued, or revoked)."""


class ShareOwnerMissing(ShareError):
    """The share link points at a user that has no profile anymore."""


class ProfileRequired(ShareError):
    """Sharing needs a public username, and the user has not set one yet."""


class TokenSpaceExhausted(ShareError):
    """Every candidate token collided within the retry budget."""


def _preview(token: str) -> str:
    return f"{token[:4]}..."


class ShareTokenService:
    """
    Issues, revokes and resolves the public share link of a user's saved content.

    Each user has at most one link. The unique indexes on ``share_links.token`` and
    ``share_links.user_id`` are what keep tokens distinct across users; the lookup
    before each insert only avoids a round trip on the common collision.
    """

    def __init__(
        self,
        supabase: Client,
        token_length: int = DEFAULT_LENGTH,
        alphabet: str = DEFAULT_ALPHABET,
        max_attempts: int = 5,
        token_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Args:
            supabase: Client handle owned by the application.
            token_length: Number of characters per token.
            alphabet: Characters tokens are drawn from.
            max_attempts: Candidates tried before giving up with TokenSpaceExhausted.
            token_factory: Produces candidate tokens; defaults to a uniform random draw.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.supabase = supabase
        self.max_attempts = max_attempts
        self.token_factory = token_factory or (lambda: generate_share_token(token_length, alphabet))

    def _find_by_owner(self, owner_id: str) -> Optional[dict]:
        response = self.supabase.table(SHARE_LINKS_TABLE).select("*").eq("user_id", owner_id).limit(1).execute()
        return response.data[0] if response.data else None

    def _find_by_token(self, token: str) -> Optional[dict]:
        response = self.supabase.table(SHARE_LINKS_TABLE).select("*").eq("token", token).limit(1).execute()
        return response.data[0] if response.data else None

    def _find_profile(self, owner_id: str) -> Optional[dict]:
        response = self.supabase.table(PROFILES_TABLE).select("username").eq("id", owner_id).limit(1).execute()
        return response.data[0] if response.data else None

    def get(self, owner_id: str) -> Optional[str]:
        link = self._find_by_owner(owner_id)
        return link["token"] if link else None

    def issue(self, owner_id: str) -> str:
        """
        Return the owner's share token, creating one if none exists.

        Raises:
            ProfileRequired: The owner has no profile to show on the shared page.
            TokenSpaceExhausted: No free token was found within ``max_attempts``.
            APIError: Any storage failure other than a uniqueness collision.
        """
        existing = self._find_by_owner(owner_id)
        if existing:
            logger.info(f"Share link already active for user {owner_id}")
            return existing["token"]

        if not self._find_profile(owner_id):
            logger.info(f"User {owner_id} tried to share without a profile")
            raise ProfileRequired(owner_id)

        for attempt in range(1, self.max_attempts + 1):
            candidate = self.token_factory()
            if self._find_by_token(candidate):
                logger.info(f"Share token collision on attempt {attempt}, retrying")
                continue

            try:
                self.supabase.table(SHARE_LINKS_TABLE).insert({"user_id": owner_id, "token": candidate}).execute()
            except APIError as e:
                if e.code != UNIQUE_VIOLATION:
                    raise
                # Lost a race: either this owner got a link concurrently, or the
                # candidate was taken by someone else in between.
                existing = self._find_by_owner(owner_id)
                if existing:
                    logger.info(f"Concurrent share link creation for user {owner_id}, reusing it")
                    return existing["token"]
                logger.info(f"Share token taken concurrently on attempt {attempt}, retrying")
                continue

            logger.info(f"Issued share token {_preview(candidate)} for user {owner_id}")
            return candidate

        logger.error(f"Could not issue a share token for user {owner_id} after {self.max_attempts} attempts")
        raise TokenSpaceExhausted(f"no free share token after {self.max_attempts} attempts")

    def revoke(self, owner_id: str) -> None:
        response = self.supabase.table(SHARE_LINKS_TABLE).delete().eq("user_id", owner_id).execute()
        if response.data:
            logger.info(f"Revoked share link for user {owner_id}")

    def resolve(self, token: str) -> SharedBrain:
        """
        Look up the content behind a share token.

        Raises:
            ShareLinkNotFound: The token is unknown.
            ShareOwnerMissing: The link's owner has no profile.
        """
        link = self._find_by_token(token)
        if not link:
            raise ShareLinkNotFound(token)

        owner_id = link["user_id"]
        profile = self._find_profile(owner_id)
        if not profile:
            logger.error(f"Share link {_preview(token)} references missing user {owner_id}")
            raise ShareOwnerMissing(owner_id)

        content = (
            self.supabase.table(CONTENTS_TABLE)
            .select("*")
            .eq("user_id", owner_id)
            .order("created_at", desc=True)
            .execute()
        )
        return SharedBrain(
            username=profile["username"],
            content=[Content(**row) for row in content.data],
        )
