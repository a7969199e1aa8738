# backend/brain/schemas/content.py

from datetime import datetime
from typing import List, Literal
from pydantic import BaseModel, Field, field_validator

ContentType = Literal["article", "video", "resource", "other", "youtube", "twitter"]

class ContentBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    link: str = Field(..., min_length=1, max_length=2048)
    type: ContentType
    tags: List[str] = []

class ContentCreate(ContentBase):
    @field_validator("title", "link", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, tags: List[str]) -> List[str]:
        # lowercase, trimmed, first occurrence wins
        seen = []
        for tag in tags:
            tag = tag.strip().lower()
            if tag and tag not in seen:
                seen.append(tag)
        return seen

class Content(ContentBase):
    id: str
    user_id: str
    created_at: datetime
