# backend/brain/schemas/share.py

from typing import List, Optional
from pydantic import BaseModel
from brain.schemas.content import Content

class ShareToggle(BaseModel):
    share: bool

class ShareStatus(BaseModel):
    shared: bool
    token: Optional[str] = None

class SharedBrain(BaseModel):
    username: str
    content: List[Content]
