from typing import Optional, List

from pydantic import BaseModel, Field


# ==================== Room Schemas ====================

class RoomCreate(BaseModel):
    """Schema for creating a chat room."""
    name: str = Field(..., min_length=1, max_length=255)


class MemberRequest(BaseModel):
    """Schema naming the member an action applies to."""
    member_id: str


class RoomResponse(BaseModel):
    """Schema for room response."""
    id: str
    name: str
    owner: str
    admins: List[str] = []
    members: List[str] = []
    member_count: int = 0


# ==================== Message Schemas ====================

class MessageCreate(BaseModel):
    """Schema for creating a new chat message."""
    contents: str = Field(..., min_length=1, max_length=2000)
    reply: Optional[str] = None


class MessageUpdate(BaseModel):
    contents: str = Field(..., min_length=1, max_length=2000)


class MessageResponse(BaseModel):
    """Schema for chat message response."""
    id: str
    author: str
    contents: str
    reply: Optional[str] = None
    edited: bool = False


class MessageListResponse(BaseModel):
    messages: List[MessageResponse]
    total: int
