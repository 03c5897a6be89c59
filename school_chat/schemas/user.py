from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


# ==================== Request Schemas ====================

class UserCreate(BaseModel):
    """Schema for registering a new user."""
    username: str = Field(..., min_length=1, max_length=64)
    real_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1)
    year: int
    class_letter: str = Field(..., min_length=1, max_length=4)
    teacher: bool = False


class UserLogin(BaseModel):
    """Schema for logging in with either a username or an email."""
    username: Optional[str] = None
    email: Optional[str] = None
    password: str


class PasswordChange(BaseModel):
    old_password: str
    new_password: str = Field(..., min_length=1)


# ==================== Response Schemas ====================

class IdResponse(BaseModel):
    """Id of a newly created resource."""
    id: str


class SuccessResponse(BaseModel):
    success: bool = True


class TokenResponse(BaseModel):
    """Login token plus the user it belongs to."""
    token: str
    user_id: str


class FormInfo(BaseModel):
    year: int
    class_letter: str


class UserResponse(BaseModel):
    """Public profile of a user; never includes the password."""
    id: str
    username: str
    real_name: str
    email: str
    teacher: bool
    form: FormInfo
    classes: List[str] = []
    rooms: List[str] = []
