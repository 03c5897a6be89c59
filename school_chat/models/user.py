from typing import List

from bson import ObjectId
from pydantic import BaseModel, Field

from school_chat.models.base import Document


class Form(BaseModel):
    """School form, e.g. year 10 class "B"."""
    year: int
    class_letter: str

    def __str__(self):
        return f"{self.year}{self.class_letter}"


class User(Document):
    """User account; teachers and students share the same collection."""

    username: str
    real_name: str
    email: str
    # Stored and compared in plaintext. Known security gap, see DESIGN.md.
    password: str
    teacher: bool = False
    form: Form
    classes: List[ObjectId] = Field(default_factory=list)
    rooms: List[ObjectId] = Field(default_factory=list)

    def valid_password(self, password: str) -> bool:
        return self.password == password

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', teacher={self.teacher})>"
