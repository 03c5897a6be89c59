from typing import List, Optional

from bson import ObjectId
from pydantic import Field

from school_chat.models.base import Document


class Message(Document):
    """Chat message embedded in a room."""

    author: ObjectId
    contents: str
    reply: Optional[ObjectId] = None
    edited: bool = False


class Room(Document):
    """Chat room. The owner is always an admin and a member."""

    name: str
    owner: ObjectId
    admins: List[ObjectId] = Field(default_factory=list)
    members: List[ObjectId] = Field(default_factory=list)
    messages: List[Message] = Field(default_factory=list)

    @classmethod
    def create(cls, name: str, owner: ObjectId) -> "Room":
        return cls(name=name, owner=owner, admins=[owner], members=[owner])

    def find_message(self, message_id: ObjectId) -> Optional[Message]:
        for message in self.messages:
            if message.id == message_id:
                return message
        return None

    def __repr__(self):
        return f"<Room(id={self.id}, name='{self.name}', owner={self.owner})>"
