from bson import ObjectId

from school_chat.models.base import Document


class Token(Document):
    """Login token; valid until deleted."""

    user: ObjectId

    def __repr__(self):
        return f"<Token(id={self.id}, user={self.user})>"
