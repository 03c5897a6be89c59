from school_chat.models.base import Document
from school_chat.models.user import User, Form
from school_chat.models.token import Token
from school_chat.models.classroom import Classroom, Notice, Assignment
from school_chat.models.room import Room, Message

__all__ = ["Document", "User", "Form", "Token", "Classroom", "Notice", "Assignment", "Room", "Message"]
