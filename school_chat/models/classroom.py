from datetime import datetime
from typing import List, Optional

from bson import ObjectId
from pydantic import Field

from school_chat.models.base import Document


class Notice(Document):
    """Notice posted to a class by its teacher."""

    author: ObjectId
    title: str
    description: str
    image: Optional[str] = None


class Assignment(Notice):
    """Notice with a due date."""

    due_date: datetime


class Classroom(Document):
    """Class with one teacher of record and a roster of students."""

    name: str
    teacher: ObjectId
    students: List[ObjectId] = Field(default_factory=list)
    notices: List[Notice] = Field(default_factory=list)
    assignments: List[Assignment] = Field(default_factory=list)

    def __repr__(self):
        return f"<Classroom(id={self.id}, name='{self.name}', teacher={self.teacher})>"
