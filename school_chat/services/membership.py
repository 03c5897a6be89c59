"""
Membership Checks
Classifies an actor against a room or a class.
"""

from enum import Enum

from bson import ObjectId

from school_chat.models.classroom import Classroom
from school_chat.models.room import Room


class RoomRole(str, Enum):
    """Role of a user inside a room, strongest first."""
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    NON_MEMBER = "non_member"

    @property
    def is_admin(self) -> bool:
        return self in (RoomRole.OWNER, RoomRole.ADMIN)

    @property
    def is_member(self) -> bool:
        return self is not RoomRole.NON_MEMBER


class ClassRole(str, Enum):
    """Role of a user inside a class."""
    TEACHER = "teacher"
    STUDENT = "student"
    OUTSIDER = "outsider"


def room_role(room: Room, user_id: ObjectId) -> RoomRole:
    """Classify ``user_id`` as owner, admin, plain member or non-member."""
    if user_id == room.owner:
        return RoomRole.OWNER
    if user_id in frozenset(room.admins):
        return RoomRole.ADMIN
    if user_id in frozenset(room.members):
        return RoomRole.MEMBER
    return RoomRole.NON_MEMBER


def class_role(classroom: Classroom, user_id: ObjectId) -> ClassRole:
    """Classify ``user_id`` as the teacher of record, a student or an outsider."""
    if user_id == classroom.teacher:
        return ClassRole.TEACHER
    if user_id in frozenset(classroom.students):
        return ClassRole.STUDENT
    return ClassRole.OUTSIDER
