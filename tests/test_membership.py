from bson import ObjectId

from school_chat.models.classroom import Classroom
from school_chat.models.room import Room
from school_chat.services.membership import ClassRole, RoomRole, class_role, room_role


def test_room_roles():
    owner, admin, member, stranger = (ObjectId() for _ in range(4))
    room = Room.create(name="Chemistry", owner=owner)
    room.admins.append(admin)
    room.members.extend([admin, member])

    assert room_role(room, owner) is RoomRole.OWNER
    assert room_role(room, admin) is RoomRole.ADMIN
    assert room_role(room, member) is RoomRole.MEMBER
    assert room_role(room, stranger) is RoomRole.NON_MEMBER


def test_room_role_properties():
    assert RoomRole.OWNER.is_admin and RoomRole.ADMIN.is_admin
    assert not RoomRole.MEMBER.is_admin
    assert RoomRole.MEMBER.is_member
    assert not RoomRole.NON_MEMBER.is_member


def test_new_room_seeds_owner():
    owner = ObjectId()
    room = Room.create(name="Maths", owner=owner)

    assert room.admins == [owner]
    assert room.members == [owner]
    assert room.messages == []


def test_class_roles():
    teacher, student, stranger = ObjectId(), ObjectId(), ObjectId()
    classroom = Classroom(name="10B Physics", teacher=teacher, students=[student])

    assert class_role(classroom, teacher) is ClassRole.TEACHER
    assert class_role(classroom, student) is ClassRole.STUDENT
    assert class_role(classroom, stranger) is ClassRole.OUTSIDER
