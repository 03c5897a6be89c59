from fastapi import APIRouter, Depends, status

from school_chat.core.security import (
    Credentials,
    get_credentials,
    parse_object_id,
    parse_optional_id,
    unwrap,
)
from school_chat.models.room import Message, Room
from school_chat.schemas.room import (
    MemberRequest,
    MessageCreate,
    MessageListResponse,
    MessageResponse,
    MessageUpdate,
    RoomCreate,
    RoomResponse,
)
from school_chat.schemas.user import IdResponse, SuccessResponse
from school_chat.services import RoomService, get_room_service

router = APIRouter(prefix="/api/v1/rooms", tags=["Rooms"])


def room_to_response(room: Room) -> RoomResponse:
    return RoomResponse(
        id=str(room.id),
        name=room.name,
        owner=str(room.owner),
        admins=[str(a) for a in room.admins],
        members=[str(m) for m in room.members],
        member_count=len(room.members),
    )


def message_to_response(message: Message) -> MessageResponse:
    return MessageResponse(
        id=str(message.id),
        author=str(message.author),
        contents=message.contents,
        reply=str(message.reply) if message.reply else None,
        edited=message.edited,
    )


# ==================== Room Endpoints ====================

@router.post(
    "",
    response_model=IdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a chat room",
    description="Create a room owned by the caller.",
)
def create_room(
    room_data: RoomCreate,
    credentials: Credentials = Depends(get_credentials),
    rooms: RoomService = Depends(get_room_service),
) -> IdResponse:
    room_id = unwrap(rooms.create_room(credentials.token, credentials.user_id, room_data.name))
    return IdResponse(id=str(room_id))


@router.get("/{room_id}", response_model=RoomResponse, summary="Get room details")
def get_room(
    room_id: str,
    credentials: Credentials = Depends(get_credentials),
    rooms: RoomService = Depends(get_room_service),
) -> RoomResponse:
    result = rooms.get_room_info(
        credentials.token,
        credentials.user_id,
        parse_object_id(room_id, "room id"),
    )
    return room_to_response(unwrap(result, NOT_FOUND="Room not found"))


@router.delete("/{room_id}", response_model=SuccessResponse, summary="Delete room (owner only)")
def delete_room(
    room_id: str,
    credentials: Credentials = Depends(get_credentials),
    rooms: RoomService = Depends(get_room_service),
) -> SuccessResponse:
    result = rooms.delete_room(
        credentials.token,
        credentials.user_id,
        parse_object_id(room_id, "room id"),
    )
    unwrap(result, NOT_FOUND="Room not found", UNAUTHORIZED="Only the owner can delete a room")
    return SuccessResponse()


# ==================== Member Endpoints ====================

@router.post("/{room_id}/members", response_model=SuccessResponse, summary="Add a member (admins only)")
def add_member(
    room_id: str,
    data: MemberRequest,
    credentials: Credentials = Depends(get_credentials),
    rooms: RoomService = Depends(get_room_service),
) -> SuccessResponse:
    result = rooms.add_user(
        credentials.token,
        credentials.user_id,
        parse_object_id(room_id, "room id"),
        parse_object_id(data.member_id, "member id"),
    )
    unwrap(result, CONFLICT="The user is already a member of this room")
    return SuccessResponse()


@router.delete("/{room_id}/members/{member_id}", response_model=SuccessResponse, summary="Kick a member")
def kick_member(
    room_id: str,
    member_id: str,
    credentials: Credentials = Depends(get_credentials),
    rooms: RoomService = Depends(get_room_service),
) -> SuccessResponse:
    result = rooms.kick_user(
        credentials.token,
        credentials.user_id,
        parse_object_id(room_id, "room id"),
        parse_object_id(member_id, "member id"),
    )
    unwrap(result, CONFLICT="The user cannot be removed from this room")
    return SuccessResponse()


@router.post("/{room_id}/leave", response_model=SuccessResponse, summary="Leave a room")
def leave_room(
    room_id: str,
    credentials: Credentials = Depends(get_credentials),
    rooms: RoomService = Depends(get_room_service),
) -> SuccessResponse:
    result = rooms.kick_user(
        credentials.token,
        credentials.user_id,
        parse_object_id(room_id, "room id"),
    )
    unwrap(result, CONFLICT="You cannot leave this room")
    return SuccessResponse()


# ==================== Admin Endpoints ====================

@router.post(
    "/{room_id}/admins",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Promote a member to admin (owner only)",
)
def promote_admin(
    room_id: str,
    data: MemberRequest,
    credentials: Credentials = Depends(get_credentials),
    rooms: RoomService = Depends(get_room_service),
) -> SuccessResponse:
    result = rooms.promote_admin(
        credentials.token,
        credentials.user_id,
        parse_object_id(room_id, "room id"),
        parse_object_id(data.member_id, "member id"),
    )
    unwrap(result, CONFLICT="The user is not a plain member of this room")
    return SuccessResponse()


@router.delete(
    "/{room_id}/admins/{admin_id}",
    response_model=SuccessResponse,
    summary="Demote an admin (owner only)",
)
def demote_admin(
    room_id: str,
    admin_id: str,
    credentials: Credentials = Depends(get_credentials),
    rooms: RoomService = Depends(get_room_service),
) -> SuccessResponse:
    result = rooms.demote_admin(
        credentials.token,
        credentials.user_id,
        parse_object_id(room_id, "room id"),
        parse_object_id(admin_id, "admin id"),
    )
    unwrap(result, CONFLICT="The user is not a removable admin of this room")
    return SuccessResponse()


# ==================== Message Endpoints ====================

@router.post(
    "/{room_id}/messages",
    response_model=IdResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
)
def create_message(
    room_id: str,
    data: MessageCreate,
    credentials: Credentials = Depends(get_credentials),
    rooms: RoomService = Depends(get_room_service),
) -> IdResponse:
    result = rooms.create_message(
        credentials.token,
        credentials.user_id,
        parse_object_id(room_id, "room id"),
        data.contents,
        reply=parse_optional_id(data.reply, "reply id"),
    )
    message_id = unwrap(result, UNAUTHORIZED="Only members can post in this room")
    return IdResponse(id=str(message_id))


@router.get("/{room_id}/messages", response_model=MessageListResponse, summary="Get room messages")
def get_messages(
    room_id: str,
    credentials: Credentials = Depends(get_credentials),
    rooms: RoomService = Depends(get_room_service),
) -> MessageListResponse:
    result = rooms.get_messages(
        credentials.token,
        credentials.user_id,
        parse_object_id(room_id, "room id"),
    )
    messages = unwrap(result, NOT_FOUND="Room not found")
    return MessageListResponse(
        messages=[message_to_response(m) for m in messages],
        total=len(messages),
    )


@router.patch("/{room_id}/messages/{message_id}", response_model=SuccessResponse, summary="Edit own message")
def edit_message(
    room_id: str,
    message_id: str,
    data: MessageUpdate,
    credentials: Credentials = Depends(get_credentials),
    rooms: RoomService = Depends(get_room_service),
) -> SuccessResponse:
    result = rooms.edit_message(
        credentials.token,
        credentials.user_id,
        parse_object_id(room_id, "room id"),
        parse_object_id(message_id, "message id"),
        data.contents,
    )
    unwrap(result, NOT_FOUND="Message not found")
    return SuccessResponse()
