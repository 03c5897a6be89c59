"""
Room Service
Chat rooms: membership, admins and messages.

Same check order as the class service: token, room exists, caller's role,
conflicts, then a conditional update.
"""

import logging
from typing import Optional, Tuple

from bson import ObjectId

from school_chat.core.results import Result, Status, created, fail, guarded, ok, require_ack
from school_chat.database import Database
from school_chat.models.room import Message, Room
from school_chat.services.auth_service import AuthorizationGate
from school_chat.services.membership import RoomRole, room_role

logger = logging.getLogger(__name__)


class RoomService:
    """Service for chat rooms."""

    def __init__(self, db: Database, gate: AuthorizationGate):
        self.rooms = db.rooms
        self.users = db.users
        self.gate = gate

    def _get(self, room_id: ObjectId) -> Optional[Room]:
        document = self.rooms.find_one({"_id": room_id})
        return Room.from_document(document) if document else None

    def _load(self, token, user_id, room_id) -> Tuple[Optional[Room], Optional[Result]]:
        if not self.gate.is_valid(token, user_id):
            return None, fail(Status.UNAUTHORIZED)

        room = self._get(room_id)
        if room is None:
            return None, fail(Status.NOT_FOUND)

        return room, None

    # ==================== Rooms ====================

    @guarded
    def create_room(self, token: ObjectId, user_id: ObjectId, name: str) -> Result:
        """Create a room owned by the caller, who becomes its first admin and member."""
        if not self.gate.is_valid(token, user_id):
            return fail(Status.UNAUTHORIZED)

        room = Room.create(name=name, owner=user_id)
        result = require_ack(self.rooms.insert_one(room.to_document()))
        require_ack(self.users.update_one({"_id": user_id}, {"$addToSet": {"rooms": result.inserted_id}}))

        logger.info("User %s created room %s", user_id, result.inserted_id)
        return created(result.inserted_id)

    @guarded
    def get_room_info(self, token: ObjectId, user_id: ObjectId, room_id: ObjectId) -> Result:
        room, failure = self._load(token, user_id, room_id)
        if failure:
            return failure
        return ok(room)

    @guarded
    def delete_room(self, token: ObjectId, user_id: ObjectId, room_id: ObjectId) -> Result:
        room, failure = self._load(token, user_id, room_id)
        if failure:
            return failure

        if room_role(room, user_id) is not RoomRole.OWNER:
            return fail(Status.UNAUTHORIZED)

        result = require_ack(self.rooms.delete_one({"_id": room_id}))
        if result.deleted_count == 0:
            return fail(Status.NOT_FOUND)

        require_ack(self.users.update_many({"rooms": room_id}, {"$pull": {"rooms": room_id}}))

        logger.info("User %s deleted room %s", user_id, room_id)
        return ok()

    # ==================== Members ====================

    @guarded
    def add_user(self, token: ObjectId, user_id: ObjectId, room_id: ObjectId, target_id: ObjectId) -> Result:
        """Add a user to the room. Admins only."""
        room, failure = self._load(token, user_id, room_id)
        if failure:
            return failure

        if not room_role(room, user_id).is_admin:
            return fail(Status.UNAUTHORIZED)

        if self.users.find_one({"_id": target_id}, {"_id": 1}) is None:
            return fail(Status.NOT_FOUND)

        if room_role(room, target_id).is_member:
            return fail(Status.CONFLICT)

        result = require_ack(self.rooms.update_one(
            {"_id": room_id, "members": {"$ne": target_id}},
            {"$push": {"members": target_id}},
        ))
        if result.matched_count == 0:
            return fail(Status.CONFLICT)

        require_ack(self.users.update_one({"_id": target_id}, {"$addToSet": {"rooms": room_id}}))

        logger.info("User %s added %s to room %s", user_id, target_id, room_id)
        return ok()

    @guarded
    def kick_user(
        self,
        token: ObjectId,
        user_id: ObjectId,
        room_id: ObjectId,
        target_id: Optional[ObjectId] = None,
    ) -> Result:
        """
        Remove a member from the room, or leave it when ``target_id`` is None.

        Admins may remove plain members, only the owner may remove admins and
        the owner can never be removed.
        """
        room, failure = self._load(token, user_id, room_id)
        if failure:
            return failure

        target_id = target_id or user_id
        caller = room_role(room, user_id)
        target = room_role(room, target_id)

        if target_id != user_id:
            if not caller.is_admin:
                return fail(Status.UNAUTHORIZED)
            if target is RoomRole.ADMIN and caller is not RoomRole.OWNER:
                return fail(Status.UNAUTHORIZED)

        if target in (RoomRole.OWNER, RoomRole.NON_MEMBER):
            return fail(Status.CONFLICT)

        query = {"_id": room_id, "members": target_id, "owner": {"$ne": target_id}}
        if target_id != user_id and caller is not RoomRole.OWNER:
            # Target may have been promoted since the role check
            query["admins"] = {"$ne": target_id}

        result = require_ack(self.rooms.update_one(
            query,
            {"$pull": {"members": target_id, "admins": target_id}},
        ))
        if result.matched_count == 0:
            return fail(Status.CONFLICT)

        require_ack(self.users.update_one({"_id": target_id}, {"$pull": {"rooms": room_id}}))

        logger.info("User %s removed %s from room %s", user_id, target_id, room_id)
        return ok()

    # ==================== Admins ====================

    @guarded
    def promote_admin(self, token: ObjectId, user_id: ObjectId, room_id: ObjectId, target_id: ObjectId) -> Result:
        room, failure = self._load(token, user_id, room_id)
        if failure:
            return failure

        if room_role(room, user_id) is not RoomRole.OWNER:
            return fail(Status.UNAUTHORIZED)

        target = room_role(room, target_id)
        if target is not RoomRole.MEMBER:
            return fail(Status.CONFLICT)

        result = require_ack(self.rooms.update_one(
            {"_id": room_id, "members": target_id, "admins": {"$ne": target_id}},
            {"$push": {"admins": target_id}},
        ))
        if result.matched_count == 0:
            return fail(Status.CONFLICT)

        logger.info("Promoted %s to admin of room %s", target_id, room_id)
        return created(True)

    @guarded
    def demote_admin(
        self,
        token: ObjectId,
        user_id: ObjectId,
        room_id: ObjectId,
        target_id: Optional[ObjectId] = None,
    ) -> Result:
        room, failure = self._load(token, user_id, room_id)
        if failure:
            return failure

        if room_role(room, user_id) is not RoomRole.OWNER:
            return fail(Status.UNAUTHORIZED)

        target_id = target_id or user_id
        if room_role(room, target_id) is not RoomRole.ADMIN:
            return fail(Status.CONFLICT)

        result = require_ack(self.rooms.update_one(
            {"_id": room_id, "admins": target_id, "owner": {"$ne": target_id}},
            {"$pull": {"admins": target_id}},
        ))
        if result.matched_count == 0:
            return fail(Status.CONFLICT)

        logger.info("Demoted %s in room %s", target_id, room_id)
        return ok()

    # ==================== Messages ====================

    @guarded
    def create_message(
        self,
        token: ObjectId,
        user_id: ObjectId,
        room_id: ObjectId,
        contents: str,
        reply: Optional[ObjectId] = None,
    ) -> Result:
        room, failure = self._load(token, user_id, room_id)
        if failure:
            return failure

        if not room_role(room, user_id).is_member:
            return fail(Status.UNAUTHORIZED)

        if reply is not None and room.find_message(reply) is None:
            return fail(Status.NOT_FOUND)

        message = Message(author=user_id, contents=contents, reply=reply)
        result = require_ack(self.rooms.update_one(
            {"_id": room_id, "members": user_id},
            {"$push": {"messages": message.to_document()}},
        ))
        if result.matched_count == 0:
            return fail(Status.UNAUTHORIZED)

        logger.debug("User %s posted message %s in room %s", user_id, message.id, room_id)
        return created(message.id)

    @guarded
    def edit_message(
        self,
        token: ObjectId,
        user_id: ObjectId,
        room_id: ObjectId,
        message_id: ObjectId,
        contents: str,
    ) -> Result:
        """Replace a message's contents. Only its author may edit it; the edit is flagged for good."""
        room, failure = self._load(token, user_id, room_id)
        if failure:
            return failure

        if not room_role(room, user_id).is_member:
            return fail(Status.UNAUTHORIZED)

        message = room.find_message(message_id)
        if message is None:
            return fail(Status.NOT_FOUND)
        if message.author != user_id:
            return fail(Status.UNAUTHORIZED)

        result = require_ack(self.rooms.update_one(
            {"_id": room_id, "messages._id": message_id},
            {"$set": {"messages.$.contents": contents, "messages.$.edited": True}},
        ))
        if result.matched_count == 0:
            return fail(Status.NOT_FOUND)

        logger.debug("User %s edited message %s", user_id, message_id)
        return ok()

    @guarded
    def get_messages(self, token: ObjectId, user_id: ObjectId, room_id: ObjectId) -> Result:
        room, failure = self._load(token, user_id, room_id)
        if failure:
            return failure

        if not room_role(room, user_id).is_member:
            return fail(Status.UNAUTHORIZED)

        return ok(room.messages)
