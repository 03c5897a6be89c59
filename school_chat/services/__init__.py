"""
Services Package
Token store, authorization gate and the user, class and room services.
"""

from fastapi import Request

from school_chat.database import Database
from school_chat.services.auth_service import AuthorizationGate, TokenStore
from school_chat.services.class_service import ClassService
from school_chat.services.room_service import RoomService
from school_chat.services.user_service import UserService


class ServiceRegistry:
    """Builds every service around one database handle."""

    def __init__(self, db: Database):
        self.token_store = TokenStore(db)
        self.gate = AuthorizationGate(self.token_store)
        self.users = UserService(db, self.token_store, self.gate)
        self.classes = ClassService(db, self.gate)
        self.rooms = RoomService(db, self.gate)


def get_user_service(request: Request) -> UserService:
    return request.app.state.services.users


def get_class_service(request: Request) -> ClassService:
    return request.app.state.services.classes


def get_room_service(request: Request) -> RoomService:
    return request.app.state.services.rooms


__all__ = [
    "TokenStore",
    "AuthorizationGate",
    "UserService",
    "ClassService",
    "RoomService",
    "ServiceRegistry",
    "get_user_service",
    "get_class_service",
    "get_room_service",
]
