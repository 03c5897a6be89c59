"""
User Service
Account creation, login/logout and profile lookups.
"""

import logging
from typing import Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from school_chat.core.results import Result, Status, created, fail, guarded, ok, require_ack
from school_chat.database import Database
from school_chat.models.token import Token
from school_chat.models.user import Form, User
from school_chat.services.auth_service import AuthorizationGate, TokenStore

logger = logging.getLogger(__name__)


class UserService:
    """Service for user accounts and their login tokens."""

    def __init__(self, db: Database, token_store: TokenStore, gate: AuthorizationGate):
        self.users = db.users
        self.token_store = token_store
        self.gate = gate

    def _get(self, user_id: ObjectId) -> Optional[User]:
        document = self.users.find_one({"_id": user_id})
        return User.from_document(document) if document else None

    @guarded
    def create_user(
        self,
        username: str,
        real_name: str,
        email: str,
        password: str,
        year: int,
        class_letter: str,
        teacher: bool = False,
    ) -> Result:
        """
        Create a new account.

        Returns:
            CREATED with the new user id, or CONFLICT if the username or
            email is already taken
        """
        taken = self.users.find_one({"$or": [{"username": username}, {"email": email}]})
        if taken:
            logger.debug("Rejected user %s: username or email taken", username)
            return fail(Status.CONFLICT)

        user = User(
            username=username,
            real_name=real_name,
            email=email,
            password=password,
            teacher=teacher,
            form=Form(year=year, class_letter=class_letter),
        )
        try:
            result = require_ack(self.users.insert_one(user.to_document()))
        except DuplicateKeyError:
            # Lost a race against a concurrent registration
            return fail(Status.CONFLICT)

        logger.info("Created user %s (%s)", result.inserted_id, username)
        return created(result.inserted_id)

    @guarded
    def login(
        self,
        password: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Result:
        """
        Log in by username or email and issue a token.

        Username wins when both are given.

        Returns:
            CREATED with the issued Token; NOT_ACCEPTABLE when neither
            username nor email is given; UNAUTHORIZED on a wrong password
        """
        if username:
            query = {"username": username}
        elif email:
            query = {"email": email}
        else:
            return fail(Status.NOT_ACCEPTABLE)

        document = self.users.find_one(query)
        if not document or not User.from_document(document).valid_password(password):
            return fail(Status.UNAUTHORIZED)

        token_id = self.token_store.create_token(document["_id"])
        logger.info("User %s logged in", document["_id"])
        return created(Token(id=token_id, user=document["_id"]))

    @guarded
    def logout(self, token: ObjectId, user_id: ObjectId) -> Result:
        if not self.gate.is_valid(token, user_id):
            return fail(Status.UNAUTHORIZED)

        if self.token_store.delete_token(token) is None:
            # Deleted by a concurrent logout
            return fail(Status.UNAUTHORIZED)

        logger.info("User %s logged out", user_id)
        return ok()

    @guarded
    def delete_user(self, token: ObjectId, user_id: ObjectId) -> Result:
        """Delete the caller's account and every token it owns."""
        if not self.gate.is_valid(token, user_id):
            return fail(Status.UNAUTHORIZED)

        # User first, so a concurrent login cannot mint a token after the purge
        if self.users.find_one_and_delete({"_id": user_id}) is None:
            return fail(Status.NOT_FOUND)

        self.token_store.delete_user_tokens(user_id)

        logger.info("Deleted user %s", user_id)
        return ok()

    @guarded
    def get_user_info(self, token: ObjectId, user_id: ObjectId, target_id: ObjectId) -> Result:
        if not self.gate.is_valid(token, user_id):
            return fail(Status.UNAUTHORIZED)

        user = self._get(target_id)
        if user is None:
            return fail(Status.NOT_FOUND)

        return ok(user)

    @guarded
    def change_password(
        self,
        token: ObjectId,
        user_id: ObjectId,
        old_password: str,
        new_password: str,
    ) -> Result:
        if not self.gate.is_valid(token, user_id):
            return fail(Status.UNAUTHORIZED)

        user = self._get(user_id)
        if user is None:
            return fail(Status.NOT_FOUND)

        if not user.valid_password(old_password):
            return fail(Status.UNAUTHORIZED)

        result = require_ack(self.users.update_one(
            {"_id": user_id, "password": old_password},
            {"$set": {"password": new_password}},
        ))
        if result.matched_count == 0:
            return fail(Status.CONFLICT)

        logger.info("User %s changed password", user_id)
        return ok()
