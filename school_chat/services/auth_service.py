"""
Auth Service
Login tokens and the authorization gate every service calls first.
"""

import logging
from typing import Optional

from bson import ObjectId

from school_chat.core.results import require_ack
from school_chat.database import Database
from school_chat.models.token import Token

logger = logging.getLogger(__name__)


class TokenStore:
    """Maps opaque tokens to the user they were issued for."""

    def __init__(self, db: Database):
        self.tokens = db.tokens

    def create_token(self, user_id: ObjectId) -> ObjectId:
        """
        Issue a new token for a user.

        A user may hold any number of tokens at once.

        Args:
            user_id: Owner of the token

        Returns:
            The token id
        """
        token = Token(user=user_id)
        result = require_ack(self.tokens.insert_one(token.to_document()))
        logger.debug("Issued token for user %s", user_id)
        return result.inserted_id

    def get_token(self, token_id: ObjectId) -> Optional[Token]:
        document = self.tokens.find_one({"_id": token_id})
        return Token.from_document(document) if document else None

    def delete_token(self, token_id: ObjectId) -> Optional[Token]:
        """Delete a token, returning the removed record or None."""
        document = self.tokens.find_one_and_delete({"_id": token_id})
        return Token.from_document(document) if document else None

    def delete_user_tokens(self, user_id: ObjectId) -> int:
        """Delete every token owned by a user."""
        result = require_ack(self.tokens.delete_many({"user": user_id}))
        return result.deleted_count


class AuthorizationGate:
    """Confirms that a token exists and belongs to the claimed user."""

    def __init__(self, token_store: TokenStore):
        self.token_store = token_store

    def is_valid(self, token: Optional[ObjectId], user_id: Optional[ObjectId]) -> bool:
        if token is None or user_id is None:
            return False
        record = self.token_store.get_token(token)
        return record is not None and record.user == user_id
