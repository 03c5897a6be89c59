import logging

from pymongo import ASCENDING, MongoClient

from school_chat.core.config import Settings

logger = logging.getLogger(__name__)

USERS = "users"
CLASSES = "classes"
ROOMS = "rooms"
TOKENS = "tokens"


def create_client(settings: Settings) -> MongoClient:
    """Create the MongoDB client for the configured server."""
    return MongoClient(
        settings.MONGODB_URL,
        tz_aware=True,
        serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
    )


class Database:
    """Handle on the collections backing users, classes, rooms and tokens."""

    def __init__(self, db):
        self.db = db
        self.users = db[USERS]
        self.classes = db[CLASSES]
        self.rooms = db[ROOMS]
        self.tokens = db[TOKENS]

    @classmethod
    def from_client(cls, client: MongoClient, name: str) -> "Database":
        return cls(client[name])

    def ensure_indexes(self) -> None:
        """Create the unique user indexes and the token owner index."""
        self.users.create_index([("username", ASCENDING)], unique=True)
        self.users.create_index([("email", ASCENDING)], unique=True)
        self.tokens.create_index([("user", ASCENDING)])
        logger.info("Indexes ensured on database %s", self.db.name)

    def __repr__(self):
        return f"<Database(name='{self.db.name}')>"
