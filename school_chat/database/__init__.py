from school_chat.database.connection import Database, create_client

__all__ = ["Database", "create_client"]
