from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """Base for everything stored in (or embedded into) a collection."""

    id: ObjectId = Field(default_factory=ObjectId, alias="_id")

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    def to_document(self) -> dict:
        """Dump to the dict inserted into MongoDB (``_id`` included)."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_document(cls, document: dict):
        return cls.model_validate(document)
