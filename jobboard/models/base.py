# ========================================
# jobboard/models/base.py
# ========================================

from datetime import datetime, timezone
from typing import Annotated, Optional

from bson import ObjectId
from pydantic import AfterValidator, BaseModel, ConfigDict


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what MongoDB hands back by default."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


UTCDateTime = Annotated[datetime, AfterValidator(as_naive_utc)]


class MongoBaseModel(BaseModel):
    """Document stored in a MongoDB collection.

    ``id`` is the string form of ``_id``. ``version`` is bumped on every
    guarded save so two writers racing on the same document cannot both win.
    """

    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)

    id: Optional[str] = None
    version: int = 0

    def to_document(self) -> dict:
        computed = set(type(self).model_computed_fields)
        doc = self.model_dump(exclude={"id", *computed})
        if self.id is not None:
            doc["_id"] = ObjectId(self.id)
        return doc

    @classmethod
    def from_document(cls, doc: Optional[dict]):
        if doc is None:
            return None
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)
