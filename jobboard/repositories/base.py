# ========================================
# jobboard/repositories/base.py
# ========================================
"""Shared MongoDB plumbing for the lifecycle repositories.

``save`` is a compare-and-set on the ``version`` field: the write only lands
if nobody else saved the document since it was read, otherwise the caller
gets ``StaleState`` and must re-read.
"""

import logging
from typing import FrozenSet, List, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from jobboard.lifecycle.errors import Conflict, NotFound, StaleState

logger = logging.getLogger(__name__)


def to_object_id(value: str) -> Optional[ObjectId]:
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


class MongoRepository:
    collection_name: str = ""
    model = None
    duplicate_message = "Document already exists"
    # fields never rewritten by save(): counters bumped with $inc, immutable stamps
    unmanaged_fields: FrozenSet[str] = frozenset()

    def __init__(self, db):
        self.db = db
        self.collection = db[self.collection_name]

    async def get(self, entity_id: str):
        oid = to_object_id(entity_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid})
        return self.model.from_document(doc)

    async def insert(self, entity):
        doc = entity.to_document()
        doc.pop("_id", None)
        doc["version"] = 0
        try:
            result = await self.collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise Conflict(self.duplicate_message) from exc
        return entity.model_copy(update={"id": str(result.inserted_id), "version": 0})

    async def save(self, entity):
        oid = to_object_id(entity.id)
        if oid is None:
            raise NotFound(f"{self.model.__name__} not found", id=entity.id)

        doc = entity.to_document()
        doc.pop("_id", None)
        for field in self.unmanaged_fields:
            doc.pop(field, None)
        expected = entity.version
        doc["version"] = expected + 1

        try:
            result = await self.collection.update_one({"_id": oid, "version": expected}, {"$set": doc})
        except DuplicateKeyError as exc:
            raise Conflict(self.duplicate_message) from exc

        if result.matched_count == 0:
            if await self.collection.count_documents({"_id": oid}, limit=1) == 0:
                raise NotFound(f"{self.model.__name__} not found", id=entity.id)
            logger.warning("Stale write on %s %s (version %s)", self.collection_name, entity.id, expected)
            raise StaleState(
                f"{self.model.__name__} was modified concurrently; reload and retry",
                id=entity.id,
                expected_version=expected,
            )
        return entity.model_copy(update={"version": expected + 1})

    async def delete(self, entity_id: str) -> bool:
        oid = to_object_id(entity_id)
        if oid is None:
            return False
        result = await self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    async def _find(self, query: dict, sort=None, limit: int = 0, skip: int = 0) -> List:
        cursor = self.collection.find(query)
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return [self.model.from_document(doc) async for doc in cursor]
