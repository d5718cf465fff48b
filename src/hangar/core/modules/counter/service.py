from typing import Any

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from hangar.core.core import Service
from hangar.core.modules.counter.models import Counter, SequenceName


class CounterService(Service):
    """Hands out monotonically increasing ids per sequence."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("counters")

    async def get_next_id(self, sequence: SequenceName) -> int:
        """Atomically increment and return the next id for a sequence."""
        result = await self._collection.find_one_and_update(
            {"_id": sequence},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

        # If it was just created (upserted), seq will be 1
        return Counter.model_validate(result).seq
