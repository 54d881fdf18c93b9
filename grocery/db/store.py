from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession, AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from grocery.core.config import Settings
from grocery.core.errors import StoreError
from grocery.db.pipeline import Pipeline

logger = logging.getLogger(__name__)

T = TypeVar("T")

@asynccontextmanager
async def _translate_errors():
    try:
        yield
    except PyMongoError as e:
        logger.error(f"MongoDB operation failed: {str(e)}")
        raise StoreError(str(e)) from e


class CatalogUnitOfWork:
    """Catalog operations bound to one session and its open transaction.

    Every call made through the same unit of work commits or aborts together.
    """

    def __init__(self, collection: AsyncIOMotorCollection, session: AsyncIOMotorClientSession):
        self.collection = collection
        self.session = session

    async def find_product(self, plu: int) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"PLU": plu}, session=self.session)

    async def push_rating(self, plu: int, rating: int, upsert: bool = False) -> None:
        await self.collection.update_one(
            {"PLU": plu},
            {"$push": {"Ratings": {"Rating": rating}}},
            upsert=upsert,
            session=self.session,
        )

    async def aggregate(self, pipeline: Pipeline) -> List[Dict[str, Any]]:
        cursor = self.collection.aggregate(pipeline.to_mongo(), session=self.session)
        return await cursor.to_list(length=None)

    async def set_average(self, plu: int, average: float) -> None:
        await self.collection.update_one(
            {"PLU": plu},
            {"$set": {"AverageRating": average}},
            session=self.session,
        )


class MongoCatalogStore:
    """Product catalog kept in a single MongoDB collection"""

    def __init__(self, client: AsyncIOMotorClient, settings: Settings):
        self.client = client
        self.collection = client[settings.DB_NAME][settings.COLLECTION_NAME]
        self.max_commit_time_ms = settings.MAX_COMMIT_TIME_MS

    async def run_in_transaction(self, work: Callable[[CatalogUnitOfWork], Awaitable[T]]) -> T:
        """Run ``work`` inside a transaction on a fresh session.

        The transaction commits only when ``work`` returns; any exception
        aborts it and is re-raised. The session is always ended on exit.
        Transient write conflicts are retried by the driver.
        """
        async def callback(session):
            return await work(CatalogUnitOfWork(self.collection, session))

        async with _translate_errors():
            async with await self.client.start_session() as session:
                return await session.with_transaction(
                    callback, max_commit_time_ms=self.max_commit_time_ms
                )

    async def get_product(self, plu: int) -> Optional[Dict[str, Any]]:
        async with _translate_errors():
            return await self.collection.find_one({"PLU": plu})

    async def reset(self, documents: List[Dict[str, Any]]) -> None:
        """Drop every product and index, rebuild the PLU index and insert ``documents``"""
        async with _translate_errors():
            await self.collection.delete_many({})
            await self.collection.drop_indexes()
            # Unique index on the business key
            await self.collection.create_index([("PLU", ASCENDING)], unique=True)
            if documents:
                await self.collection.insert_many(documents)
