import asyncio
import copy
import os

import pytest
from bson import ObjectId

from grocery.core.errors import StoreError

os.environ.setdefault("MONGO_URL", "mongodb://localhost:27017")


class InMemoryUnitOfWork:
    def __init__(self, store):
        self.store = store

    async def _step(self, name):
        # Yield so concurrent transactions get a chance to interleave
        await asyncio.sleep(0)
        if self.store.fail_on == name:
            raise StoreError(f"simulated {name} failure")

    async def find_product(self, plu):
        await self._step("find_product")
        return self.store.find(plu)

    async def push_rating(self, plu, rating, upsert=False):
        await self._step("push_rating")
        document = self.store.find(plu)
        if document is None:
            if not upsert:
                return
            document = {"_id": ObjectId(), "PLU": plu, "Ratings": []}
            self.store.documents.append(document)
        document.setdefault("Ratings", []).append({"Rating": rating})

    async def aggregate(self, pipeline):
        await self._step("aggregate")
        if self.store.empty_aggregate:
            return []
        return pipeline.run(copy.deepcopy(self.store.documents))

    async def set_average(self, plu, average):
        await self._step("set_average")
        document = self.store.find(plu)
        if document is not None:
            document["AverageRating"] = average


class InMemoryCatalogStore:
    """Catalog store double; transactions are serialized and roll back on error"""

    def __init__(self, documents=None):
        self.documents = copy.deepcopy(documents or [])
        self.fail_on = None
        self.empty_aggregate = False
        self.transactions = 0
        self._lock = None
        self._loop = None

    def find(self, plu):
        for document in self.documents:
            if document.get("PLU") == plu:
                return document
        return None

    async def run_in_transaction(self, work):
        loop = asyncio.get_running_loop()
        if self._loop is not loop:
            self._lock = asyncio.Lock()
            self._loop = loop
        async with self._lock:
            snapshot = copy.deepcopy(self.documents)
            self.transactions += 1
            try:
                return await work(InMemoryUnitOfWork(self))
            except BaseException:
                self.documents = snapshot
                raise

    async def get_product(self, plu):
        if self.fail_on == "get_product":
            raise StoreError("simulated get_product failure")
        return copy.deepcopy(self.find(plu))

    async def reset(self, documents):
        if self.fail_on == "reset":
            raise StoreError("simulated reset failure")
        self.documents = []
        for document in documents:
            if self.find(document["PLU"]) is not None:
                raise StoreError(f"E11000 duplicate key error PLU {document['PLU']}")
            self.documents.append(dict(copy.deepcopy(document), _id=ObjectId()))


def seeded_documents():
    return [
        {"PLU": 4011, "Description": "Bananas", "Ratings": [{"Rating": 3}]},
        {"PLU": 3283, "Description": "Apples", "Ratings": [{"Rating": 3}]},
    ]


@pytest.fixture
def store():
    return InMemoryCatalogStore(seeded_documents())


@pytest.fixture
def empty_store():
    return InMemoryCatalogStore()
