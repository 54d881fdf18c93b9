from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorClient

from grocery.core.config import Settings, get_settings
from grocery.db.store import MongoCatalogStore

def get_client(request: Request, settings: Settings = Depends(get_settings)) -> AsyncIOMotorClient:
    # One connection pool per application, opened on first use
    client = getattr(request.app.state, "mongo_client", None)
    if client is None:
        client = AsyncIOMotorClient(settings.MONGO_URL)
        request.app.state.mongo_client = client
    return client

def get_store(
    client: AsyncIOMotorClient = Depends(get_client),
    settings: Settings = Depends(get_settings),
) -> MongoCatalogStore:
    return MongoCatalogStore(client, settings)

def close_mongo_connection(app):
    client = getattr(app.state, "mongo_client", None)
    if client is not None:
        client.close()
        app.state.mongo_client = None
