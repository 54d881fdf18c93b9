from fastapi import FastAPI, APIRouter
from starlette.middleware.cors import CORSMiddleware
import logging

from grocery.core.config import get_settings
from grocery.db.session import close_mongo_connection
from grocery.routers import catalog, ratings

# Create the main app without a prefix
app = FastAPI(title="MongoOnlineGrocery")

# Create a router with the /api prefix
api_router = APIRouter(prefix="/api")
api_router.include_router(catalog.router)
api_router.include_router(ratings.router)

# Include the router in the main app
app.include_router(api_router)

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

@app.on_event("startup")
async def configure_logging():
    logging.getLogger().setLevel(get_settings().LOG_LEVEL.upper())

@app.on_event("shutdown")
async def shutdown_db_client():
    logger.info("Closing MongoDB connection")
    close_mongo_connection(app)
