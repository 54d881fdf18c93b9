from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load the .env file from the directory the service is started in
load_dotenv()

class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True, extra="ignore")

    # MongoDB
    MONGO_URL: str
    DB_NAME: str = "MongoOnlineGrocery"
    COLLECTION_NAME: str = "inventory"

    # Ratings
    # Rating an unknown PLU creates a bare product document when enabled
    UPSERT_UNKNOWN_PRODUCTS: bool = True
    MAX_COMMIT_TIME_MS: Optional[int] = None

    # Logging
    LOG_LEVEL: str = "INFO"

@lru_cache
def get_settings() -> Settings:
    return Settings()
