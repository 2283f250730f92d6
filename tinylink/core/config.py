from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "TinyLink"
    LOG_LEVEL: str = "INFO"

    # Record store: "dynamodb" or "sql"
    STORE_BACKEND: str = "dynamodb"

    AWS_REGION: str = "us-east-1"
    DYNAMO_TABLE: str = "tinylink-links"
    DYNAMO_ENDPOINT_URL: Optional[str] = None
    DYNAMO_CREATE_TABLE: bool = False

    DATABASE_URL: str = "sqlite:///./tinylink.db"

    BASE_URL: str = "http://localhost:8080"
    SHORT_CODE_LENGTH: int = Field(6, ge=6, le=8)
    ALLOWED_URL_SCHEMES: List[str] = ["http", "https"]

    class Config:
        env_file = ".env"

settings = Settings()
