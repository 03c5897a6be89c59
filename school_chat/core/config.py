from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "SchoolChat API"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Database
    MONGODB_URL: str = "mongodb://localhost:27017/"
    DATABASE_NAME: str = "school-chat"
    MONGODB_TIMEOUT_MS: int = 5000

    # CORS, e.g. CORS_ORIGINS=["http://localhost:3000"] in .env
    CORS_ORIGINS: List[str] = []

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
