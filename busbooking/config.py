from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Database
    PGHOST: str = "localhost"
    PGDATABASE: str = "busbooking"
    PGUSER: str = "postgres"
    PGPASSWORD: str = ""
    PGSSLMODE: str = "prefer"
    DATABASE_URL: Optional[str] = None  # overrides the PG* settings when set

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Application
    PROJECT_NAME: str = "Bus Booking Back-Office"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Scheduling
    TIMEZONE: str = "Asia/Damascus"
    DEFAULT_CURRENCY: str = "SYP"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.PGUSER}:{self.PGPASSWORD}@{self.PGHOST}/{self.PGDATABASE}?sslmode={self.PGSSLMODE}"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
