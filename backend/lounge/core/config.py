from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Lounge Membership"
    DATABASE_URL: str = "sqlite+aiosqlite:///./lounge.db"
    STORAGE_KEY: str = "airport_lounge_customers"
    # Prefix for QR verification links; empty keeps them relative
    PUBLIC_BASE_URL: str = ""
    API_V1_PREFIX: str = "/api/v1"
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    EXPIRING_SOON_DAYS: int = 30
    MEMBERSHIP_NUMBER_ATTEMPTS: int = 50
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"


settings = Settings()
