from pydantic_settings import BaseSettings

class Settings(BaseSettings):

    DATABASE_URL: str = "sqlite+aiosqlite:///./var/nexora.db"
    DATABASE_ECHO: bool = False
    JWT_SECRET: str
    JWT_ALGO: str = "HS256"
    DEFAULT_COMMISSION_RATE: float = 10.0
    DEFAULT_COD_COMMISSION_RATE: float = 0.0
    AUTO_CREATE_TABLES: bool = True     # prod runs alembic instead
    ENABLE_METRICS: bool = False

    class Config:
        env_file = ".env"
        extra="ignore"

config_settings = Settings()
