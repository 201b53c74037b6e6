from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENV: str = "dev"                # "dev" / "staging" / "prod"
    SERVICE_NAME: str = "nexora-backend"
    ENABLE_ADMIN: bool = True
    ADMIN_ROLE: str = "admin"
    SERVICE_ROLE: str = "service"   # order/payment/review/kyc callers

    class Config:
        env_file = ".env"
        extra="ignore"

admin_config = Settings()
