from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # URL of the ShareIt server every request is forwarded to
    SHAREIT_SERVER_URL: str = "http://localhost:9090"
    SERVER_TIMEOUT_SECONDS: float = 10.0

    REDIS_URL: str = "redis://localhost:6379"

    # Requests per caller per window
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_TIMES: int = 30
    RATE_LIMIT_SECONDS: int = 60

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
