from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()  # loads .env from current working directory


class Settings(BaseSettings):
    """Attempt service settings, read from TRACE_* environment variables."""

    DB_PATH: str = "attempts.db"
    ALLOWED_ORIGINS: list[str] = ["*"]
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TRACE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
