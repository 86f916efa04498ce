"""Application configuration loaded from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings

PACKAGE_DIR = Path(__file__).parent


class Settings(BaseSettings):
    # App
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CLIENT_URL: str = "http://localhost:5173"
    HOST: str = "127.0.0.1"
    PORT: int = 3001

    # Sessions (signed cookie)
    SESSION_SECRET: str = "openstory-dev-secret-change-in-production"
    SESSION_MAX_AGE: int = 30 * 24 * 60 * 60  # 30 days

    # Chat history storage: "file", "redis" or "sql"
    STORAGE_BACKEND: str = "file"
    USER_DATA_DIR: Path = Path("user_data")
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_KEY_PREFIX: str = "openstory"
    DATABASE_URL: str = "sqlite+aiosqlite:///./user_data/openstory.db"

    # Game catalog
    GAMES_FILE: Path = PACKAGE_DIR / "data" / "games.yaml"

    # LLM
    DASHSCOPE_API_KEY: str = ""
    LLM_MODEL: str = "qwen-max"
    LLM_TEMPERATURE: float = 0.8
    LLM_MAX_TOKENS: int = 500

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
