from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List


class Settings(BaseSettings):
    app_name: str = "PDF Ask API"
    environment: str = Field(default="development")

    OPENAI_API_KEY: str = Field(default="")

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # CORS
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Slot storage
    DATA_DIR: str = "data"
    DEFAULT_SLOT: str = "default"
    DOCUMENT_FILENAME: str = "document.pdf"
    TEXT_FILENAME: str = "raw.txt"

    # Extraction is awaited before /upload responds; False schedules it
    # as a background task and clients poll /status.
    AWAIT_EXTRACTION: bool = True

    # OpenAI Settings
    CHAT_MODEL: str = "gpt-4"

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }


settings = Settings()
