# settings.py  (Pydantic v2)
from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # env
    ENV: str = Field(default="dev")
    DEBUG: bool = True

    # DB
    DATABASE_URL: str = "sqlite:///./qanda.db"

    # cors
    FRONTEND_URL: Optional[str] = None

    # auth
    SECRET_KEY: str = "fallback-secret"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # rendering
    TEMPLATES_DIR: str = str(Path(__file__).with_name("templates"))

    # pydantic-settings config
    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).with_name(".env")),
        case_sensitive=True,
        extra="ignore",               # <-- tolerate unknown env vars
    )

settings = Settings()
