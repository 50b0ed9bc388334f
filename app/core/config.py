from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from dotenv import load_dotenv


CONFIG_DIR = Path(__file__).resolve().parent
# .env lives in the project root (two levels up from app/core)
PROJECT_ROOT = CONFIG_DIR.parent.parent
ENV_FILE_PATH = PROJECT_ROOT / '.env'

load_dotenv(ENV_FILE_PATH)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH),
        env_file_encoding='utf-8',
        extra='ignore'
    )

    APP_NAME: str = "PrepWise Interview API"
    DEBUG_MODE: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_TO_FILE: bool = True
    CLEAR_LOG_ON_STARTUP: bool = False

    CORS_ORIGINS: List[str] = ["*"]

    # Gemini
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash-001"

    # Firebase / Firestore
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_CLIENT_EMAIL: str = ""
    FIREBASE_PRIVATE_KEY: str = ""
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None
    INTERVIEWS_COLLECTION: str = "interviews"

    # Echo the request body / raw model text back in error responses
    EXPOSE_DIAGNOSTICS: bool = True

    @property
    def firebase_private_key(self) -> str:
        """Private key with escaped newlines restored (env vars usually carry it on one line)."""
        return self.FIREBASE_PRIVATE_KEY.replace("\\n", "\n")

    @property
    def has_inline_firebase_credentials(self) -> bool:
        return bool(self.FIREBASE_PROJECT_ID and self.FIREBASE_CLIENT_EMAIL and self.FIREBASE_PRIVATE_KEY)


settings = Settings()
