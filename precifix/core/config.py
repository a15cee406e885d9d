"""
Precifix Server - Configuration
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional
import secrets
from pathlib import Path
from dotenv import load_dotenv

# Carrega .env da raiz do projeto (sobrescreve variaveis do sistema)
env_file = Path(__file__).parent.parent.parent / ".env"
if env_file.exists():
    load_dotenv(env_file, override=True)


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Precifix Server"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Database (aceita DATABASE_URL ou PRECIFIX_DATABASE_URL)
    DATABASE_URL: Optional[str] = None
    PRECIFIX_DATABASE_URL: str = "sqlite+aiosqlite:///./precifix.db"

    @property
    def db_url(self) -> str:
        """Returns DATABASE_URL if set, otherwise PRECIFIX_DATABASE_URL"""
        return self.DATABASE_URL or self.PRECIFIX_DATABASE_URL

    # Security
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "10/minute"

    # CORS
    CORS_ORIGINS: list = ["*"]

    # Consultas externas
    HTTP_TIMEOUT: float = 10.0
    VIACEP_URL: str = "https://viacep.com.br/ws"
    FIPE_URL: str = "https://parallelum.com.br/fipe/api/v1"

    # Orcamentos
    QUOTE_VALIDITY_DAYS: int = 7
    DEFAULT_PROFIT_MARGIN: float = 40.0

    class Config:
        extra = "ignore"
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
