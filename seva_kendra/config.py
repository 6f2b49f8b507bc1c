# seva_kendra/config.py

import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

DEFAULT_SECRET_KEY = "change-me"


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    project_name: str = os.getenv("PROJECT_NAME", "Seva Kendra API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    # sql | memory
    store_backend: str = os.getenv("STORE_BACKEND", "sql")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./seva_kendra.db")

    secret_key: str = os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY)
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    # 30 days
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "43200"))

    cors_origins: str = os.getenv("CORS_ORIGINS", "*")
    seed_services: bool = _flag("SEED_SERVICES", "true")

    # Request reads and status updates are public unless these are switched on
    requests_read_requires_auth: bool = _flag("REQUESTS_READ_REQUIRES_AUTH")
    requests_status_requires_auth: bool = _flag("REQUESTS_STATUS_REQUIRES_AUTH")

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
