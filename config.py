import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # API settings
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "3001"))
    cors_origins: List[str] = field(
        default_factory=lambda: [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    )

    # Database settings
    db_file: str = os.getenv("LIBRARY_DB_FILE", "books.db")
    seed_demo_data: bool = _flag("SEED_DEMO_DATA", "True")

    # Client settings
    api_base_url: str = os.getenv("API_BASE_URL", f"http://127.0.0.1:{os.getenv('API_PORT', '3001')}")
    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "10"))

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Bücherverwaltung")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = _flag("DEBUG", "False")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Feature flags
    enable_search: bool = _flag("ENABLE_SEARCH", "True")


settings = Settings()
