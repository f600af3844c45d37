import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()

class ScoringSettings(BaseModel):
    # Base value used by the item calculator when no value information is given
    item_fallback_value: float = 1000.0
    # Allowed drift when checking that template KPI weights add up to 100
    template_weight_tolerance: float = 0.1

class Config(BaseModel):
    app_name: str = "Staff Appraisal Service"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    version: str = "1.0.0"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./appraisal.db")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    request_id_header: str = "X-Request-ID"

    # Acting user headers (no authentication layer)
    user_id_header: str = "X-User-Id"
    user_role_header: str = "X-User-Role"

    # Seed the default template and directory roster on startup
    seed_defaults: bool = os.getenv("SEED_DEFAULTS", "true").lower() == "true"

    scoring: ScoringSettings = ScoringSettings()

    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:3000,http://localhost:5173,"
                "http://127.0.0.1:3000,http://127.0.0.1:5173",
            ).split(",")
            if o.strip()
        ]
    )

settings = Config()

_logger = logging.getLogger(__name__)
if settings.environment == "production" and settings.database_url.startswith("sqlite"):
    _logger.warning("⚠ Running production with a SQLite database file.")
