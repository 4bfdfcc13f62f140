"""
Application settings

Values are read from the process environment (and a local .env file, if one
exists) when the module is imported.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _mongo_uri_from_env() -> Optional[str]:
    for name in ("MONGODB_URI", "MONGO_URI", "DATABASE_URL"):
        value = os.getenv(name)
        if value:
            return value
    return None


@dataclass
class Settings:
    """Settings for the record service, defaulted from the environment."""

    port: int = field(default_factory=lambda: int(os.getenv("PORT", "5000")))
    mongo_uri: Optional[str] = field(default_factory=_mongo_uri_from_env)
    database_name: Optional[str] = field(default_factory=lambda: os.getenv("DATABASE_NAME"))
    # How long a storage call waits for a reachable server before failing
    server_selection_timeout_ms: int = field(
        default_factory=lambda: int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))
    )
    app_env: str = field(default_factory=lambda: os.getenv("APP_ENV", "production"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    @property
    def is_production(self) -> bool:
        """Any APP_ENV other than "production" exposes error details."""
        return self.app_env.lower() == "production"


settings = Settings()
