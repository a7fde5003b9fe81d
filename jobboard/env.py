"""
Environment and settings loading.

Values come from the process environment, optionally seeded from a
.env file in the working directory.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def load_env(env_path: Optional[Path] = None) -> bool:
    """Load .env from project root if present.

    Existing environment variables win over values in the file.
    Returns True when a file was loaded.
    """
    env_path = env_path or Path.cwd() / ".env"
    if not env_path.exists():
        return False
    return load_dotenv(dotenv_path=env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    database_url: str = field(
        default_factory=lambda: os.getenv("JOBBOARD_DATABASE_URL", "sqlite:///data/jobboard.db")
    )
    db_timeout: float = field(
        default_factory=lambda: float(os.getenv("JOBBOARD_DB_TIMEOUT", "30"))
    )
    db_connect_retries: int = field(
        default_factory=lambda: int(os.getenv("JOBBOARD_DB_CONNECT_RETRIES", "3"))
    )

    # HTTP server
    host: str = field(default_factory=lambda: os.getenv("JOBBOARD_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("JOBBOARD_PORT", "8080")))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("JOBBOARD_LOG_LEVEL", "INFO"))
    log_dir: Path = field(default_factory=lambda: Path(os.getenv("JOBBOARD_LOG_DIR", "logs")))
    log_to_file: bool = field(default_factory=lambda: _env_bool("JOBBOARD_LOG_TO_FILE", "true"))
