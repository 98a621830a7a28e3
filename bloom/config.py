"""
Runtime configuration for the Bloom client core.

Values come from the environment, optionally seeded from a `.env` file at the
project root:

    BLOOM_API_URL      base URL of the API, including /api
    BLOOM_API_TIMEOUT  request timeout in seconds
    BLOOM_API_TOKEN    bearer token for progress/stats calls
    BLOOM_LOG_LEVEL    log level for scripts
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_API_URL = "http://localhost:3000/api"
DEFAULT_TIMEOUT = 30


@dataclass
class Settings:
    api_url: str = DEFAULT_API_URL
    api_timeout: int = DEFAULT_TIMEOUT
    api_token: Optional[str] = None
    log_level: str = "INFO"


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_file: .env file to read first (default: PROJECT_ROOT/.env).
            Variables already set in the environment win.

    Raises:
        ValueError: If BLOOM_API_TIMEOUT is not an integer
    """
    load_dotenv(env_file or PROJECT_ROOT / ".env")

    return Settings(
        api_url=os.environ.get("BLOOM_API_URL", DEFAULT_API_URL),
        api_timeout=int(os.environ.get("BLOOM_API_TIMEOUT", DEFAULT_TIMEOUT)),
        api_token=os.environ.get("BLOOM_API_TOKEN") or None,
        log_level=os.environ.get("BLOOM_LOG_LEVEL", "INFO").upper(),
    )
