import os
from pathlib import Path

from dotenv import load_dotenv

from .schema import validate_threshold

DEFAULT_THRESHOLD = 70
DEFAULT_DB_PATH = Path("data/malls.db")


def load_env() -> None:
    """Load .env from the working directory if present. Existing env vars win."""
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def get_threshold() -> int:
    """
    Read MATCH_THRESHOLD (default 70).

    Raises:
        ValueError: If the value is not an integer in 0..100
    """
    raw = os.getenv("MATCH_THRESHOLD", "").strip()
    if not raw:
        return DEFAULT_THRESHOLD
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"MATCH_THRESHOLD must be an integer, got {raw!r}")
    return validate_threshold(value)


def get_db_path() -> Path:
    return Path(os.getenv("MALLMATCH_DB") or DEFAULT_DB_PATH)


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()
