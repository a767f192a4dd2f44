import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///companystore.db"
DEFAULT_TEST_DATABASE_URL = "sqlite:///companystore_test.db"


def load_env() -> None:
    """Load .env from the working directory if present.
    Variables already set in the environment win.
    """
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def get_database_url() -> str:
    """
    Resolve the database URL for the current environment.

    COMPANYSTORE_ENV=test selects COMPANYSTORE_TEST_DATABASE_URL so the
    suite never touches the working database.
    """
    if os.getenv("COMPANYSTORE_ENV", "").lower() == "test":
        return os.getenv("COMPANYSTORE_TEST_DATABASE_URL", DEFAULT_TEST_DATABASE_URL)
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def get_log_settings() -> Dict[str, Any]:
    log_dir: Optional[str] = os.getenv("COMPANYSTORE_LOG_DIR")
    return {
        "level": os.getenv("COMPANYSTORE_LOG_LEVEL", "INFO"),
        "log_dir": Path(log_dir) if log_dir else None,
        "enable_file": bool(log_dir),
    }
