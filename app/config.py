import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .logger import get_logger

logger = get_logger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_PORT = 5000


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    model_name: str = DEFAULT_MODEL
    temperature: Optional[float] = None
    system_prompt: Optional[str] = None
    port: int = DEFAULT_PORT
    environment: str = "development"
    static_dir: Path = PROJECT_ROOT / "client" / "build"
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def _clean_key(raw: Optional[str]) -> Optional[str]:
    # keys pasted into .env often keep their quotes
    if raw is None:
        return None
    key = raw.replace('"', "").replace("'", "").strip()
    return key or None


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, expected a number", name, raw)
        return None


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, using %d", name, raw, default)
        return default


def load_settings() -> Settings:
    """Read the process configuration once; values from ``.env`` never override real env vars."""
    load_dotenv(dotenv_path=PROJECT_ROOT / ".env")
    return Settings(
        api_key=_clean_key(os.getenv("GEMINI_API_KEY")),
        model_name=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
        temperature=_optional_float("GEMINI_TEMPERATURE"),
        system_prompt=os.getenv("GEMINI_SYSTEM_PROMPT") or None,
        port=_int("PORT", DEFAULT_PORT),
        environment=os.getenv("APP_ENV", "development"),
        static_dir=Path(os.getenv("STATIC_DIR") or PROJECT_ROOT / "client" / "build"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
