import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]

# Load environment variables from .env file
load_dotenv(REPO_ROOT / ".env")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    openai_timeout_seconds: float = 60.0
    whatsapp_token: Optional[str] = None
    phone_number_id: Optional[str] = None
    graph_api_version: str = "v16.0"
    whatsapp_timeout_seconds: float = 15.0
    db_path: str = str(REPO_ROOT / "data" / "tarotbot.sqlite")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        db_path = os.getenv("TAROTBOT_DB_PATH") or cls.db_path
        if not os.path.isabs(db_path):
            db_path = str(REPO_ROOT / db_path)
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_model=os.getenv("OPENAI_MODEL") or cls.openai_model,
            openai_timeout_seconds=_float_env("OPENAI_TIMEOUT_SECONDS", cls.openai_timeout_seconds),
            whatsapp_token=os.getenv("WHATSAPP_TOKEN"),
            phone_number_id=os.getenv("PHONE_NUMBER_ID"),
            graph_api_version=os.getenv("GRAPH_API_VERSION") or cls.graph_api_version,
            whatsapp_timeout_seconds=_float_env("WHATSAPP_TIMEOUT_SECONDS", cls.whatsapp_timeout_seconds),
            db_path=db_path,
            log_level=(os.getenv("LOG_LEVEL") or cls.log_level).upper(),
        )
