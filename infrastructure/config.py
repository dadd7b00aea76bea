from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing or malformed."""


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def _env_optional(name: str) -> Optional[str]:
    return _env(name) or None


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


@dataclass
class Settings:
    discord_token: str
    db_path: str = "tipbot.db"
    database_url: Optional[str] = None
    nxt_server_url: str = "http://localhost:7876/nxt"
    nxt_timeout: float = 30
    bot_name: str = "tipbot"
    transferables_path: Optional[str] = None
    log_level: str = "INFO"

    @property
    def uses_postgres(self) -> bool:
        return bool(self.database_url)


def load_settings() -> Settings:
    """
    Build `Settings` from the environment.

    Call `load_dotenv()` first if settings should also come from a `.env` file.
    """

    discord_token = _env("DISCORD_TOKEN")
    if not discord_token:
        raise ConfigurationError("DISCORD_TOKEN environment variable is not set.")

    return Settings(
        discord_token=discord_token,
        db_path=_env("DB_PATH", "tipbot.db"),
        database_url=_env_optional("DATABASE_URL"),
        nxt_server_url=_env("NXT_SERVER_URL", "http://localhost:7876/nxt"),
        nxt_timeout=_env_float("NXT_TIMEOUT", 30),
        bot_name=_env("BOT_NAME", "tipbot"),
        transferables_path=_env_optional("TRANSFERABLES_PATH"),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
