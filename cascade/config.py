import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

DEFAULT_IDENTITY_URL = "https://identitytoolkit.googleapis.com/v1"
DEFAULT_TOKEN_URL = "https://securetoken.googleapis.com/v1"
DEFAULT_SEED_PATH = Path(__file__).resolve().parent.parent / "data" / "seed.json"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConfigurationError(RuntimeError):
    pass


@dataclass(frozen=True)
class Settings:
    firebase_api_key: str = ""
    identity_base_url: str = DEFAULT_IDENTITY_URL
    token_base_url: str = DEFAULT_TOKEN_URL
    request_timeout: float = 20.0
    assistant_delay: float = 1.5
    seed_path: str = str(DEFAULT_SEED_PATH)
    log_level: str = "INFO"

    def require_api_key(self) -> str:
        if not self.firebase_api_key:
            raise ConfigurationError(
                "FIREBASE_WEB_API_KEY missing. Set it in environment or st.secrets."
            )
        return self.firebase_api_key


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    secrets: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Build settings from the environment (after reading .env) with `secrets` as fallback for the API key."""
    if env is None:
        load_dotenv(find_dotenv(usecwd=True))
        env = os.environ
    secrets = secrets or {}

    api_key = env.get("FIREBASE_WEB_API_KEY", "").strip() or str(secrets.get("FIREBASE_WEB_API_KEY", "")).strip()

    return Settings(
        firebase_api_key=api_key,
        identity_base_url=env.get("CASCADE_IDENTITY_URL", "").strip().rstrip("/") or DEFAULT_IDENTITY_URL,
        token_base_url=env.get("CASCADE_TOKEN_URL", "").strip().rstrip("/") or DEFAULT_TOKEN_URL,
        request_timeout=_float(env, "CASCADE_HTTP_TIMEOUT", 20.0),
        assistant_delay=_float(env, "CASCADE_ASSISTANT_DELAY", 1.5),
        seed_path=env.get("CASCADE_SEED_PATH", "").strip() or str(DEFAULT_SEED_PATH),
        log_level=env.get("CASCADE_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
