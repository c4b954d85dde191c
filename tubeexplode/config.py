import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15
DEFAULT_MAX_RETRIES = 3
DEFAULT_COOKIES_FILE = "cookies.json"


def is_offline() -> bool:
    """Return True if running in offline/test mode to avoid external network calls.
    Triggers when:
    - TUBEEXPLODE_OFFLINE is set to a truthy value (1, true, yes, on)
    - PYTEST_CURRENT_TEST environment variable is present (pytest running)
    """
    if os.getenv("PYTEST_CURRENT_TEST") is not None:
        return True
    val = os.getenv("TUBEEXPLODE_OFFLINE", "").strip().lower()
    return val in {"1", "true", "yes", "on"}


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"config: {name}={raw!r} is not an integer; using {default}")
        return default
    if value < 0:
        logger.warning(f"config: {name}={value} is negative; using {default}")
        return default
    return value


@dataclass
class ClientConfig:
    """Runtime settings for the HTTP layer and cookie loading."""
    timeout: int = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    cookies_file: str = DEFAULT_COOKIES_FILE
    offline: bool = False

    @classmethod
    def from_env(cls) -> "ClientConfig":
        # Values from a local .env never override the real environment
        load_dotenv(override=False)
        return cls(
            timeout=_int_from_env("TUBEEXPLODE_TIMEOUT", DEFAULT_TIMEOUT),
            max_retries=_int_from_env("TUBEEXPLODE_MAX_RETRIES", DEFAULT_MAX_RETRIES),
            cookies_file=os.getenv("TUBEEXPLODE_COOKIES_FILE", DEFAULT_COOKIES_FILE),
            offline=is_offline(),
        )
