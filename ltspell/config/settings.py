"""
Environment settings loaded from .env file.
"""
import os

from dotenv import load_dotenv

load_dotenv()


class ConfigError(Exception):
    """Raised when an environment variable holds an unusable value."""


def _int_env(key: str, default: str) -> int:
    value = os.getenv(key, default)
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"Invalid integer value for {key}: {value}") from None


def _bool_env(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() in ("true", "1", "yes", "on")


# --- LanguageTool service ---
LANGUAGETOOL_URL: str = os.getenv("LANGUAGETOOL_URL", "https://api.languagetool.org")
LANGUAGETOOL_TIMEOUT_MS: int = _int_env("LANGUAGETOOL_TIMEOUT_MS", "5000")
LANGUAGETOOL_USER_AGENT: str = os.getenv("LANGUAGETOOL_USER_AGENT", "ltspell/0.1")

# --- Session ---
DEFAULT_LOCALE: str = os.getenv("DEFAULT_LOCALE", "ca-ES")
PLATFORM_API_LEVEL: int = _int_env("PLATFORM_API_LEVEL", "16")

# --- Logging ---
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# --- Privacy ---
LOG_FRAGMENT_TEXT: bool = _bool_env("LOG_FRAGMENT_TEXT", "true")
MAX_FRAGMENT_LOG_CHARS: int = _int_env("MAX_FRAGMENT_LOG_CHARS", "80")
