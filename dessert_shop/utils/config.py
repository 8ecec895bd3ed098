"""Load and validate environment variables. Uses python-dotenv.

Callers should use the accessor functions below rather than reading `os.environ`
directly, to keep environment handling consistent. Every key has a default, so
the shop runs without any `.env` file.
"""

from pathlib import Path

from dotenv import load_dotenv
import os

DEFAULT_PRODUCTS_URL = "https://fakestoreapi.com/products"


def _project_root() -> Path:
    """Resolve project root (the directory holding app.py)."""
    return Path(__file__).resolve().parent.parent.parent


def load_config() -> None:
    """
    Load .env from project root. Idempotent; safe to call multiple times.
    Existing environment variables win over values from the file.
    """
    root = _project_root()
    env_path = root / ".env"
    load_dotenv(env_path, override=False)


def get_optional(key: str, default: str = "") -> str:
    """Get optional env var; return default if missing or empty."""
    load_config()
    val = os.getenv(key, "").strip()
    return val if val else default


def get_optional_int(key: str, default: int) -> int:
    """Get optional env var as int; return default if missing or invalid."""
    load_config()
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_optional_float(key: str, default: float) -> float:
    """Get optional env var as float; return default if missing or invalid."""
    load_config()
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# --- Public config accessors ---

def products_url() -> str:
    """Optional: product listing endpoint. Default fakestoreapi.com."""
    return get_optional("PRODUCTS_URL", DEFAULT_PRODUCTS_URL)


def catalog_limit() -> int:
    """Optional: how many products the catalog keeps. Default 6."""
    value = get_optional_int("CATALOG_LIMIT", 6)
    return value if value > 0 else 6


def catalog_source() -> str:
    """Optional: "api" (remote products) or "static" (bundled desserts). Default api."""
    value = get_optional("CATALOG_SOURCE", "api").lower()
    return value if value in ("api", "static") else "api"


def removal_delay_seconds() -> float:
    """Optional: delay before a removed cart line actually leaves the cart. Default 0.35."""
    value = get_optional_float("REMOVAL_DELAY_SECONDS", 0.35)
    return max(value, 0.0)


def log_level() -> str:
    """Optional: log level name. Default INFO."""
    return get_optional("LOG_LEVEL", "INFO").upper()


def project_root() -> Path:
    """Project root directory."""
    return _project_root()
