"""
Runtime settings read from the environment (and a .env file, once the
entry point has called load_dotenv()).
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .references import REFERENCE_STYLES, make_reference
from .utils.catalog import DEFAULT_REFERENCE, DEFAULT_SELECTION
from .utils.types import Reference


DEFAULT_API_URL = "https://parabible.com/api/v2/text"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    reference_style: str = "plus"
    timeout: float = DEFAULT_TIMEOUT
    translations: Tuple[str, ...] = DEFAULT_SELECTION
    reference: Reference = DEFAULT_REFERENCE
    log_dir: Optional[str] = None


def _split_list(value: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        env: Mapping to read instead of os.environ

    Returns:
        Settings with defaults for anything unset

    Raises:
        ValueError: A variable is set to an unusable value
    """
    if env is None:
        env = os.environ

    style = env.get("PARABIBLE_REFERENCE_STYLE", "plus").strip().lower()
    if style not in REFERENCE_STYLES:
        raise ValueError(f"PARABIBLE_REFERENCE_STYLE must be one of {', '.join(REFERENCE_STYLES)}, got {style!r}")

    raw_timeout = env.get("PARABIBLE_TIMEOUT")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    except ValueError:
        raise ValueError(f"PARABIBLE_TIMEOUT must be a number, got {raw_timeout!r}")
    if timeout <= 0:
        raise ValueError("PARABIBLE_TIMEOUT must be positive")

    translations = _split_list(env.get("PARABIBLE_TRANSLATIONS", "")) or DEFAULT_SELECTION

    book = env.get("PARABIBLE_BOOK") or DEFAULT_REFERENCE.book
    raw_chapter = env.get("PARABIBLE_CHAPTER")
    try:
        chapter = int(raw_chapter) if raw_chapter else DEFAULT_REFERENCE.chapter
    except ValueError:
        raise ValueError(f"PARABIBLE_CHAPTER must be an integer, got {raw_chapter!r}")
    reference = make_reference(book, chapter)

    return Settings(
        api_url=env.get("PARABIBLE_API_URL") or DEFAULT_API_URL,
        reference_style=style,
        timeout=timeout,
        translations=translations,
        reference=reference,
        log_dir=env.get("PARABIBLE_LOG_DIR") or None,
    )
