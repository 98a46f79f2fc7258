from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from flashdeck.storage import DEFAULT_STORAGE_KEY

DEFAULT_STORAGE_PATH = Path.home() / ".local" / "share" / "flashdeck" / "local_storage.json"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    storage_path: Path = DEFAULT_STORAGE_PATH
    storage_key: str = DEFAULT_STORAGE_KEY
    cards_path: Optional[Path] = None
    seed: Optional[int] = None
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from the environment (a local .env file is loaded first)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    storage_path = environ.get("FLASHCARDS_STORAGE_PATH")
    cards_path = environ.get("FLASHCARDS_CARDS_PATH")

    seed_raw = (environ.get("FLASHCARDS_SEED") or "").strip()
    try:
        seed = int(seed_raw) if seed_raw else None
    except ValueError:
        raise ValueError(f"FLASHCARDS_SEED must be an integer, got {seed_raw!r}")

    log_level = (environ.get("FLASHCARDS_LOG_LEVEL") or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"Unknown FLASHCARDS_LOG_LEVEL: {log_level!r}")

    return Settings(
        storage_path=Path(storage_path).expanduser() if storage_path else DEFAULT_STORAGE_PATH,
        storage_key=environ.get("FLASHCARDS_STORAGE_KEY") or DEFAULT_STORAGE_KEY,
        cards_path=Path(cards_path).expanduser() if cards_path else None,
        seed=seed,
        log_level=log_level,
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("flashdeck").setLevel(level)
