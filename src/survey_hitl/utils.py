from __future__ import annotations
import logging
import re
from .config import load_settings

def configure_logging(level: str | None = None) -> None:
    """Set the package log level; without an argument it comes from LOG_LEVEL."""
    if level is None:
        level = load_settings().log_level
    lvl = getattr(logging, level.upper(), logging.INFO)
    logging.getLogger("survey_hitl").setLevel(lvl)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

def strip_all_whitespace(s: str) -> str:
    return re.sub(r"\s+", "", s)

def extract_lines(text: str) -> list[str]:
    raw = text.replace("\r\n", "\n").replace("\r", "\n")
    return [ln.strip() for ln in raw.split("\n") if ln.strip()]

def contains_any(s: str, words: tuple[str, ...] | list[str]) -> bool:
    return any(w in s for w in words)

def clamp(x: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, x))

def is_empty(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    return False
