from __future__ import annotations
from dataclasses import dataclass
import os

TARGET_FIELDS = [
    "name",
    "name_kana",
    "phone",
    "email",
    "postal_code",
    "address",
    "age",
    "occupation",
    "household_size",
    "sleeping_capacity",
    "has_pets",
    "budget",
    "purchase_timing",
    "desired_vehicle_types",
    "acquisition_channels",
    "show_visit",
    "preferred_contact_day",
    "preferred_contact_time",
]

REQUIRED_FIELDS = ["name", "phone", "address"]
OPTIONAL_FIELDS = ["name_kana", "email", "age", "occupation"]

@dataclass(frozen=True)
class Settings:
    vocabulary_path: str | None = None

    # Postal lookup
    postal_lookup_enabled: bool = True
    postal_api_url: str = "https://zipcloud.ibsnet.co.jp/api/search"
    postal_timeout_s: int = 10
    postal_max_retries: int = 2

    max_workers: int = 4
    log_level: str = "INFO"

    # Completeness scoring
    baseline_score: int = 100
    required_field_penalty: int = 15
    optional_field_penalty: int = 5
    min_fill_rate: float = 0.5
    low_fill_penalty: int = 20

    # Blended confidence
    engine_weight: float = 0.6
    completeness_weight: float = 0.4
    low_confidence_threshold: int = 70

    # Review thresholds (per-field confidence, 0..100)
    thr_phone: int = 80
    thr_email: int = 80
    thr_postal_code: int = 80
    thr_name: int = 70
    thr_default: int = 60
    # fields filled by a rule scoring below this go to review
    min_rule_score: float = 0.5

def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None

def _env_float(key: str, default: float) -> float:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None

def load_settings() -> Settings:
    engine_weight = _env_float("ENGINE_WEIGHT", 0.6)
    completeness_weight = _env_float("COMPLETENESS_WEIGHT", 0.4)
    if engine_weight < 0 or completeness_weight < 0:
        raise ValueError("ENGINE_WEIGHT and COMPLETENESS_WEIGHT must be non-negative.")

    max_workers = _env_int("MAX_WORKERS", 4)
    if max_workers < 1:
        raise ValueError("MAX_WORKERS must be at least 1.")

    return Settings(
        vocabulary_path=os.getenv("SURVEY_VOCAB_PATH", "").strip() or None,
        postal_lookup_enabled=os.getenv("POSTAL_LOOKUP", "1").strip() == "1",
        postal_api_url=os.getenv("POSTAL_API_URL", "https://zipcloud.ibsnet.co.jp/api/search").strip(),
        postal_timeout_s=_env_int("POSTAL_TIMEOUT_S", 10),
        postal_max_retries=_env_int("POSTAL_MAX_RETRIES", 2),
        max_workers=max_workers,
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        engine_weight=engine_weight,
        completeness_weight=completeness_weight,
        low_confidence_threshold=_env_int("LOW_CONFIDENCE_THRESHOLD", 70),
        min_rule_score=_env_float("MIN_RULE_SCORE", 0.5),
    )
