from __future__ import annotations

from typing import Any, Sequence

from .config import OPTIONAL_FIELDS, REQUIRED_FIELDS, Settings
from .record import ExtractionRecord
from .utils import clamp, is_empty
from .validate import EMAIL_SHAPE_RE, PHONE_SHAPE_RE, POSTAL_SHAPE_RE


def completeness_score(record: ExtractionRecord, settings: Settings) -> int:
    """
    How much of the record a human will not have to type.

    Starts at the baseline; each missing required field and each missing
    optional field costs a fixed penalty, and a record with less than half of
    the tracked fields filled takes an extra flat penalty.
    """
    score = settings.baseline_score
    total = 0
    filled = 0

    for f in REQUIRED_FIELDS:
        total += 1
        if is_empty(record.get(f)):
            score -= settings.required_field_penalty
        else:
            filled += 1

    for f in OPTIONAL_FIELDS:
        total += 1
        if is_empty(record.get(f)):
            score -= settings.optional_field_penalty
        else:
            filled += 1

    if total and filled / total < settings.min_fill_rate:
        score -= settings.low_fill_penalty

    return int(clamp(score, 0, 100))


def blended_confidence(engine_confidences: Sequence[float], completeness: int, settings: Settings) -> int:
    # average engine confidence (0..100) blended with field completeness
    if not engine_confidences:
        return 0
    avg = sum(engine_confidences) / len(engine_confidences)
    conf = avg * settings.engine_weight + completeness * settings.completeness_weight
    return int(round(clamp(conf, 0, 100)))


def field_confidence(field: str, value: Any) -> int:
    """Per-field confidence for UI highlighting (not part of the overall score)."""
    if is_empty(value):
        return 0
    s = str(value)

    if field == "phone":
        return 95 if PHONE_SHAPE_RE.match(s) else 60
    if field == "email":
        return 90 if EMAIL_SHAPE_RE.match(s) else 50
    if field == "postal_code":
        return 95 if POSTAL_SHAPE_RE.match(s) else 60
    if field in ("name", "name_kana"):
        return 85 if len(s) >= 2 else 60
    return 75


def field_confidences(record: ExtractionRecord) -> dict[str, int]:
    return {f: field_confidence(f, v) for f, v in record.values().items()}
