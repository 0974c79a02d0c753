from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping
from .config import Settings, REQUIRED_FIELDS
from .record import ExtractionRecord
from .utils import is_empty

LOW_CONFIDENCE_WARNING = "一部の項目で読み取り精度が低い可能性があります"
MISSING_NAME_WARNING = "氏名が読み取れませんでした - 手動で入力してください"
MISSING_PHONE_WARNING = "電話番号が読み取れませんでした - 手動で入力してください"
MISSING_ADDRESS_WARNING = "住所情報が読み取れませんでした - 手動で入力してください"

@dataclass
class RoutingDecision:
    route_field: bool
    reasons: list[str]

def build_warnings(record: ExtractionRecord, confidence: int, settings: Settings) -> list[str]:
    warnings: list[str] = []
    if confidence < settings.low_confidence_threshold:
        warnings.append(LOW_CONFIDENCE_WARNING)
    if is_empty(record.name):
        warnings.append(MISSING_NAME_WARNING)
    if is_empty(record.phone):
        warnings.append(MISSING_PHONE_WARNING)
    # a postal code alone is enough to recover the address
    if is_empty(record.address) and is_empty(record.postal_code):
        warnings.append(MISSING_ADDRESS_WARNING)
    return warnings

def field_threshold(settings: Settings, field: str) -> int:
    if field == "phone":
        return settings.thr_phone
    if field == "email":
        return settings.thr_email
    if field == "postal_code":
        return settings.thr_postal_code
    if field in ("name", "name_kana"):
        return settings.thr_name
    return settings.thr_default

def route_field(
    settings: Settings, field: str, conf: int, missing: bool, rule_score: float | None = None
) -> RoutingDecision:
    reasons: list[str] = []
    if missing:
        if field in REQUIRED_FIELDS:
            reasons.append("missing_required_value")
        return RoutingDecision(route_field=bool(reasons), reasons=reasons)

    thr = field_threshold(settings, field)
    if conf < thr:
        reasons.append(f"below_threshold_{thr}")
    if rule_score is not None and rule_score < settings.min_rule_score:
        reasons.append("weak_rule_match")
    return RoutingDecision(route_field=bool(reasons), reasons=reasons)

def review_fields(
    settings: Settings,
    record: ExtractionRecord,
    field_conf: dict[str, int],
    rule_scores: Mapping[str, float] | None = None,
) -> dict[str, list[str]]:
    out: dict[str, list[str]] = {}
    rule_scores = rule_scores or {}
    for field in ExtractionRecord.field_names():
        missing = is_empty(record.get(field))
        decision = route_field(settings, field, field_conf.get(field, 0), missing, rule_scores.get(field))
        if decision.route_field:
            out[field] = decision.reasons
    return out
