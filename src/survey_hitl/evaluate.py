from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable
from rapidfuzz import fuzz
from .record import ExtractionRecord
from .validate import digits_only

EXACT_FIELDS = ("phone", "email", "postal_code")
NUMERIC_FIELDS = ("age", "household_size", "sleeping_capacity")
SET_FIELDS = ("desired_vehicle_types", "acquisition_channels")

def _norm(s: str) -> str:
    return "".join(ch.lower() for ch in s.strip() if ch.isalnum())

def exact_match(pred: str, gt: str) -> bool:
    return _norm(pred) == _norm(gt)

def fuzzy_score(pred: str, gt: str) -> float:
    # names and addresses carry no word boundaries, so compare whole strings
    return fuzz.ratio(_norm(pred), _norm(gt)) / 100.0

def number_match(pred: Any, gt: Any) -> bool:
    p, g = digits_only(str(pred)), digits_only(str(gt))
    return bool(p) and p == g

def set_score(pred: Iterable[str], gt: Iterable[str]) -> float:
    p, g = set(pred), set(gt)
    if not p and not g:
        return 1.0
    return len(p & g) / len(p | g)

@dataclass
class EvalRow:
    field: str
    ok: bool
    score: float

def evaluate_one(record: ExtractionRecord, gt_fields: dict[str, Any]) -> list[EvalRow]:
    rows: list[EvalRow] = []
    for field, gt in gt_fields.items():
        if gt is None or gt == "" or gt == []:
            continue
        pred = record.get(field)
        if pred is None:
            rows.append(EvalRow(field, False, 0.0))
            continue

        if field in EXACT_FIELDS:
            ok = exact_match(str(pred), str(gt))
            rows.append(EvalRow(field, ok, 1.0 if ok else 0.0))
        elif field in NUMERIC_FIELDS:
            ok = number_match(pred, gt)
            rows.append(EvalRow(field, ok, 1.0 if ok else 0.0))
        elif field == "has_pets":
            truth = gt if isinstance(gt, bool) else str(gt).strip().lower() in ("true", "1", "yes", "有", "あり")
            ok = bool(pred) == truth
            rows.append(EvalRow(field, ok, 1.0 if ok else 0.0))
        elif field in SET_FIELDS:
            gt_items = [gt] if isinstance(gt, str) else list(gt)
            score = set_score(pred, gt_items)
            rows.append(EvalRow(field, score == 1.0, score))
        else:
            score = fuzzy_score(str(pred), str(gt))
            ok = score >= 0.85
            rows.append(EvalRow(field, ok, score))
    return rows

@dataclass
class EvalSummary:
    rows: int
    ok: int
    per_field: dict[str, float]  # field -> accuracy

    @property
    def accuracy(self) -> float:
        return self.ok / self.rows if self.rows else 0.0

def summarize(rows: list[EvalRow]) -> EvalSummary:
    totals: Counter[str] = Counter()
    oks: Counter[str] = Counter()
    for r in rows:
        totals[r.field] += 1
        if r.ok:
            oks[r.field] += 1
    per_field = {f: oks[f] / n for f, n in sorted(totals.items())}
    return EvalSummary(rows=len(rows), ok=sum(oks.values()), per_field=per_field)

def rule_hit_rates(records: Iterable[ExtractionRecord]) -> dict[str, dict[str, float]]:
    """
    field -> {rule: share of surveys where that rule produced the value}.
    Rules that never fire are candidates for removal.
    """
    hits: dict[str, Counter[str]] = {}
    n = 0
    for rec in records:
        n += 1
        for field, rule in rec.provenance.items():
            hits.setdefault(field, Counter())[rule] += 1
    if n == 0:
        return {}
    return {f: {rule: c / n for rule, c in cnt.most_common()} for f, cnt in sorted(hits.items())}
