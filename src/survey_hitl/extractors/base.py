from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Literal, Sequence

from ..normalize import normalize_ocr_text
from ..utils import extract_lines, is_empty
from ..vocabulary import Vocabulary

logger = logging.getLogger(__name__)

Method = Literal["rule", "lookup", "missing"]

# (value, evidence) or None when the rule did not match
Hit = tuple[Any, str]

@dataclass
class Extraction:
    field: str
    value: Any | None
    method: Method
    evidence: str | None
    raw_score: float  # 0..1 (rule prior)
    reasons: list[str]
    rule: str | None = None

    @classmethod
    def missing(cls, field_name: str) -> "Extraction":
        return cls(field_name, None, "missing", None, 0.0, [f"{field_name}_not_found"])

@dataclass(frozen=True)
class SurveyDocument:
    """One recognized survey page, normalized once and shared by every rule."""
    raw: str
    text: str
    lines: list[str]
    mark_text: str
    vocab: Vocabulary

    @classmethod
    def from_text(cls, raw: str, vocab: Vocabulary, mark_text: str | None = None) -> "SurveyDocument":
        text = normalize_ocr_text(raw or "")
        marks = normalize_ocr_text(mark_text) if mark_text else text
        return cls(raw=raw or "", text=text, lines=extract_lines(text), mark_text=marks, vocab=vocab)

@dataclass(frozen=True)
class Rule:
    name: str
    fn: Callable[[SurveyDocument], Hit | None]
    score: float = 0.7

def first_match(field_name: str, rules: Sequence[Rule], doc: SurveyDocument) -> Extraction:
    """
    Try rules in order; the first one returning a non-empty value wins.
    A rule that trips over malformed input counts as a miss.
    """
    for rule in rules:
        try:
            hit = rule.fn(doc)
        except (ValueError, IndexError) as e:
            logger.debug(
                "field=%s rule=%s outcome=error (%s)", field_name, rule.name, e,
                extra={"field": field_name, "rule": rule.name, "outcome": "error"},
            )
            continue
        if hit is None or is_empty(hit[0]):
            logger.debug(
                "field=%s rule=%s outcome=miss", field_name, rule.name,
                extra={"field": field_name, "rule": rule.name, "outcome": "miss"},
            )
            continue
        value, evidence = hit
        logger.debug(
            "field=%s rule=%s outcome=hit value=%r", field_name, rule.name, value,
            extra={"field": field_name, "rule": rule.name, "outcome": "hit"},
        )
        return Extraction(field_name, value, "rule", evidence, rule.score, [rule.name], rule=rule.name)

    return Extraction.missing(field_name)
