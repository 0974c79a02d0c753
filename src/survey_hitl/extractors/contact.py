from __future__ import annotations

import re

from .base import Extraction, Hit, Rule, SurveyDocument, first_match
from ..marks import marked_options
from ..validate import parse_int

CONTACT_LABEL_RE = re.compile(r"連絡[がの]?可能な?曜日[、,]?\s*(?:時間)?")
DAY_RE = re.compile(r"([月火水木金土日])\s*曜日?")
HOUR_RE = re.compile(r"(\d{1,2})\s*時")
HOUR_SWEEP_RE = re.compile(r"(\d{1,2})\s*時\s*頃?")


def contact_block(doc: SurveyDocument) -> str | None:
    for i, ln in enumerate(doc.lines):
        m = CONTACT_LABEL_RE.search(ln)
        if m:
            rest = ln[m.end():]
            nxt = doc.lines[i + 1] if i + 1 < len(doc.lines) else ""
            return f"{rest} {nxt}".strip() or None
    return None


def _hour_label(hour: int) -> str | None:
    if 0 <= hour <= 24:
        return f"{hour}時頃"
    return None


def _contact_day_label(doc: SurveyDocument) -> Hit | None:
    block = contact_block(doc)
    if not block:
        return None
    m = DAY_RE.search(block)
    if not m:
        return None
    return f"{m.group(1)}曜日", block


def _contact_day_marked(doc: SurveyDocument) -> Hit | None:
    hits = marked_options(doc.vocab.contact_day_options, doc.mark_text, doc.vocab.mark_glyphs)
    if not hits:
        return None
    day = hits[0]
    return (day + "曜日" if len(day) == 1 else day), day


def _contact_time_label(doc: SurveyDocument) -> Hit | None:
    block = contact_block(doc)
    if not block:
        return None
    m = HOUR_RE.search(block)
    if not m:
        return None
    label = _hour_label(parse_int(m.group(1)))
    return (label, block) if label else None


def _contact_time_marked(doc: SurveyDocument) -> Hit | None:
    hits = marked_options(doc.vocab.contact_time_options, doc.mark_text, doc.vocab.mark_glyphs)
    if not hits:
        return None
    return f"{hits[0]}頃", hits[0]


def _contact_time_sweep(doc: SurveyDocument) -> Hit | None:
    for m in HOUR_SWEEP_RE.finditer(doc.text):
        label = _hour_label(parse_int(m.group(1)))
        if label:
            return label, m.group(0)
    return None


CONTACT_DAY_RULES = (
    Rule("contact_day_label", _contact_day_label, 0.80),
    Rule("contact_day_marked", _contact_day_marked, 0.60),
)
CONTACT_TIME_RULES = (
    Rule("contact_time_label", _contact_time_label, 0.80),
    Rule("contact_time_marked", _contact_time_marked, 0.60),
    Rule("contact_time_sweep", _contact_time_sweep, 0.40),
)


def extract_preferred_contact_day(doc: SurveyDocument) -> Extraction:
    return first_match("preferred_contact_day", CONTACT_DAY_RULES, doc)

def extract_preferred_contact_time(doc: SurveyDocument) -> Extraction:
    return first_match("preferred_contact_time", CONTACT_TIME_RULES, doc)
