from __future__ import annotations
import re
from .base import Extraction, Hit, Rule, SurveyDocument, first_match
from ..validate import EMAIL_RE, clean_email_candidate, validate_email

EMAIL_LABEL_RE = re.compile(r"(?:メール[アァ]?ドレス|E-?mail|e-?mail|EMAIL)")
SPACED_EMAIL_RE = re.compile(
    r"([a-zA-Z0-9._%+-]+)\s*[@＠]\s*([a-zA-Z0-9.-]+)\s*[.．。]\s*([a-zA-Z]{2,})"
)

def _email_standard(doc: SurveyDocument) -> Hit | None:
    m = EMAIL_RE.search(doc.text)
    if not m:
        return None
    return m.group(0), m.group(0)

def _email_label_block(doc: SurveyDocument) -> Hit | None:
    for i, ln in enumerate(doc.lines):
        m = EMAIL_LABEL_RE.search(ln)
        if not m:
            continue
        # the address may trail the label or sit on the next line
        tail = ln[m.end():]
        block = tail + (doc.lines[i + 1] if i + 1 < len(doc.lines) else "")
        candidate = clean_email_candidate(block)
        found = EMAIL_RE.search(candidate)
        if found and validate_email(found.group(0)):
            return found.group(0), block
    return None

def _email_spaced(doc: SurveyDocument) -> Hit | None:
    m = SPACED_EMAIL_RE.search(doc.text)
    if not m:
        return None
    value = f"{m.group(1)}@{m.group(2)}.{m.group(3)}"
    if not validate_email(value):
        return None
    return value, m.group(0)

EMAIL_RULES = (
    Rule("email_standard", _email_standard, 0.90),
    Rule("email_label_block", _email_label_block, 0.75),
    Rule("email_spaced", _email_spaced, 0.65),
)

def extract_email(doc: SurveyDocument) -> Extraction:
    return first_match("email", EMAIL_RULES, doc)
