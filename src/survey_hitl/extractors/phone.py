from __future__ import annotations

import re
from functools import lru_cache

from .base import Extraction, Hit, Rule, SurveyDocument, first_match
from .postal import HYPHENS
from ..validate import format_phone, is_valid_phone_digits

SEP = rf"[{HYPHENS}\s]"
PHONE_LABELS = r"(?:電話番号|電話|携帯|ご自宅|TEL|Tel|tel)"

FIXED_LINE_RE = re.compile(rf"(?<!\d)(0\d{{1,4}}){SEP}+(\d{{1,4}}){SEP}+(\d{{4}})(?!\d)")
POSTAL_MARKS = "〒T"
SPLIT_DIGITS_RE = re.compile(
    rf"(?<!\d)(0)\s*(\d)\s*(\d)\s*{SEP}*"
    r"(\d)\s*(\d)\s*(\d)\s*(\d)\s*"
    rf"{SEP}*(\d)\s*(\d)\s*(\d)\s*(\d)(?!\d)"
)

def _prefix_alt(prefixes: tuple[str, ...]) -> str:
    return "|".join(re.escape(p) for p in prefixes)

@lru_cache(maxsize=16)
def _mobile_patterns(prefixes: tuple[str, ...]) -> dict[str, re.Pattern[str]]:
    pfx = _prefix_alt(prefixes)
    return {
        "label": re.compile(
            rf"{PHONE_LABELS}[^\d\n]{{0,20}}\n?[^\d\n]{{0,20}}?({pfx})\s*{SEP}*(\d{{4}})\s*{SEP}*(\d{{4}})(?!\d)"
        ),
        "spaced": re.compile(rf"(?<!\d)({pfx})\s*{SEP}+\s*(\d{{4}})\s*{SEP}+\s*(\d{{4}})(?!\d)"),
        "hyphen": re.compile(rf"(?<!\d)({pfx})[{HYPHENS}](\d{{4}})[{HYPHENS}](\d{{4}})(?!\d)"),
        "compact": re.compile(rf"(?<!\d)({pfx})(\d{{4}})(\d{{4}})(?!\d)"),
        "digits": re.compile(rf"({pfx})(\d{{8}})"),
    }

def _groups_hit(m: re.Match[str] | None) -> Hit | None:
    if not m:
        return None
    digits = "".join(m.groups())
    if not is_valid_phone_digits(digits):
        return None
    return format_phone(digits), m.group(0)

def _mobile(kind: str):
    def rule(doc: SurveyDocument) -> Hit | None:
        pat = _mobile_patterns(doc.vocab.mobile_prefixes)[kind]
        return _groups_hit(pat.search(doc.text))
    return rule

def _phone_fixed_line(doc: SurveyDocument) -> Hit | None:
    # 7-digit postal codes share the shape; only 10+ digits not right after a postal mark count as a phone.
    for m in FIXED_LINE_RE.finditer(doc.text):
        before = doc.text[: m.start()].rstrip()
        if before and before[-1] in POSTAL_MARKS:
            continue
        digits = "".join(m.groups())
        if len(digits) >= 10 and is_valid_phone_digits(digits):
            return f"{m.group(1)}-{m.group(2)}-{m.group(3)}", m.group(0)
    return None

def _phone_split_digits(doc: SurveyDocument) -> Hit | None:
    for m in SPLIT_DIGITS_RE.finditer(doc.text):
        digits = "".join(m.groups())
        if digits[:3] in doc.vocab.mobile_prefixes:
            return format_phone(digits), m.group(0)
    return None

def _phone_digit_scan(doc: SurveyDocument) -> Hit | None:
    all_digits = re.sub(r"\D", "", doc.text)
    m = _mobile_patterns(doc.vocab.mobile_prefixes)["digits"].search(all_digits)
    if not m:
        return None
    digits = m.group(0)
    return format_phone(digits), digits

PHONE_RULES = (
    Rule("phone_label_mobile", _mobile("label"), 0.92),
    Rule("phone_mobile_spaced", _mobile("spaced"), 0.85),
    Rule("phone_mobile_hyphen", _mobile("hyphen"), 0.85),
    Rule("phone_mobile_compact", _mobile("compact"), 0.80),
    Rule("phone_fixed_line", _phone_fixed_line, 0.70),
    Rule("phone_split_digits", _phone_split_digits, 0.60),
    Rule("phone_digit_scan", _phone_digit_scan, 0.40),
)

def extract_phone(doc: SurveyDocument) -> Extraction:
    return first_match("phone", PHONE_RULES, doc)
