from __future__ import annotations
import re
from .base import Extraction, Hit, Rule, SurveyDocument, first_match
from .postal import HYPHENS
from ..utils import strip_all_whitespace

ADDRESS_LABEL = "住所"
# labels that end the address block
STOP_LABELS_RE = re.compile(r"電話|メール|家族|連絡|職業|年齢")
REGION_SHAPE_RE = re.compile(rf"[都道府県市区町村]|\d+[{HYPHENS}]?\d*")
POSTAL_PREFIX_RE = re.compile(rf"[〒T]?\s*\d{{3}}\s*[{HYPHENS}]\s*\d{{4}}\s*")
LEADING_POSTAL_RE = re.compile(r"^\d{3}")
BLOCK_LINES = 2

ADDRESS_PATTERNS = (
    re.compile(rf"((?:北海道|東京都|(?:大阪|京都)府|\S{{2,3}}県)[^\n\r]*?\d[\d{HYPHENS}]*)"),
    re.compile(rf"(\S{{2,4}}市[^\n\r]*?\d[\d{HYPHENS}]*)"),
)

def _clean_address_line(ln: str) -> str:
    return POSTAL_PREFIX_RE.sub("", ln).strip()

def _address_label_block(doc: SurveyDocument) -> Hit | None:
    lines = doc.lines
    for i, ln in enumerate(lines):
        if ADDRESS_LABEL not in ln or "メール" in ln:
            continue
        parts: list[str] = []
        evidence: list[str] = []
        # an address written on the label line itself
        rest = _clean_address_line(ln.split(ADDRESS_LABEL, 1)[1].lstrip(":：)） "))
        if rest and REGION_SHAPE_RE.search(rest):
            parts.append(rest)
            evidence.append(ln)
        for j in range(i + 1, min(i + 1 + BLOCK_LINES, len(lines))):
            addr_line = lines[j]
            if STOP_LABELS_RE.search(addr_line):
                break
            if not REGION_SHAPE_RE.search(addr_line) or LEADING_POSTAL_RE.match(addr_line):
                continue
            cleaned = _clean_address_line(addr_line)
            if cleaned:
                parts.append(cleaned)
                evidence.append(addr_line)
        if parts:
            return strip_all_whitespace("".join(parts)), "\n".join(evidence)
        # only the first address label is considered
        return None
    return None

def _address_region_pattern(doc: SurveyDocument) -> Hit | None:
    for pat in ADDRESS_PATTERNS:
        m = pat.search(doc.text)
        if m:
            return strip_all_whitespace(m.group(1)), m.group(0)
    return None

ADDRESS_RULES = (
    Rule("address_label_block", _address_label_block, 0.80),
    Rule("address_region_pattern", _address_region_pattern, 0.55),
)

def extract_address(doc: SurveyDocument) -> Extraction:
    return first_match("address", ADDRESS_RULES, doc)
