from __future__ import annotations
import re
from .base import Extraction, Hit, Rule, SurveyDocument, first_match

HYPHENS = "\\-ー一―‐ｰ−–"

POSTAL_MARKED_RE = re.compile(rf"[〒T]\s*(\d{{3}})\s*[{HYPHENS}]\s*(\d{{4}})(?!\d)")
# Not a slice of a longer hyphenated number such as 090-1234-5678.
POSTAL_BARE_RE = re.compile(rf"(?<![\d{HYPHENS}])(\d{{3}})\s*[{HYPHENS}]\s*(\d{{4}})(?![\d{HYPHENS}])")

def _postal_marked(doc: SurveyDocument) -> Hit | None:
    m = POSTAL_MARKED_RE.search(doc.text)
    if not m:
        return None
    return f"{m.group(1)}-{m.group(2)}", m.group(0)

def _postal_bare(doc: SurveyDocument) -> Hit | None:
    m = POSTAL_BARE_RE.search(doc.text)
    if not m:
        return None
    return f"{m.group(1)}-{m.group(2)}", m.group(0)

POSTAL_RULES = (
    Rule("postal_marked", _postal_marked, 0.90),
    Rule("postal_bare", _postal_bare, 0.65),
)

def extract_postal_code(doc: SurveyDocument) -> Extraction:
    return first_match("postal_code", POSTAL_RULES, doc)
