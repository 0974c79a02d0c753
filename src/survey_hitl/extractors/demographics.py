from __future__ import annotations

import re

from .base import Extraction, Hit, Rule, SurveyDocument, first_match
from ..marks import has_mark_near
from ..validate import parse_int

AGE_RE = re.compile(r"(?<!\d)(\d+)\s*[才歳]")
AGE_MIN, AGE_MAX = 1, 120

OCCUPATION_RE = re.compile(r"(?:ご職業|職業)[:\s：]*([^\n\r]{2,15})")

HOUSEHOLD_LABEL = "家族構成"
ADULTS_RE = re.compile(r"大人\s*(\d+)\s*[人名]")
CHILDREN_RE = re.compile(r"子供\s*(\d+)\s*[人名]")
PETS_COUNT_RE = re.compile(r"ペット\s*(\d+)\s*匹")
RIDERS_RE = re.compile(r"乗車人数[:\s：]*(\d+)")
PEOPLE_RIDING_RE = re.compile(r"(\d+)\s*(?:人|名)\s*(?:乗車|乗り)")
ADULTS_LOOSE_RE = re.compile(r"大人\s*(\d+)")

SLEEPING_LABEL_RE = re.compile(r"就寝定員[:\s：]*(\d+)")
SLEEPING_PEOPLE_RE = re.compile(r"(\d+)\s*(?:人|名)\s*(?:就寝|寝)")


def _age_unit(doc: SurveyDocument) -> Hit | None:
    for m in AGE_RE.finditer(doc.text):
        age = parse_int(m.group(1))
        if AGE_MIN <= age <= AGE_MAX:
            return age, m.group(0)
    return None


def _occupation_label(doc: SurveyDocument) -> Hit | None:
    m = OCCUPATION_RE.search(doc.text)
    if not m:
        return None
    return m.group(1).strip(), m.group(0)


def household_block(doc: SurveyDocument) -> str | None:
    """Text after the household label: rest of the label line plus the next line."""
    for i, ln in enumerate(doc.lines):
        if HOUSEHOLD_LABEL in ln:
            rest = ln.split(HOUSEHOLD_LABEL, 1)[1]
            nxt = doc.lines[i + 1] if i + 1 < len(doc.lines) else ""
            return f"{rest} {nxt}".strip()
    return None


def _household_block(doc: SurveyDocument) -> Hit | None:
    block = household_block(doc)
    if not block:
        return None
    adults = ADULTS_RE.search(block)
    children = CHILDREN_RE.search(block)
    if not adults and not children:
        return None
    total = 0
    if adults:
        total += parse_int(adults.group(1))
    if children:
        total += parse_int(children.group(1))
    if total <= 0:
        return None
    return total, block


def _count_rule(pat: re.Pattern[str]):
    def rule(doc: SurveyDocument) -> Hit | None:
        m = pat.search(doc.text)
        if not m:
            return None
        n = parse_int(m.group(1))
        if n <= 0:
            return None
        return n, m.group(0)
    return rule


def _pets_block_count(doc: SurveyDocument) -> Hit | None:
    block = household_block(doc)
    if not block:
        return None
    m = PETS_COUNT_RE.search(block)
    if not m:
        return None
    return parse_int(m.group(1)) > 0, m.group(0)


def _pets_marked(doc: SurveyDocument) -> Hit | None:
    v = doc.vocab
    for word in v.pet_present_words:
        if has_mark_near(word, doc.mark_text, v.mark_glyphs):
            return True, word
    for word in v.pet_absent_words:
        if has_mark_near(word, doc.mark_text, v.mark_glyphs):
            return False, word
    return None


AGE_RULES = (Rule("age_unit", _age_unit, 0.85),)
OCCUPATION_RULES = (Rule("occupation_label", _occupation_label, 0.70),)
HOUSEHOLD_RULES = (
    Rule("household_block", _household_block, 0.80),
    Rule("household_riders", _count_rule(RIDERS_RE), 0.70),
    Rule("household_people", _count_rule(PEOPLE_RIDING_RE), 0.60),
    Rule("household_adults", _count_rule(ADULTS_LOOSE_RE), 0.50),
)
SLEEPING_CAPACITY_RULES = (
    Rule("sleeping_capacity_label", _count_rule(SLEEPING_LABEL_RE), 0.75),
    Rule("sleeping_capacity_people", _count_rule(SLEEPING_PEOPLE_RE), 0.60),
)
PETS_RULES = (
    Rule("pets_block_count", _pets_block_count, 0.80),
    Rule("pets_marked", _pets_marked, 0.60),
)


def extract_age(doc: SurveyDocument) -> Extraction:
    return first_match("age", AGE_RULES, doc)

def extract_occupation(doc: SurveyDocument) -> Extraction:
    return first_match("occupation", OCCUPATION_RULES, doc)

def extract_household_size(doc: SurveyDocument) -> Extraction:
    return first_match("household_size", HOUSEHOLD_RULES, doc)

def extract_sleeping_capacity(doc: SurveyDocument) -> Extraction:
    return first_match("sleeping_capacity", SLEEPING_CAPACITY_RULES, doc)

def extract_has_pets(doc: SurveyDocument) -> Extraction:
    return first_match("has_pets", PETS_RULES, doc)
