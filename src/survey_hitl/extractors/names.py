from __future__ import annotations

import logging
import math
import re
from typing import Callable

from .base import Extraction, SurveyDocument
from ..utils import contains_any

logger = logging.getLogger(__name__)

KANJI = "一-龯々"
KANA = "ァ-ヶー"
HSPACE = r"[ \t　]"

KANA_PAIR_LINE_RE = re.compile(rf"^([{KANA}]{{2,}})\s+([{KANA}]{{2,}})$")
KANA_RUN_LINE_RE = re.compile(rf"^[{KANA}]{{4,}}$")
KANJI_NAME_SPACED_RE = re.compile(rf"^([{KANJI}]{{1,4}})\s+([{KANJI}]{{1,4}})$")
KANJI_NAME_BARE_RE = re.compile(rf"^[{KANJI}]{{2,8}}$")
KANJI_LABEL_NAME_RE = re.compile(rf"^[{KANJI}]{{2,4}}$")
KANJI_PAIR_LINE_RE = re.compile(rf"^([{KANJI}]{{2,4}})\s+([{KANJI}]{{1,4}})$")
KANJI_PAIR_SWEEP_RE = re.compile(rf"([{KANJI}]{{1,4}}){HSPACE}+([{KANJI}]{{1,4}})")
KANJI_BLOCK_RE = re.compile(rf"[{KANJI}]{{2,5}}")
KANA_SWEEP_RE = re.compile(rf"([{KANA}]{{3,}}){HSPACE}*([{KANA}]{{2,}})?")
GIVEN_NAME_AFTER_RE = re.compile(rf"^{HSPACE}*([{KANJI}]{{1,3}})")

NAME_LABELS = ("氏名", "お名前", "名前")
READING_LABELS = ("フリガナ", "ふりがな")

Found = dict[str, tuple[str, str]]  # field -> (value, evidence)
NameMethod = Callable[[SurveyDocument, Found], Found]


def split_kana_run(run: str) -> str:
    """Split an unbroken reading into surname/given name near the 40% mark."""
    if len(run) >= 6:
        pos = math.floor(len(run) * 0.4)
    else:
        pos = math.ceil(len(run) / 2)
    return f"{run[:pos]} {run[pos:]}"


def _kanji_name_from_line(
    line: str, denylist: tuple[str, ...], bare_re: re.Pattern[str] = KANJI_NAME_BARE_RE
) -> str | None:
    # without a space the surname/given-name boundary is unknown, keep it whole
    m = KANJI_NAME_SPACED_RE.match(line)
    if m:
        full = f"{m.group(1)} {m.group(2)}"
    elif bare_re.match(line):
        full = line
    else:
        return None
    if contains_any(full, denylist):
        return None
    return full


def _reading_from_line(line: str) -> str | None:
    m = KANA_PAIR_LINE_RE.match(line)
    if m:
        return f"{m.group(1)} {m.group(2)}"
    if KANA_RUN_LINE_RE.match(line):
        return split_kana_run(line)
    return None


# (a) "ヤマダ タロウ" alone on a line, written name on the line after/before
def _kana_pair_line(doc: SurveyDocument, found: Found) -> Found:
    out: Found = {}
    v = doc.vocab
    for i, ln in enumerate(doc.lines):
        m = KANA_PAIR_LINE_RE.match(ln)
        if not m:
            continue
        reading = f"{m.group(1)} {m.group(2)}"
        if contains_any(reading, v.kana_denylist):
            continue
        out["name_kana"] = (reading, ln)
        for j in (i + 1, i - 1):
            if 0 <= j < len(doc.lines):
                name = _kanji_name_from_line(doc.lines[j], v.name_adjacent_denylist)
                if name:
                    out["name"] = (name, doc.lines[j])
                    break
        break
    return out


# (b) "ヤマダタロウ" without a space
def _kana_run_split(doc: SurveyDocument, found: Found) -> Found:
    for ln in doc.lines:
        if KANA_RUN_LINE_RE.match(ln) and not contains_any(ln, doc.vocab.kana_denylist):
            return {"name_kana": (split_kana_run(ln), ln)}
    return {}


# (c) "山田 太郎" alone on a line
def _kanji_pair_line(doc: SurveyDocument, found: Found) -> Found:
    for ln in doc.lines:
        m = KANJI_PAIR_LINE_RE.match(ln)
        if not m:
            continue
        full = f"{m.group(1)} {m.group(2)}"
        if not contains_any(full, doc.vocab.name_line_denylist):
            return {"name": (full, ln)}
    return {}


# (d) a few lines around a "氏名"/"フリガナ" label
def _label_vicinity(doc: SurveyDocument, found: Found) -> Found:
    out: Found = {}
    v = doc.vocab
    lines = doc.lines
    for i, ln in enumerate(lines):
        if "name" not in found and "name" not in out and contains_any(ln, NAME_LABELS + READING_LABELS):
            for j in range(max(0, i - 3), min(len(lines), i + 5)):
                if j == i:
                    continue
                near = lines[j]
                # an unspaced line this far from the label is only a name when short
                name = _kanji_name_from_line(near, v.name_label_denylist, KANJI_LABEL_NAME_RE)
                if name:
                    out["name"] = (name, near)
                    break
        if "name_kana" not in found and "name_kana" not in out and contains_any(ln, READING_LABELS):
            for j in range(max(0, i - 2), min(len(lines), i + 3)):
                if j == i:
                    continue
                reading = _reading_from_line(lines[j])
                if reading and not contains_any(reading, v.kana_denylist):
                    out["name_kana"] = (reading, lines[j])
                    break
    return out


# (e) gazetteer: a known surname that is not part of an address
def _surname_gazetteer(doc: SurveyDocument, found: Found) -> Found:
    v = doc.vocab
    text = doc.text
    for surname in v.surnames:
        start = text.find(surname)
        while start != -1:
            before = text[max(0, start - 5):start]
            if before and before[-1] in v.address_suffix_chars:
                logger.debug("surname candidate %s skipped (address context %r)", surname, before)
                start = text.find(surname, start + 1)
                continue
            end = start + len(surname)
            after = text[end:end + 10]
            m = GIVEN_NAME_AFTER_RE.match(after)
            if m:
                return {"name": (f"{surname} {m.group(1)}", text[start:end + m.end()])}
            return {"name": (surname, surname)}
    return {}


# (f) any two space-separated ideographic tokens
def _kanji_pair_sweep(doc: SurveyDocument, found: Found) -> Found:
    for m in KANJI_PAIR_SWEEP_RE.finditer(doc.text):
        full = f"{m.group(1)} {m.group(2)}"
        if not contains_any(full, doc.vocab.name_sweep_denylist):
            return {"name": (full, m.group(0))}
    return {}


def _kanji_block_sweep(doc: SurveyDocument, found: Found) -> Found:
    deny = doc.vocab.name_block_denylist
    for m in KANJI_BLOCK_RE.finditer(doc.text):
        cand = m.group(0)
        if any(kw in cand or cand in kw for kw in deny):
            continue
        return {"name": (cand, cand)}
    return {}


def _kana_sweep(doc: SurveyDocument, found: Found) -> Found:
    deny = doc.vocab.kana_sweep_denylist
    for m in KANA_SWEEP_RE.finditer(doc.text):
        first, second = m.group(1), m.group(2) or ""
        full = f"{first} {second}" if second else first
        if contains_any(full, deny):
            continue
        if second:
            return {"name_kana": (full, m.group(0))}
        if len(first) >= 4:
            return {"name_kana": (split_kana_run(first), m.group(0))}
        return {"name_kana": (first, m.group(0))}
    return {}


NAME_METHODS: tuple[tuple[str, frozenset[str], NameMethod, float], ...] = (
    ("kana_pair_line", frozenset({"name", "name_kana"}), _kana_pair_line, 0.85),
    ("kana_run_split", frozenset({"name_kana"}), _kana_run_split, 0.65),
    ("kanji_pair_line", frozenset({"name"}), _kanji_pair_line, 0.80),
    ("label_vicinity", frozenset({"name", "name_kana"}), _label_vicinity, 0.70),
    ("surname_gazetteer", frozenset({"name"}), _surname_gazetteer, 0.55),
    ("kanji_pair_sweep", frozenset({"name"}), _kanji_pair_sweep, 0.45),
    ("kanji_block_sweep", frozenset({"name"}), _kanji_block_sweep, 0.30),
    ("kana_sweep", frozenset({"name_kana"}), _kana_sweep, 0.35),
)


def extract_name_and_reading(doc: SurveyDocument) -> tuple[Extraction, Extraction]:
    """
    Written name and reading share one cascade: a method may yield either or
    both, and the first method to yield a field owns it.
    """
    found: Found = {}
    winners: dict[str, tuple[str, float]] = {}

    for rule_name, provides, method, score in NAME_METHODS:
        if provides.issubset(found):
            continue
        hits = method(doc, found)
        outcome = "miss"
        for fld, hit in hits.items():
            if fld in provides and fld not in found:
                found[fld] = hit
                winners[fld] = (rule_name, score)
                outcome = "hit"
        logger.debug(
            "field=name/name_kana rule=%s outcome=%s", rule_name, outcome,
            extra={"field": "name", "rule": rule_name, "outcome": outcome},
        )
        if {"name", "name_kana"}.issubset(found):
            break

    def _to_extraction(fld: str) -> Extraction:
        if fld not in found:
            return Extraction.missing(fld)
        value, evidence = found[fld]
        rule_name, score = winners[fld]
        return Extraction(fld, value, "rule", evidence, score, [rule_name], rule=rule_name)

    return _to_extraction("name"), _to_extraction("name_kana")
