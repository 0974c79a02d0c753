from __future__ import annotations

from typing import Callable

from .base import Extraction, Hit, Rule, SurveyDocument, first_match
from ..marks import marked_options
from ..vocabulary import Vocabulary

OptionsOf = Callable[[Vocabulary], tuple[str, ...]]


def _dedupe(values: list[str]) -> tuple[str, ...]:
    seen: list[str] = []
    for v in values:
        if v not in seen:
            seen.append(v)
    return tuple(seen)


def _channel_names(values: list[str], vocab: Vocabulary) -> list[str]:
    return [vocab.channel_synonyms.get(v, v) for v in values]


def _single_marked(options_of: OptionsOf) -> Callable[[SurveyDocument], Hit | None]:
    def rule(doc: SurveyDocument) -> Hit | None:
        hits = marked_options(options_of(doc.vocab), doc.mark_text, doc.vocab.mark_glyphs)
        if not hits:
            return None
        return hits[0], hits[0]
    return rule


def _single_listed(options_of: OptionsOf) -> Callable[[SurveyDocument], Hit | None]:
    # Weak signal: a printed form lists every option, so the last one found wins.
    def rule(doc: SurveyDocument) -> Hit | None:
        found = [o for o in options_of(doc.vocab) if o in doc.text]
        if not found:
            return None
        return found[-1], found[-1]
    return rule


def _multi_marked(options_of: OptionsOf, synonyms: bool = False) -> Callable[[SurveyDocument], Hit | None]:
    def rule(doc: SurveyDocument) -> Hit | None:
        hits = marked_options(options_of(doc.vocab), doc.mark_text, doc.vocab.mark_glyphs)
        if not hits:
            return None
        values = _channel_names(hits, doc.vocab) if synonyms else hits
        return _dedupe(values), ", ".join(hits)
    return rule


def _multi_listed(options_of: OptionsOf, synonyms: bool = False) -> Callable[[SurveyDocument], Hit | None]:
    def rule(doc: SurveyDocument) -> Hit | None:
        found = [o for o in options_of(doc.vocab) if o in doc.text]
        if not found:
            return None
        values = _channel_names(found, doc.vocab) if synonyms else found
        return _dedupe(values), ", ".join(found)
    return rule


def _budget(v: Vocabulary) -> tuple[str, ...]:
    return v.budget_options

def _timing(v: Vocabulary) -> tuple[str, ...]:
    return v.timing_options

def _vehicle_types(v: Vocabulary) -> tuple[str, ...]:
    return v.vehicle_types

def _channels(v: Vocabulary) -> tuple[str, ...]:
    return v.channel_options

def _show_visit(v: Vocabulary) -> tuple[str, ...]:
    return v.show_visit_options


BUDGET_RULES = (
    Rule("budget_marked", _single_marked(_budget), 0.80),
    Rule("budget_listed", _single_listed(_budget), 0.35),
)
PURCHASE_TIMING_RULES = (
    Rule("purchase_timing_marked", _single_marked(_timing), 0.80),
    Rule("purchase_timing_listed", _single_listed(_timing), 0.35),
)
VEHICLE_TYPE_RULES = (
    Rule("desired_vehicle_types_marked", _multi_marked(_vehicle_types), 0.80),
    Rule("desired_vehicle_types_listed", _multi_listed(_vehicle_types), 0.35),
)
CHANNEL_RULES = (
    Rule("acquisition_channels_marked", _multi_marked(_channels, synonyms=True), 0.80),
    Rule("acquisition_channels_listed", _multi_listed(_channels, synonyms=True), 0.35),
)
SHOW_VISIT_RULES = (
    Rule("show_visit_marked", _single_marked(_show_visit), 0.80),
    Rule("show_visit_listed", _single_listed(_show_visit), 0.35),
)


def extract_budget(doc: SurveyDocument) -> Extraction:
    return first_match("budget", BUDGET_RULES, doc)

def extract_purchase_timing(doc: SurveyDocument) -> Extraction:
    return first_match("purchase_timing", PURCHASE_TIMING_RULES, doc)

def extract_desired_vehicle_types(doc: SurveyDocument) -> Extraction:
    return first_match("desired_vehicle_types", VEHICLE_TYPE_RULES, doc)

def extract_acquisition_channels(doc: SurveyDocument) -> Extraction:
    return first_match("acquisition_channels", CHANNEL_RULES, doc)

def extract_show_visit(doc: SurveyDocument) -> Extraction:
    return first_match("show_visit", SHOW_VISIT_RULES, doc)
