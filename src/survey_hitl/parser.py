from __future__ import annotations

import logging

from .extractors import (
    Extraction,
    SurveyDocument,
    extract_acquisition_channels,
    extract_address,
    extract_age,
    extract_budget,
    extract_desired_vehicle_types,
    extract_email,
    extract_has_pets,
    extract_household_size,
    extract_name_and_reading,
    extract_occupation,
    extract_phone,
    extract_postal_code,
    extract_preferred_contact_day,
    extract_preferred_contact_time,
    extract_purchase_timing,
    extract_show_visit,
    extract_sleeping_capacity,
)
from .vocabulary import Vocabulary

logger = logging.getLogger(__name__)

FIELD_EXTRACTORS = (
    extract_postal_code,
    extract_phone,
    extract_email,
    extract_age,
    extract_occupation,
    extract_address,
    extract_household_size,
    extract_sleeping_capacity,
    extract_budget,
    extract_purchase_timing,
    extract_desired_vehicle_types,
    extract_acquisition_channels,
    extract_show_visit,
    extract_preferred_contact_day,
    extract_preferred_contact_time,
    extract_has_pets,
)


def parse_survey_text(text: str, vocab: Vocabulary, mark_text: str | None = None) -> dict[str, Extraction]:
    """
    Run every field extractor over one recognized page.

    `mark_text`, when a recognizer reports selection marks separately, is where
    mark proximity is checked; otherwise the page text itself is used.
    """
    doc = SurveyDocument.from_text(text, vocab, mark_text=mark_text)
    logger.debug("parsing survey text: %d chars, %d lines", len(doc.text), len(doc.lines))

    extr: dict[str, Extraction] = {}
    name, reading = extract_name_and_reading(doc)
    extr["name"] = name
    extr["name_kana"] = reading
    for fn in FIELD_EXTRACTORS:
        e = fn(doc)
        extr[e.field] = e

    found = sorted(k for k, e in extr.items() if e.value is not None)
    logger.info("extracted %d/%d fields: %s", len(found), len(extr), ", ".join(found))
    return extr
