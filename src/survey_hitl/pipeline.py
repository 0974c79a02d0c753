from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import requests

from .config import Settings, load_settings
from .confidence import blended_confidence, completeness_score, field_confidences
from .hitl import build_warnings, review_fields
from .merge import merge_engine_results
from .parser import parse_survey_text
from .postal import PostalLookup, ZipcloudClient, complete_address
from .record import EngineResult, ExtractionOutcome, ExtractionRecord
from .validate import suggest_corrections
from .vocabulary import Vocabulary, load_vocabulary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecognitionPass:
    """Text one recognizer produced for a survey image."""
    engine: str
    text: str
    confidence: float  # 0..1
    specialties: tuple[str, ...] = ()
    # selection marks, when the recognizer reports them apart from the text
    mark_text: str | None = None


@dataclass(frozen=True)
class RecognitionEngine:
    name: str
    specialties: tuple[str, ...]
    recognize: Callable[[Any], RecognitionPass]


def default_postal_lookup(settings: Settings) -> PostalLookup | None:
    if not settings.postal_lookup_enabled:
        return None
    return ZipcloudClient(settings.postal_api_url, settings.postal_timeout_s, settings.postal_max_retries)


def run_engine_pass(rp: RecognitionPass, vocab: Vocabulary, postal_lookup: PostalLookup | None = None) -> EngineResult:
    extr = parse_survey_text(rp.text, vocab, mark_text=rp.mark_text)
    complete_address(extr, postal_lookup)
    record = ExtractionRecord.from_extractions(extr)
    conf = round(max(0.0, min(1.0, rp.confidence)) * 100)
    logger.info("engine %s: %d fields, confidence %d", rp.engine, len(record.filled_fields()), conf)
    return EngineResult(
        engine=rp.engine,
        record=record,
        confidence=conf,
        specialties=tuple(rp.specialties),
        extractions=extr,
    )


def extract_survey(
    passes: Sequence[RecognitionPass],
    settings: Settings | None = None,
    vocab: Vocabulary | None = None,
    postal_lookup: PostalLookup | None = None,
) -> ExtractionOutcome:
    """
    Turn one or more recognition passes over the same survey into a single
    record with confidence, warnings and review routing.

    Passes are parsed concurrently; the merge waits for all of them.
    """
    t0 = time.perf_counter()
    settings = settings or load_settings()
    vocab = vocab or load_vocabulary(settings.vocabulary_path)

    if not passes:
        logger.warning("no recognition passes to extract from")
        return ExtractionOutcome.empty((time.perf_counter() - t0) * 1000)

    if len(passes) == 1:
        results = [run_engine_pass(passes[0], vocab, postal_lookup)]
    else:
        workers = min(settings.max_workers, len(passes))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(lambda rp: run_engine_pass(rp, vocab, postal_lookup), passes))

    merged = merge_engine_results(results)
    record = merged.record

    completeness = completeness_score(record, settings)
    confidence = blended_confidence([r.confidence for r in results], completeness, settings)
    warnings = build_warnings(record, confidence, settings)
    field_conf = field_confidences(record)

    elapsed_ms = (time.perf_counter() - t0) * 1000
    logger.info(
        "survey extracted: %d fields, completeness %d, confidence %d, %d warnings, %.1f ms",
        len(record.filled_fields()), completeness, confidence, len(warnings), elapsed_ms,
    )
    return ExtractionOutcome(
        record=record,
        confidence=confidence,
        processing_time_ms=elapsed_ms,
        warnings=warnings,
        engines=[r.engine for r in results],
        field_confidence=field_conf,
        review_fields=review_fields(settings, record, field_conf, merged.rule_scores),
        suggestions=suggest_corrections(record.values()),
    )


def recognize_and_extract(
    image: Any,
    engines: Sequence[RecognitionEngine],
    settings: Settings | None = None,
    vocab: Vocabulary | None = None,
    postal_lookup: PostalLookup | None = None,
) -> ExtractionOutcome:
    """
    Run every recognizer on the image, then extract. A failing recognizer is
    skipped; with none left the outcome is empty with zero confidence.
    """
    t0 = time.perf_counter()
    settings = settings or load_settings()
    if postal_lookup is None:
        postal_lookup = default_postal_lookup(settings)

    passes: list[RecognitionPass] = []
    for eng in engines:
        try:
            rp = eng.recognize(image)
        except (requests.RequestException, OSError, RuntimeError, ValueError) as e:
            logger.warning("recognition engine %s failed: %s", eng.name, e)
            continue
        if not rp.specialties and eng.specialties:
            rp = RecognitionPass(rp.engine, rp.text, rp.confidence, tuple(eng.specialties), rp.mark_text)
        passes.append(rp)

    if not passes:
        logger.error("all %d recognition engines failed", len(engines))
        return ExtractionOutcome.empty((time.perf_counter() - t0) * 1000)

    return extract_survey(passes, settings=settings, vocab=vocab, postal_lookup=postal_lookup)
