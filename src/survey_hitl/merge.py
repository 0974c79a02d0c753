from __future__ import annotations

import logging
from typing import Any, Sequence

from .record import EngineResult, ExtractionRecord, MergedResult
from .utils import is_empty

logger = logging.getLogger(__name__)


def merge_engine_results(results: Sequence[EngineResult]) -> MergedResult:
    """
    Fuse several recognition passes into one record.

    1) specialty fields: every engine writes the fields it declares as its
       specialty (input order; a later specialist overwrites an earlier one)
    2) everything else: engines by descending confidence, first non-empty
       value wins and is never overwritten
    """
    merged: dict[str, Any] = {}
    provenance: dict[str, str] = {}
    sources: dict[str, str] = {}
    rule_scores: dict[str, float] = {}
    known = set(ExtractionRecord.field_names())

    def take(res: EngineResult, fld: str, value: Any) -> None:
        merged[fld] = value
        provenance[fld] = res.record.provenance.get(fld, res.engine)
        sources[fld] = res.engine
        ex = res.extractions.get(fld)
        if ex is not None:
            rule_scores[fld] = ex.raw_score
        else:
            rule_scores.pop(fld, None)

    for res in results:
        for fld in res.specialties:
            if fld not in known:
                logger.debug("engine %s: ignoring unknown specialty %r", res.engine, fld)
                continue
            value = res.record.get(fld)
            if is_empty(value):
                continue
            take(res, fld, value)

    # sorted() is stable: equal confidence keeps input order
    for res in sorted(results, key=lambda r: r.confidence, reverse=True):
        for fld, value in res.record.values().items():
            if fld not in merged:
                take(res, fld, value)

    logger.debug("merged %d engine results into %d fields", len(results), len(merged))
    return MergedResult(
        record=ExtractionRecord.from_values(merged, provenance),
        sources=sources,
        rule_scores=rule_scores,
    )
