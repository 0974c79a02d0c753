from __future__ import annotations

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping

from .extractors.base import Extraction
from .utils import is_empty


@dataclass(frozen=True)
class ExtractionRecord:
    """All fields recognized on one survey. Immutable once built."""
    name: str | None = None
    name_kana: str | None = None
    phone: str | None = None
    email: str | None = None
    postal_code: str | None = None
    address: str | None = None
    age: int | None = None
    occupation: str | None = None
    household_size: int | None = None
    sleeping_capacity: int | None = None
    has_pets: bool | None = None
    budget: str | None = None
    purchase_timing: str | None = None
    desired_vehicle_types: tuple[str, ...] | None = None
    acquisition_channels: tuple[str, ...] | None = None
    show_visit: str | None = None
    preferred_contact_day: str | None = None
    preferred_contact_time: str | None = None
    # field -> rule (or engine/lookup) that produced it
    provenance: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls) if f.name != "provenance"]

    @classmethod
    def from_values(cls, values: Mapping[str, Any], provenance: Mapping[str, str] | None = None) -> "ExtractionRecord":
        known = set(cls.field_names())
        kwargs: dict[str, Any] = {}
        for k, v in values.items():
            if k not in known:
                raise ValueError(f"unknown survey field {k!r}")
            if is_empty(v):
                continue
            kwargs[k] = tuple(v) if isinstance(v, list) else v
        prov = {k: p for k, p in (provenance or {}).items() if k in kwargs}
        return cls(provenance=MappingProxyType(prov), **kwargs)

    @classmethod
    def from_extractions(cls, extractions: Mapping[str, Extraction]) -> "ExtractionRecord":
        values = {k: e.value for k, e in extractions.items() if e.value is not None}
        prov = {k: (e.rule or e.method) for k, e in extractions.items() if e.value is not None}
        return cls.from_values(values, prov)

    def get(self, name: str) -> Any:
        if name not in self.field_names():
            raise KeyError(name)
        return getattr(self, name)

    def values(self) -> dict[str, Any]:
        return {k: getattr(self, k) for k in self.field_names() if not is_empty(getattr(self, k))}

    def filled_fields(self) -> list[str]:
        return list(self.values().keys())

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for k in self.field_names():
            v = getattr(self, k)
            out[k] = list(v) if isinstance(v, tuple) else v
        out["provenance"] = dict(self.provenance)
        return out


@dataclass(frozen=True)
class EngineResult:
    engine: str
    record: ExtractionRecord
    confidence: float  # 0..100, whole recognition pass
    specialties: tuple[str, ...] = ()
    extractions: Mapping[str, Extraction] = field(default_factory=dict)


@dataclass(frozen=True)
class MergedResult:
    record: ExtractionRecord
    sources: Mapping[str, str]  # field -> engine
    rule_scores: Mapping[str, float] = field(default_factory=dict)  # field -> raw_score of the winning rule


@dataclass
class ExtractionOutcome:
    record: ExtractionRecord
    confidence: int
    processing_time_ms: float
    warnings: list[str]
    engines: list[str] = field(default_factory=list)
    field_confidence: dict[str, int] = field(default_factory=dict)
    review_fields: dict[str, list[str]] = field(default_factory=dict)
    suggestions: dict[str, str] = field(default_factory=dict)

    @classmethod
    def empty(cls, processing_time_ms: float = 0.0) -> "ExtractionOutcome":
        return cls(record=ExtractionRecord(), confidence=0, processing_time_ms=processing_time_ms, warnings=[])

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": self.record.to_dict(),
            "confidence": self.confidence,
            "processing_time_ms": round(self.processing_time_ms, 2),
            "warnings": list(self.warnings),
            "engines": list(self.engines),
            "field_confidence": dict(self.field_confidence),
            "review_fields": {k: list(v) for k, v in self.review_fields.items()},
            "suggestions": dict(self.suggestions),
        }
