from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from functools import lru_cache
from importlib import resources
from typing import Any

logger = logging.getLogger(__name__)

_DEFAULT_RESOURCE = "vocabulary.json"


@dataclass(frozen=True)
class Vocabulary:
    """
    Word lists the extraction rules depend on.

    Everything here is data: denylists, the surname gazetteer and the printed
    option lists of the survey form. Deployments tune them through an override
    file instead of touching the rules.
    """
    mark_glyphs: tuple[str, ...]
    mobile_prefixes: tuple[str, ...]
    kana_denylist: tuple[str, ...]
    kana_sweep_denylist: tuple[str, ...]
    name_adjacent_denylist: tuple[str, ...]
    name_line_denylist: tuple[str, ...]
    name_label_denylist: tuple[str, ...]
    name_sweep_denylist: tuple[str, ...]
    name_block_denylist: tuple[str, ...]
    surnames: tuple[str, ...]
    address_suffix_chars: str
    budget_options: tuple[str, ...]
    timing_options: tuple[str, ...]
    vehicle_types: tuple[str, ...]
    channel_options: tuple[str, ...]
    channel_synonyms: dict[str, str]
    show_visit_options: tuple[str, ...]
    contact_day_options: tuple[str, ...]
    contact_time_options: tuple[str, ...]
    pet_present_words: tuple[str, ...]
    pet_absent_words: tuple[str, ...]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Vocabulary":
        kwargs: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data:
                raise ValueError(f"vocabulary is missing key {f.name!r}")
            v = data[f.name]
            if isinstance(v, list):
                v = tuple(str(x) for x in v)
            elif isinstance(v, dict):
                v = {str(k): str(val) for k, val in v.items()}
            kwargs[f.name] = v
        return cls(**kwargs)


def _read_default() -> dict[str, Any]:
    text = resources.files("survey_hitl").joinpath("data", _DEFAULT_RESOURCE).read_text(encoding="utf-8")
    return json.loads(text)


def merge_vocabulary(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Lists are extended (order kept, duplicates skipped), mappings are updated,
    scalars are replaced. Unknown keys are rejected so typos do not pass silently.
    """
    out = dict(base)
    for key, val in override.items():
        if key not in base:
            raise ValueError(f"unknown vocabulary key {key!r}")
        cur = base[key]
        if isinstance(cur, list):
            if not isinstance(val, list):
                raise ValueError(f"vocabulary key {key!r} expects a list")
            out[key] = cur + [x for x in val if x not in cur]
        elif isinstance(cur, dict):
            if not isinstance(val, dict):
                raise ValueError(f"vocabulary key {key!r} expects a mapping")
            merged = dict(cur)
            merged.update(val)
            out[key] = merged
        else:
            out[key] = val
    return out


@lru_cache(maxsize=8)
def load_vocabulary(path: str | None = None) -> Vocabulary:
    data = _read_default()
    if path:
        with open(path, "r", encoding="utf-8") as f:
            override = json.load(f)
        data = merge_vocabulary(data, override)
        logger.info("vocabulary override loaded from %s (%d keys)", path, len(override))
    return Vocabulary.from_dict(data)
