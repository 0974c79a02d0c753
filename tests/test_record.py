import pytest

from survey_hitl.extractors.base import Extraction, Rule, first_match
from survey_hitl.record import ExtractionOutcome, ExtractionRecord


class TestFirstMatch:
    def test_first_non_empty_hit_wins(self, make_doc):
        rules = (
            Rule("empty", lambda doc: ("", "ev")),
            Rule("none", lambda doc: None),
            Rule("good", lambda doc: ("v", "ev"), 0.5),
            Rule("later", lambda doc: ("w", "ev")),
        )
        e = first_match("budget", rules, make_doc("x"))
        assert (e.value, e.rule, e.raw_score, e.reasons) == ("v", "good", 0.5, ["good"])

    def test_rule_error_falls_through(self, make_doc):
        def broken(doc):
            return int("abc"), "abc"

        rules = (Rule("broken", broken), Rule("fallback", lambda doc: (7, "7")))
        assert first_match("age", rules, make_doc("")).value == 7

    def test_all_miss(self, make_doc):
        e = first_match("age", (Rule("none", lambda doc: None),), make_doc(""))
        assert e == Extraction.missing("age")


class TestExtractionRecord:
    def test_empty_values_dropped(self):
        r = ExtractionRecord.from_values({"name": "  ", "desired_vehicle_types": [], "has_pets": False})
        assert r.name is None
        assert r.desired_vehicle_types is None
        assert r.has_pets is False
        assert r.filled_fields() == ["has_pets"]

    def test_unknown_field(self):
        with pytest.raises(ValueError):
            ExtractionRecord.from_values({"favourite_colour": "red"})

    def test_get_unknown(self):
        with pytest.raises(KeyError):
            ExtractionRecord().get("provenance")

    def test_immutable(self):
        with pytest.raises(Exception):
            ExtractionRecord().name = "x"

    def test_empty_outcome(self):
        d = ExtractionOutcome.empty().to_dict()
        assert d["confidence"] == 0
        assert d["warnings"] == []
        assert all(v is None for k, v in d["data"].items() if k != "provenance")
