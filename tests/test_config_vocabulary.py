import json

import pytest

from survey_hitl.config import Settings, load_settings
from survey_hitl.vocabulary import load_vocabulary, merge_vocabulary


class TestLoadSettings:
    def test_defaults(self, monkeypatch):
        for key in ("MAX_WORKERS", "ENGINE_WEIGHT", "POSTAL_LOOKUP", "LOW_CONFIDENCE_THRESHOLD"):
            monkeypatch.delenv(key, raising=False)
        s = load_settings()
        assert s.max_workers == 4
        assert s.engine_weight == 0.6
        assert s.postal_lookup_enabled is True
        assert s.low_confidence_threshold == 70

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("MAX_WORKERS", "2")
        monkeypatch.setenv("POSTAL_LOOKUP", "0")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        s = load_settings()
        assert s.max_workers == 2
        assert s.postal_lookup_enabled is False
        assert s.log_level == "DEBUG"

    def test_min_rule_score_override(self, monkeypatch):
        monkeypatch.setenv("MIN_RULE_SCORE", "0.3")
        assert load_settings().min_rule_score == 0.3

    @pytest.mark.parametrize("key,value", [
        ("MAX_WORKERS", "many"),
        ("MAX_WORKERS", "0"),
        ("ENGINE_WEIGHT", "-1"),
        ("POSTAL_TIMEOUT_S", "1.5"),
    ])
    def test_invalid_values_raise(self, monkeypatch, key, value):
        monkeypatch.setenv(key, value)
        with pytest.raises(ValueError):
            load_settings()

    def test_settings_are_frozen(self):
        with pytest.raises(Exception):
            Settings().max_workers = 8


class TestVocabulary:
    def test_default_vocabulary(self, vocab):
        assert "山田" in vocab.surnames
        assert vocab.mobile_prefixes == ("090", "080", "070")
        assert vocab.channel_synonyms["HP"] == "ホームページ"

    def test_override_file_extends_lists(self, tmp_path):
        path = tmp_path / "vocab.json"
        path.write_text(json.dumps({"surnames": ["雅楽川"], "channel_synonyms": {"IG": "Instagram"}}), encoding="utf-8")
        v = load_vocabulary(str(path))
        assert "雅楽川" in v.surnames
        assert "山田" in v.surnames
        assert v.channel_synonyms["IG"] == "Instagram"
        assert v.channel_synonyms["HP"] == "ホームページ"

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError):
            merge_vocabulary({"surnames": []}, {"surname": ["x"]})

    def test_type_mismatch_rejected(self):
        with pytest.raises(ValueError):
            merge_vocabulary({"surnames": []}, {"surnames": "山田"})

    def test_duplicates_not_added(self):
        merged = merge_vocabulary({"surnames": ["山田"]}, {"surnames": ["山田", "田中"]})
        assert merged["surnames"] == ["山田", "田中"]

    def test_gazetteer_override_reaches_extraction(self, tmp_path):
        from survey_hitl.extractors import SurveyDocument, extract_name_and_reading

        path = tmp_path / "vocab.json"
        path.write_text(json.dumps({"surnames": ["雅楽川"]}), encoding="utf-8")
        doc = SurveyDocument.from_text("記入者: 雅楽川", load_vocabulary(str(path)))
        name, _ = extract_name_and_reading(doc)
        assert name.value == "雅楽川"


class TestConfigureLogging:
    def test_sets_package_level(self):
        import logging

        from survey_hitl import configure_logging

        pkg = logging.getLogger("survey_hitl")
        try:
            configure_logging("debug")
            assert pkg.level == logging.DEBUG
            configure_logging("nonsense")
            assert pkg.level == logging.INFO
        finally:
            pkg.setLevel(logging.NOTSET)

    def test_level_defaults_to_log_level_env(self, monkeypatch):
        import logging

        from survey_hitl import configure_logging

        monkeypatch.setenv("LOG_LEVEL", "warning")
        pkg = logging.getLogger("survey_hitl")
        try:
            configure_logging()
            assert pkg.level == logging.WARNING
        finally:
            pkg.setLevel(logging.NOTSET)
