"""Shared fixtures for the survey extraction tests."""

import pytest

from survey_hitl.config import Settings
from survey_hitl.extractors import SurveyDocument
from survey_hitl.vocabulary import load_vocabulary

SURVEY_TEXT = "\n".join([
    "フリガナ",
    "ヤマダ タロウ",
    "山田 太郎",
    "〒123-4567",
    "住所 東京都千代田区丸の内1-2-3",
    "電話番号",
    "090-1234-5678",
    "メールアドレス taro.yamada@example.com",
    "年齢 45歳",
    "職業 会社員",
    "家族構成 大人2人 子供1人 ペット1匹",
])


class FakePostalLookup:
    """Records every code it is asked for and answers from a fixed table."""

    def __init__(self, table=None):
        self.table = table or {}
        self.calls = []

    def lookup(self, code):
        self.calls.append(code)
        return self.table.get(code)


@pytest.fixture
def vocab():
    return load_vocabulary()


@pytest.fixture
def settings():
    return Settings(postal_lookup_enabled=False)


@pytest.fixture
def make_doc(vocab):
    """Build a SurveyDocument from raw recognized text."""
    def _make(text, mark_text=None):
        return SurveyDocument.from_text(text, vocab, mark_text=mark_text)
    return _make


@pytest.fixture
def survey_text():
    return SURVEY_TEXT


@pytest.fixture
def fake_lookup():
    return FakePostalLookup
