import pytest
import requests

from survey_hitl import postal
from survey_hitl.parser import parse_survey_text
from survey_hitl.postal import PostalAddress, ZipcloudClient, complete_address


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")

    def json(self):
        return self.payload


ZIPCLOUD_HIT = {
    "status": 200,
    "results": [{"zipcode": "1234567", "address1": "東京都", "address2": "港区", "address3": "芝公園"}],
}


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr(postal.time, "sleep", lambda s: None)


class TestCompleteAddress:
    def test_lookup_called_with_seven_digits(self, vocab, fake_lookup):
        lookup = fake_lookup()
        extr = parse_survey_text("〒123-4567", vocab)
        complete_address(extr, lookup)
        assert extr["postal_code"].value == "123-4567"
        assert lookup.calls == ["1234567"]

    def test_resolved_address_keeps_street_number(self, vocab, fake_lookup):
        lookup = fake_lookup({"1234567": PostalAddress("123-4567", "東京都", "港区", "芝公園")})
        extr = parse_survey_text("〒123-4567\n住所 東京都港区芝公圓4-2-8", vocab)
        complete_address(extr, lookup)
        addr = extr["address"]
        assert addr.value == "東京都港区芝公園4-2-8"
        assert addr.method == "lookup"
        assert addr.rule == "postal_lookup"
        assert "postal_lookup" in addr.reasons
        assert "postal_lookup_canonical" in extr["postal_code"].reasons

    def test_no_postal_code_no_lookup(self, vocab, fake_lookup):
        lookup = fake_lookup()
        extr = parse_survey_text("住所 東京都港区芝公園4-2-8", vocab)
        complete_address(extr, lookup)
        assert lookup.calls == []
        assert extr["address"].method == "rule"

    def test_unknown_code_keeps_guess(self, vocab, fake_lookup):
        extr = parse_survey_text("〒999-9999\n住所 奈良県奈良市1-2", vocab)
        complete_address(extr, fake_lookup())
        assert extr["address"].value == "奈良県奈良市1-2"


class TestZipcloudClient:
    def test_hit(self, monkeypatch):
        seen = {}

        def fake_get(url, params=None, timeout=None):
            seen.update(url=url, params=params, timeout=timeout)
            return FakeResponse(ZIPCLOUD_HIT)

        monkeypatch.setattr(postal.requests, "get", fake_get)
        res = ZipcloudClient(timeout_s=3).lookup("1234567")
        assert res == PostalAddress("123-4567", "東京都", "港区", "芝公園")
        assert res.full_address == "東京都港区芝公園"
        assert seen["params"] == {"zipcode": "1234567"}
        assert seen["timeout"] == 3

    def test_no_results(self, monkeypatch):
        monkeypatch.setattr(postal.requests, "get", lambda *a, **k: FakeResponse({"status": 200, "results": None}))
        assert ZipcloudClient().lookup("9999999") is None

    def test_retries_then_gives_up(self, monkeypatch, no_sleep):
        calls = []

        def failing_get(*a, **k):
            calls.append(1)
            raise requests.ConnectionError("down")

        monkeypatch.setattr(postal.requests, "get", failing_get)
        assert ZipcloudClient(max_retries=3).lookup("1234567") is None
        assert len(calls) == 3

    def test_recovers_after_transient_error(self, monkeypatch, no_sleep):
        responses = [FakeResponse({}, status_code=503), FakeResponse(ZIPCLOUD_HIT)]
        monkeypatch.setattr(postal.requests, "get", lambda *a, **k: responses.pop(0))
        assert ZipcloudClient(max_retries=2).lookup("1234567").town == "芝公園"

    def test_malformed_code_is_not_sent(self, monkeypatch):
        def unexpected(*a, **k):
            raise AssertionError("no request expected")

        monkeypatch.setattr(postal.requests, "get", unexpected)
        assert ZipcloudClient().lookup("123-4567") is None
