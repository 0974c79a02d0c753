import pytest

from survey_hitl.validate import format_phone, parse_int, postal_digits, suggest_corrections


class TestFormatPhone:
    @pytest.mark.parametrize("digits,expected", [
        ("09012345678", "090-1234-5678"),
        ("0312345678", "03-1234-5678"),
        ("0742123456", "074-212-3456"),
    ])
    def test_grouping(self, digits, expected):
        assert format_phone(digits) == expected


class TestHelpers:
    def test_postal_digits(self):
        assert postal_digits("〒123-4567") == "1234567"
        assert postal_digits("123-456") is None

    def test_parse_int_raises_on_garbage(self):
        with pytest.raises(ValueError):
            parse_int("四十")


class TestSuggestCorrections:
    def test_phone_without_hyphens(self):
        assert suggest_corrections({"phone": "09012345678"}) == {"phone": "090-1234-5678"}

    def test_postal_code_inside_address(self):
        assert suggest_corrections({"address": "奈良市1234567"}) == {"postal_code": "123-4567"}

    def test_nothing_to_suggest(self):
        assert suggest_corrections({"phone": "090-1234-5678", "postal_code": "123-4567", "address": "奈良市1234567"}) == {}
