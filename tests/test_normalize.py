import pytest

from survey_hitl.normalize import normalize_ocr_text


class TestNormalizeOcrText:
    def test_fullwidth_digits_and_symbols(self):
        assert normalize_ocr_text("０９０－１２３４－５６７８") == "090-1234-5678"
        assert normalize_ocr_text("ｔａｒｏ＠ｅｘａｍｐｌｅ．ｃｏｍ") == "taro@example.com"

    def test_fullwidth_latin_uppercase(self):
        assert normalize_ocr_text("ＴＥＬ") == "TEL"

    def test_letter_o_next_to_digit_becomes_zero(self):
        assert normalize_ocr_text("O9O-1234-5678") == "090-1234-5678"
        assert normalize_ocr_text("1OO万円") == "100万円"

    def test_letter_o_inside_words_is_kept(self):
        assert normalize_ocr_text("Osaka Tokyo") == "Osaka Tokyo"

    def test_empty_input(self):
        assert normalize_ocr_text("") == ""
        assert normalize_ocr_text(None) == ""

    def test_japanese_text_untouched(self):
        s = "山田 太郎\n住所 東京都千代田区"
        assert normalize_ocr_text(s) == s

    @pytest.mark.parametrize("raw", [
        "OO1",
        "1oO2",
        "０Ｏ０",
        "ｏ１ｏ",
        "TEL: O9O 1234 5678",
        "〒１２３－４５６７ 東京都",
        "OOo",
        "",
    ])
    def test_idempotent(self, raw):
        once = normalize_ocr_text(raw)
        assert normalize_ocr_text(once) == once
