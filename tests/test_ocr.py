import pytest
from PIL import Image

from survey_hitl import ocr
from survey_hitl.ocr import run_tesseract, tesseract_engine


def tesseract_data(words):
    """words: (text, conf, block, par, line)"""
    data = {k: [] for k in ("text", "conf", "left", "top", "width", "height", "block_num", "par_num", "line_num")}
    for i, (text, conf, block, par, line) in enumerate(words):
        data["text"].append(text)
        data["conf"].append(conf)
        data["left"].append(10 * i)
        data["top"].append(20 * line)
        data["width"].append(10)
        data["height"].append(10)
        data["block_num"].append(block)
        data["par_num"].append(par)
        data["line_num"].append(line)
    return data


@pytest.fixture
def fake_tesseract(monkeypatch):
    words = [
        ("電話番号", "91", 1, 1, 1),
        ("", "-1", 1, 1, 1),
        ("090-1234-5678", "88.5", 1, 1, 2),
        ("山田", 70, 2, 1, 1),
        ("太郎", 90, 2, 1, 1),
        ("ノイズ", "-1", 2, 1, 2),
    ]
    monkeypatch.setattr(ocr.pytesseract, "image_to_data", lambda img, lang, output_type: tesseract_data(words))


class TestRunTesseract:
    def test_lines_rebuilt(self, fake_tesseract):
        res = run_tesseract(Image.new("RGB", (10, 10)))
        assert res.full_text == "電話番号\n090-1234-5678\n山田 太郎"
        assert len(res.tokens) == 4
        assert res.avg_conf == pytest.approx((0.91 + 0.885 + 0.70 + 0.90) / 4)

    def test_no_words(self, monkeypatch):
        monkeypatch.setattr(ocr.pytesseract, "image_to_data", lambda img, lang, output_type: tesseract_data([]))
        res = run_tesseract(Image.new("RGB", (10, 10)))
        assert res.full_text == ""
        assert res.avg_conf == 0.0


class TestTesseractEngine:
    def test_recognition_pass(self, fake_tesseract):
        engine = tesseract_engine()
        rp = engine.recognize(Image.new("L", (10, 10)))
        assert rp.engine == "tesseract"
        assert "phone" in rp.specialties
        assert rp.text.startswith("電話番号")
        assert 0.0 < rp.confidence <= 1.0
