from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import pytesseract
from pytesseract import Output
from PIL import Image
from .pipeline import RecognitionEngine, RecognitionPass

# fields Tesseract reads more reliably than handwriting-oriented engines
TESSERACT_SPECIALTIES = ("phone", "email", "age")

@dataclass
class OCRToken:
    text: str
    conf: float  # 0..1
    bbox: tuple[int, int, int, int]  # x, y, w, h

@dataclass
class OCRResult:
    full_text: str
    tokens: list[OCRToken]
    avg_conf: float

def run_tesseract(img: Image.Image, lang: str = "jpn") -> OCRResult:
    data: dict[str, Any] = pytesseract.image_to_data(img, lang=lang, output_type=Output.DICT)

    tokens: list[OCRToken] = []
    confs: list[float] = []
    # (block, paragraph, line) -> words, in reading order
    lines: dict[tuple[int, int, int], list[str]] = {}

    n = len(data.get("text", []))
    for i in range(n):
        txt = (data["text"][i] or "").strip()
        if not txt:
            continue

        # tesseract conf is often a string; -1 for non-words
        try:
            c = float(data["conf"][i])
        except (TypeError, ValueError):
            c = -1.0
        if c < 0:
            continue
        c01 = max(0.0, min(1.0, c / 100.0))

        x, y, w, h = int(data["left"][i]), int(data["top"][i]), int(data["width"][i]), int(data["height"][i])
        tokens.append(OCRToken(text=txt, conf=c01, bbox=(x, y, w, h)))
        confs.append(c01)

        key = (int(data["block_num"][i]), int(data["par_num"][i]), int(data["line_num"][i]))
        lines.setdefault(key, []).append(txt)

    full_text = "\n".join(" ".join(words) for words in lines.values())
    avg_conf = sum(confs) / len(confs) if confs else 0.0
    return OCRResult(full_text=full_text, tokens=tokens, avg_conf=avg_conf)

def tesseract_engine(lang: str = "jpn", name: str = "tesseract") -> RecognitionEngine:
    def recognize(img: Image.Image) -> RecognitionPass:
        res = run_tesseract(img.convert("RGB"), lang=lang)
        return RecognitionPass(engine=name, text=res.full_text, confidence=res.avg_conf, specialties=TESSERACT_SPECIALTIES)

    return RecognitionEngine(name=name, specialties=TESSERACT_SPECIALTIES, recognize=recognize)
