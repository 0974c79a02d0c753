from __future__ import annotations
import re

_FULLWIDTH_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")
_FULLWIDTH_SYMBOLS = str.maketrans({"＠": "@", "．": ".", "－": "-"})
_FULLWIDTH_LATIN_RE = re.compile(r"[Ａ-Ｚａ-ｚ]")
_FULLWIDTH_OFFSET = 0xFEE0

# A whole run of O/o touching a digit, so a second pass has nothing left to rewrite.
_O_NEXT_TO_DIGIT_RE = re.compile(r"(?<=\d)[oO]+|[oO]+(?=\d)")

def normalize_ocr_text(text: str) -> str:
    """
    Canonicalize recognizer output before any pattern runs.

    - full-width digits and Latin letters -> half-width
    - full-width @ . - -> half-width
    - O/o directly before or after a digit -> 0 (handwritten zeros)
    """
    if not text:
        return ""
    out = text.translate(_FULLWIDTH_DIGITS)
    out = _FULLWIDTH_LATIN_RE.sub(lambda m: chr(ord(m.group(0)) - _FULLWIDTH_OFFSET), out)
    out = out.translate(_FULLWIDTH_SYMBOLS)
    out = _O_NEXT_TO_DIGIT_RE.sub(lambda m: "0" * len(m.group(0)), out)
    return out
