from __future__ import annotations

import re
from functools import lru_cache

from .utils import extract_lines

# Recognizers render a hand-drawn circle as a symbol, a letter O or a zero.
# The alphanumeric renderings only count when they stand alone; otherwise the
# zero in "400万円" would mark every budget option.
_ALNUM = "A-Za-z0-9"


def _is_alnum_glyph(glyph: str) -> bool:
    return glyph.isascii() and glyph.isalnum()


@lru_cache(maxsize=64)
def _standalone_glyph_re(glyphs: tuple[str, ...]) -> re.Pattern[str]:
    parts = []
    for g in glyphs:
        if _is_alnum_glyph(g):
            parts.append(rf"(?<![{_ALNUM}]){re.escape(g)}(?![{_ALNUM}])")
        else:
            parts.append(re.escape(g))
    return re.compile("|".join(parts))


@lru_cache(maxsize=1024)
def _adjacent_re(candidate: str, glyphs: tuple[str, ...]) -> re.Pattern[str]:
    opt = re.escape(candidate)
    parts = []
    for g in glyphs:
        mark = re.escape(g)
        if _is_alnum_glyph(g):
            parts.append(rf"(?<![{_ALNUM}]){mark} ?{opt}")
            parts.append(rf"{opt} ?{mark}(?![{_ALNUM}])")
        else:
            parts.append(rf"{mark} ?{opt}")
            parts.append(rf"{opt} ?{mark}")
    return re.compile("|".join(parts))


def line_has_mark(line: str, glyphs: tuple[str, ...]) -> bool:
    if not glyphs:
        return False
    return _standalone_glyph_re(tuple(glyphs)).search(line) is not None


def has_mark_near(candidate: str, text: str, glyphs: tuple[str, ...]) -> bool:
    """
    True if a selection mark sits next to `candidate` in `text`.

    Tiers, first hit wins:
      1) mark immediately before/after the candidate (one optional space)
      2) mark on the same line as the candidate (the candidate itself excluded)
      3) mark anywhere on the line before the candidate's line
    """
    if not candidate or not text or not glyphs:
        return False
    glyphs = tuple(glyphs)

    if _adjacent_re(candidate, glyphs).search(text):
        return True

    lines = extract_lines(text)
    for i, ln in enumerate(lines):
        if candidate not in ln:
            continue
        rest = ln.replace(candidate, " ")
        if line_has_mark(rest, glyphs):
            return True
        if i > 0 and line_has_mark(lines[i - 1], glyphs):
            return True
    return False


def marked_options(options: tuple[str, ...], text: str, glyphs: tuple[str, ...]) -> list[str]:
    return [o for o in options if has_mark_near(o, text, glyphs)]
