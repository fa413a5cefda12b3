"""OCR text normalization."""

import re

_LINE_BREAKS = re.compile(r"\r\n?")
_HORIZONTAL_SPACE = re.compile(r"[^\S\n]+")
# "1,5g" -> "1.5g"; "8,400" keeps its thousands separator.
_DECIMAL_COMMA = re.compile(r"(?<=\d),(?=\d{1,2}(?!\d))")
# "1og" -> "10g" and a standalone "og" -> "0g".
_LETTER_O_AFTER_DIGIT = re.compile(r"(?<=\d)o(?=g\b)")
_STANDALONE_OG = re.compile(r"(?<![\w.])og\b")
# "12g9" / "12g0" -> "12g".
_TRAILING_GLYPH = re.compile(r"(?<=\d)g[09](?![\w.%])")
# "45 9" -> "45 g".
_SPACED_NINE = re.compile(r"(?<=\d) 9(?![\w.%])")
# "459 12%" -> "45g 12%"; only when a daily-value percentage follows.
_GLUED_NINE = re.compile(r"(?<![\d.])(\d+(?:\.\d+)?)9(?= \d+(?:\.\d+)?%)")


def normalize_text(raw: str) -> str:
    """Lowercase OCR text, tidy whitespace and repair common misreads.

    Line breaks are preserved since each label row is a line. The result is
    stable under repeated application.
    """
    if not raw:
        return ""
    text = _LINE_BREAKS.sub("\n", raw.lower())
    lines = [_HORIZONTAL_SPACE.sub(" ", line).strip() for line in text.split("\n")]
    text = "\n".join(lines)
    # Each repair removes a misread glyph, so this settles.
    while True:
        repaired = _repair_glyphs(text)
        if repaired == text:
            return text
        text = repaired


def _repair_glyphs(text: str) -> str:
    text = _LETTER_O_AFTER_DIGIT.sub("0", text)
    text = _STANDALONE_OG.sub("0g", text)
    text = _TRAILING_GLYPH.sub("g", text)
    text = _SPACED_NINE.sub(" g", text)
    text = _GLUED_NINE.sub(r"\1g", text)
    return _DECIMAL_COMMA.sub(".", text)
