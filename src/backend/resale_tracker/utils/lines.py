"""
Line normalization helpers for raw OCR text.
"""

import re
from typing import List

# Leading OCR noise: table pipes, rule characters, bullets, stray currency glyphs
_LEADING_NOISE = re.compile(r'^[|=\-*#@$%\s]+')
_TRAILING_PIPES = re.compile(r'[|\s]+$')
_LINE_BREAK = re.compile(r'\r?\n')

MIN_LINE_LENGTH = 12
MAX_LINE_LENGTH = 120


def normalize_lines(text: str) -> List[str]:
    """
    Split raw OCR text on line feeds (LF or CRLF) into trimmed, non-empty lines.

    Form feeds and other Unicode separators do not break lines.

    Args:
        text: Raw OCR output (may be empty)

    Returns:
        Lines in original order; blank lines are dropped
    """
    if not text:
        return []
    return [line.strip() for line in _LINE_BREAK.split(text) if line.strip()]


def clean_line(line: str) -> str:
    """Strip leading noise glyphs and trailing pipes from a line."""
    cleaned = _LEADING_NOISE.sub('', line)
    cleaned = _TRAILING_PIPES.sub('', cleaned)
    return cleaned.strip()


def within_length_gate(line: str) -> bool:
    return MIN_LINE_LENGTH <= len(line) <= MAX_LINE_LENGTH
