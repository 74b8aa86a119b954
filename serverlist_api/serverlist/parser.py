from __future__ import annotations

from typing import List

import regex as re

from .models import TokenMatch

# "Premium #11", "premium#7", "Premium # 3" -> "Premium #<digits>"
_RX_PREMIUM_ID = re.compile(r"Premium\s*#\s*([0-9]+)", re.IGNORECASE)

# Uptime timer: hours up to 3 digits, minutes/seconds exactly 2. No range check (OCR data is taken as-is).
_RX_TIMER = re.compile(r"\b[0-9]{1,3}:[0-9]{2}:[0-9]{2}\b", re.ASCII)


def find_identifiers(text: str) -> List[TokenMatch]:
    """Non-overlapping identifier matches in order of appearance, with their spans."""
    return [
        TokenMatch(value=f"Premium #{m.group(1)}", start=m.start(), end=m.end())
        for m in _RX_PREMIUM_ID.finditer(text or "")
    ]


def find_times(text: str) -> List[TokenMatch]:
    return [TokenMatch(value=m.group(0), start=m.start(), end=m.end()) for m in _RX_TIMER.finditer(text or "")]


def extract_identifiers(text: str) -> List[str]:
    # Duplicates are kept: each one is a separate row on screen.
    return [m.value for m in find_identifiers(text)]


def extract_times(text: str) -> List[str]:
    return [m.value for m in find_times(text)]
