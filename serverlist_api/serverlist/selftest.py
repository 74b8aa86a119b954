from __future__ import annotations

import logging
from typing import Tuple

from .assemble import assemble, format_output
from .parser import extract_identifiers, extract_times

logger = logging.getLogger("serverlistcapture")


DEFAULT_SELFTEST_TEXT: Tuple[str, str] = (
    # left crop: one clean id, one with OCR-dropped space
    "Premium #11 [EU] Island\nPremium#7 Ragnarok",
    # right crop: two timers per row, odd trailing timer
    "04:23:33 47:44:40\n00:01:02",
)


def run_pairing_selftest(left_text: str = "", right_text: str = "") -> str:
    """Smoke-test the extract -> pair -> format path at startup.

    Verifies nothing raises and the known sample still yields its single row.
    """
    left = left_text or DEFAULT_SELFTEST_TEXT[0]
    right = right_text or DEFAULT_SELFTEST_TEXT[1]

    ids = extract_identifiers(left)
    times = extract_times(right)
    rows, diag = assemble(ids, times)
    out = format_output(rows, diag)

    if not left_text and not right_text:
        if [r.as_line() for r in rows] != ["Premium #11 | 04:23:33 | 47:44:40"] or not diag.mismatch:
            raise RuntimeError(f"Pairing self-test produced unexpected output:\n{out}")

    logger.info("Pairing self-test passed (%d ids, %d times, %d rows).", len(ids), len(times), len(rows))
    return out
