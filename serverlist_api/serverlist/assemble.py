from __future__ import annotations

from typing import List, Sequence, Tuple

from .models import Diagnostics, Row


def assemble(identifiers: Sequence[str], times: Sequence[str]) -> Tuple[List[Row], Diagnostics]:
    """
    Pair ids with timers by position: row i gets times[2i] and times[2i+1].

    Extra ids or an odd trailing timer are dropped; the count mismatch is reported
    in the diagnostics instead of raising.
    """
    pair_count = len(times) // 2
    n = min(len(identifiers), pair_count)

    rows: List[Row] = []
    for i in range(n):
        t_a = times[i * 2] if i * 2 < len(times) else ""
        t_b = times[i * 2 + 1] if i * 2 + 1 < len(times) else ""
        rows.append(Row(server_id=identifiers[i], time_a=t_a, time_b=t_b))

    diag = Diagnostics(
        ids_found=len(identifiers),
        times_found=len(times),
        pair_count=pair_count,
        rows_output=n,
    )
    return rows, diag


def format_output(rows: Sequence[Row], diagnostics: Diagnostics) -> str:
    """Rows one per line, a blank line, then the diagnostics joined with ' | '."""
    return "\n".join(r.as_line() for r in rows) + "\n\n" + " | ".join(diagnostics.lines())
