from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..ocr.errors import RecognitionError
from ..ocr.schema import RegionText

MISMATCH_WARNING = "⚠️ Count mismatch: tweak crop fractions or improve image clarity."


@dataclass(frozen=True)
class TokenMatch:
    value: str  # normalized token
    start: int  # span in the raw OCR text
    end: int


@dataclass(frozen=True)
class Row:
    server_id: str  # "Premium #N"
    time_a: str  # H:MM:SS, hours up to 3 digits
    time_b: str

    def as_line(self) -> str:
        return f"{self.server_id} | {self.time_a} | {self.time_b}"

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.server_id, "time_a": self.time_a, "time_b": self.time_b}


@dataclass(frozen=True)
class Diagnostics:
    ids_found: int
    times_found: int
    pair_count: int
    rows_output: int

    @property
    def mismatch(self) -> bool:
        # Compared against pair_count, not rows_output: this is the "OCR passes disagree" signal.
        return self.ids_found != self.pair_count

    def lines(self) -> List[str]:
        out = [
            f"IDs found: {self.ids_found}",
            f"Times found: {self.times_found} ({self.pair_count} pairs)",
            f"Rows output: {self.rows_output}",
        ]
        if self.mismatch:
            out.append(MISMATCH_WARNING)
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ids_found": self.ids_found,
            "times_found": self.times_found,
            "pair_count": self.pair_count,
            "rows_output": self.rows_output,
            "mismatch": self.mismatch,
            "lines": self.lines(),
        }


@dataclass
class ExtractionResult:
    """
    What one screenshot produced.

    When a region failed, `errors` holds one entry per failed region, rows stay empty and
    `diagnostics` is None; the other region's raw text is still in `regions`.
    """

    rows: List[Row] = field(default_factory=list)
    diagnostics: Optional[Diagnostics] = None
    regions: Dict[str, RegionText] = field(default_factory=dict)
    identifiers: List[str] = field(default_factory=list)
    times: List[str] = field(default_factory=list)
    errors: List[RecognitionError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> "ExtractionResult":
        if self.errors:
            raise self.errors[0]
        return self

    def text(self) -> str:
        from .assemble import format_output

        if self.diagnostics is None:
            return ""
        return format_output(self.rows, self.diagnostics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "rows": [r.to_dict() for r in self.rows],
            "diagnostics": self.diagnostics.to_dict() if self.diagnostics else None,
            "identifiers": list(self.identifiers),
            "times": list(self.times),
            "raw": {name: rt.text for name, rt in self.regions.items()},
            "regions": {name: list(rt.region.box) for name, rt in self.regions.items()},
            "errors": [{"region": e.region, "error": str(e)} for e in self.errors],
            "text": self.text(),
        }
