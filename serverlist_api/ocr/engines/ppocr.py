from typing import List, Optional

import numpy as np
from rapidocr_onnxruntime import RapidOCR

from ..errors import EngineUnavailableError, RecognitionError
from .itxt import OcrEngine


class PPOCREngine(OcrEngine):
    """
    RapidOCR (PP-OCR ONNX models). It has no whitelist, so output characters outside
    the alphabet are dropped after recognition. Per-call timeouts are not supported.
    """

    name = "ppocr"

    def __init__(self) -> None:
        self.ocr = None

    def initialize(self, language: str) -> None:
        # Downloads tiny models on first use; keep one instance
        try:
            self.ocr = RapidOCR()
        except Exception as e:
            raise EngineUnavailableError(f"RapidOCR init failed: {e}") from e

    def recognize(self, gray_l8: np.ndarray, alphabet: str, timeout: Optional[float] = None) -> str:
        if self.ocr is None:
            raise RecognitionError("RapidOCR engine used before initialize()")
        bgr = np.stack([gray_l8] * 3, axis=-1)
        try:
            result, _elapse = self.ocr(bgr)
        except Exception as e:
            raise RecognitionError(f"RapidOCR failed: {e}") from e

        allowed = set(alphabet or "")
        lines: List[str] = []
        # result: [[box, text, conf], ...] or None; sort top->bottom, then left->right
        items = sorted(result or [], key=lambda it: (min(p[1] for p in it[0]), min(p[0] for p in it[0])))
        for box, text, _conf in items:
            if not text:
                continue
            kept = "".join(ch for ch in text if ch in allowed) if allowed else text
            if kept.strip():
                lines.append(kept.strip())
        return "\n".join(lines)

    def shutdown(self) -> None:
        self.ocr = None
