from typing import Optional

from .itxt import OcrEngine
from .tess import TesseractEngine
try:
    from .ppocr import PPOCREngine  # optional
except ImportError:  # pragma: no cover
    PPOCREngine = None  # type: ignore

from ..errors import EngineUnavailableError


def make_engine(name: Optional[str], *, tesseract_cmd: str = "") -> OcrEngine:
    """
    Factory. Supported names:
      - 'tesseract' (default)
      - 'ppocr' / 'rapidocr' / 'paddle'  (requires rapidocr_onnxruntime)
    """
    n = (name or "tesseract").strip().lower()
    if n in ("ppocr", "rapidocr", "paddle"):
        if PPOCREngine is None:
            raise EngineUnavailableError("PPOCR engine not available (install rapidocr_onnxruntime)")
        return PPOCREngine()
    if n in ("tess", "tesseract"):
        return TesseractEngine(tesseract_cmd=tesseract_cmd)
    raise EngineUnavailableError(f"unknown OCR engine '{name}'")


__all__ = [
    "OcrEngine",
    "TesseractEngine",
    "PPOCREngine",
    "make_engine",
]
