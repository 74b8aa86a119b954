import os
from typing import Optional

import numpy as np
import pytesseract

from ..errors import EngineUnavailableError, RecognitionError, RecognitionTimeout
from .itxt import OcrEngine


def _cfg(alphabet: str, psm: int = 6) -> str:
    # psm 6 = a single uniform block of text (one server per line).
    # Keep interword spaces so "Premium #11" stays splittable from the next column.
    return (
        f"--oem 1 --psm {psm} "
        f'-c tessedit_char_whitelist="{alphabet}" '
        f"-c preserve_interword_spaces=1"
    )


class TesseractEngine(OcrEngine):
    name = "tesseract"

    def __init__(self, tesseract_cmd: str = "") -> None:
        self._cmd = (tesseract_cmd or "").strip()
        self._lang = "eng"
        self.version: Optional[str] = None

    def initialize(self, language: str) -> None:
        if self._cmd:
            if not os.path.exists(self._cmd):
                raise EngineUnavailableError(f"TESSERACT_PATH does not exist: {self._cmd}")
            pytesseract.pytesseract.tesseract_cmd = self._cmd
        try:
            self.version = str(pytesseract.get_tesseract_version())
            langs = pytesseract.get_languages(config="")
        except pytesseract.TesseractNotFoundError as e:
            raise EngineUnavailableError("tesseract is not installed or not on PATH") from e
        except (OSError, RuntimeError) as e:
            raise EngineUnavailableError(f"tesseract probe failed: {e}") from e
        # "eng+deu" loads several packs at once
        missing = [p for p in language.split("+") if p and langs and p not in langs]
        if missing:
            raise EngineUnavailableError(f"tesseract language(s) {', '.join(missing)} not installed")
        self._lang = language

    def recognize(self, gray_l8: np.ndarray, alphabet: str, timeout: Optional[float] = None) -> str:
        if gray_l8.ndim != 2 or gray_l8.size == 0:
            raise RecognitionError(f"expected a non-empty grayscale (H,W) image, got shape {gray_l8.shape}")
        g = gray_l8.astype(np.uint8, copy=False)
        try:
            text = pytesseract.image_to_string(
                g,
                lang=self._lang,
                config=_cfg(alphabet),
                timeout=timeout or 0,
            )
        except pytesseract.TesseractError as e:
            raise RecognitionError(f"tesseract failed ({e.status}): {e.message}") from e
        except RuntimeError as e:
            # pytesseract signals a killed subprocess with RuntimeError('Tesseract process timeout')
            if "timeout" in str(e).lower():
                raise RecognitionTimeout(f"tesseract exceeded {timeout}s") from e
            raise RecognitionError(str(e)) from e
        return (text or "").strip()
