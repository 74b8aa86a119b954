from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional, Union

import numpy as np

from .engines import OcrEngine, make_engine
from .errors import EngineUnavailableError, RecognitionError, ServerListError
from .schema import ProcessedImage

logger = logging.getLogger("serverlistcapture")

Alphabet = Union[str, Iterable[str]]


def _alphabet_str(alphabet: Alphabet) -> str:
    if isinstance(alphabet, str):
        return alphabet
    return "".join(sorted(set(alphabet)))


class RecognitionAdapter:
    """
    Owns one long-lived OCR engine and hands crops to it one at a time.

    - The engine is initialized lazily on first use and reused across calls.
    - An initialization failure is remembered and re-raised on every later call
      (no retry per request) until shutdown() resets the adapter.
    - Calls are serialized by an internal lock, so two regions submitted from different
      threads queue up instead of hitting the engine concurrently.
    """

    def __init__(self, engine: OcrEngine, *, language: str = "eng", timeout: float = 0.0) -> None:
        self.engine = engine
        self.language = language
        self.timeout = float(timeout or 0.0)
        self._lock = threading.Lock()
        self._ready = False
        self._init_error: Optional[EngineUnavailableError] = None

    @property
    def ready(self) -> bool:
        return self._ready

    def ensure_ready(self) -> None:
        if self._ready:
            return
        with self._lock:
            self._ensure_ready_locked()

    def _ensure_ready_locked(self) -> None:
        if self._ready:
            return
        if self._init_error is not None:
            raise self._init_error

        logger.info("Initializing %s OCR engine (lang=%s)...", self.engine.name, self.language)
        try:
            self.engine.initialize(self.language)
        except EngineUnavailableError as e:
            self._init_error = e
            logger.error("OCR engine %s unavailable: %s", self.engine.name, e)
            raise
        except Exception as e:
            logger.exception("OCR engine %s failed to initialize", self.engine.name)
            self._init_error = EngineUnavailableError(f"{self.engine.name} init failed: {e}")
            raise self._init_error from e
        self._ready = True
        logger.info("OCR engine %s ready.", self.engine.name)

    def recognize(self, image: ProcessedImage, alphabet: Alphabet, *, region: Optional[str] = None) -> str:
        """Best-effort text for one prepared crop. Empty string means nothing was recognized."""
        if not isinstance(image, np.ndarray) or image.ndim != 2 or image.size == 0:
            shape = getattr(image, "shape", None)
            raise RecognitionError(f"expected a non-empty grayscale crop, got {shape}", region=region)

        chars = _alphabet_str(alphabet)
        timeout = self.timeout if self.timeout > 0 else None

        with self._lock:
            self._ensure_ready_locked()
            try:
                text = self.engine.recognize(image, chars, timeout=timeout)
            except RecognitionError as e:
                if e.region is None:
                    e.region = region
                raise
            except ServerListError:
                raise
            except Exception as e:
                raise RecognitionError(f"{type(e).__name__}: {e}", region=region) from e
        return text or ""

    def shutdown(self) -> None:
        with self._lock:
            if self._ready:
                try:
                    self.engine.shutdown()
                finally:
                    logger.info("OCR engine %s shut down.", self.engine.name)
            self._ready = False
            self._init_error = None


# ---------- process-wide instance ----------
_DEFAULT: Optional[RecognitionAdapter] = None
_DEFAULT_LOCK = threading.Lock()


def get_default_adapter(settings=None) -> RecognitionAdapter:
    """Build (once) the adapter described by `settings` (or the environment)."""
    global _DEFAULT
    with _DEFAULT_LOCK:
        if _DEFAULT is None:
            if settings is None:
                from ..config import Settings

                settings = Settings.from_env()
            engine = make_engine(settings.ocr_engine, tesseract_cmd=settings.tesseract_path)
            _DEFAULT = RecognitionAdapter(
                engine,
                language=settings.ocr_language,
                timeout=settings.ocr_timeout_seconds,
            )
        return _DEFAULT


def set_default_adapter(adapter: Optional[RecognitionAdapter]) -> None:
    global _DEFAULT
    with _DEFAULT_LOCK:
        _DEFAULT = adapter


def shutdown_default_adapter() -> None:
    global _DEFAULT
    with _DEFAULT_LOCK:
        if _DEFAULT is not None:
            _DEFAULT.shutdown()
            _DEFAULT = None
