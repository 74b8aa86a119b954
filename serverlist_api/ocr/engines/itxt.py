from abc import ABC, abstractmethod
from typing import Optional

import numpy as np


class OcrEngine(ABC):
    """
    The external recognition capability: initialize once, then recognize many crops.

    Engines are not required to be thread-safe; RecognitionAdapter serializes calls.
    """

    name = "engine"

    @abstractmethod
    def initialize(self, language: str) -> None:
        """Load models/binaries. Raise EngineUnavailableError if the engine cannot run."""
        ...

    @abstractmethod
    def recognize(self, gray_l8: np.ndarray, alphabet: str, timeout: Optional[float] = None) -> str:
        """Return the raw text in a grayscale (H,W) crop, restricted to `alphabet` where supported."""
        ...

    def shutdown(self) -> None:
        pass
