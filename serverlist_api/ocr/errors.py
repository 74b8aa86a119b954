from __future__ import annotations

from typing import Optional


class ServerListError(Exception):
    """Base class for every failure raised by the extraction pipeline."""


class EngineUnavailableError(ServerListError):
    """The recognition engine could not be initialized (missing binary, models, ...).

    Fatal for the pipeline invocation: nothing is cropped or recognized after this.
    """


class InvalidRegionError(ServerListError, ValueError):
    """A crop region is empty or falls outside the image."""


class ImageDecodeError(ServerListError, ValueError):
    """Input bytes could not be decoded into a raster image."""


class RecognitionError(ServerListError):
    """The engine failed while recognizing one region."""

    def __init__(self, message: str, *, region: Optional[str] = None) -> None:
        super().__init__(message)
        self.region = region

    def __str__(self) -> str:
        base = super().__str__()
        return f"[{self.region}] {base}" if self.region else base


class RecognitionTimeout(RecognitionError):
    """A single recognition call ran past the configured timeout."""
