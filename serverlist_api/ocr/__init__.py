from .errors import (
    EngineUnavailableError,
    ImageDecodeError,
    InvalidRegionError,
    RecognitionError,
    RecognitionTimeout,
    ServerListError,
)
from .schema import CropLayout, Region, RegionText

__all__ = [
    "CropLayout",
    "EngineUnavailableError",
    "ImageDecodeError",
    "InvalidRegionError",
    "RecognitionError",
    "RecognitionTimeout",
    "Region",
    "RegionText",
    "ServerListError",
]
