from io import BytesIO

import numpy as np
from PIL import Image, ImageFile, UnidentifiedImageError

from .errors import ImageDecodeError, InvalidRegionError
from .schema import ProcessedImage, Region

ImageFile.LOAD_TRUNCATED_IMAGES = True

# ITU-R BT.601 luma weights
_LUMA = np.array([0.299, 0.587, 0.114], dtype=np.float64)
CONTRAST_GAIN = 1.25
CONTRAST_PIVOT = 128.0


def load_image(image_bytes: bytes) -> Image.Image:
    if not image_bytes:
        raise ImageDecodeError("empty image payload")
    try:
        return Image.open(BytesIO(image_bytes)).convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageDecodeError(f"invalid image bytes: {e}") from e


def contrast_gray(np_rgb: np.ndarray) -> np.ndarray:
    """Luma, then a light linear contrast boost around mid-gray, clamped to uint8."""
    v = np_rgb[..., :3].astype(np.float64) @ _LUMA
    v = (v - CONTRAST_PIVOT) * CONTRAST_GAIN + CONTRAST_PIVOT
    return np.clip(np.rint(v), 0, 255).astype(np.uint8)


def prepare(image: Image.Image, region: Region) -> ProcessedImage:
    """
    Crop `region` out of `image` and return the contrast-enhanced grayscale plane (H,W) uint8.

    The region must be non-empty and inside the image; it is checked before any pixel work.
    """
    region.validate(image.width, image.height)
    crop = image.crop(region.box)
    if crop.mode != "RGB":
        crop = crop.convert("RGB")
    np_rgb = np.asarray(crop, dtype=np.uint8)
    out = contrast_gray(np_rgb)
    if out.shape != (region.h, region.w):
        raise InvalidRegionError(f"crop produced {out.shape}, expected {(region.h, region.w)}")
    return out


def to_rgb(gray: ProcessedImage) -> Image.Image:
    """Gray plane written back to all three channels (debug dumps / engines that want RGB)."""
    return Image.fromarray(np.stack([gray] * 3, axis=-1))
