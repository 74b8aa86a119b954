from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from PIL import Image

from ..config import DEFAULT_ID_ALPHABET, DEFAULT_TIMER_ALPHABET
from ..serverlist.assemble import assemble
from ..serverlist.models import ExtractionResult
from ..serverlist.parser import extract_identifiers, extract_times
from .adapter import Alphabet, RecognitionAdapter
from .errors import RecognitionError
from .preprocess import load_image, prepare
from .regions import compute_regions
from .schema import CropLayout, ProcessedImage, Region, RegionText

logger = logging.getLogger("serverlistcapture")

ID_REGION = "identifiers"
TIMER_REGION = "timers"


def extract_rows(
    image: Image.Image,
    adapter: RecognitionAdapter,
    *,
    layout: Optional[CropLayout] = None,
    regions: Optional[Tuple[Region, Region]] = None,
    id_alphabet: Alphabet = DEFAULT_ID_ALPHABET,
    timer_alphabet: Alphabet = DEFAULT_TIMER_ALPHABET,
) -> ExtractionResult:
    """
    Screenshot -> rows of (server id, timer A, timer B).

    Order of checks:
      1) engine readiness (EngineUnavailableError stops everything)
      2) both crop regions validated (InvalidRegionError, before any OCR)
      3) each region recognized independently; a failure in one does not skip the other
    """
    adapter.ensure_ready()

    id_region, timer_region = regions or compute_regions(image.width, image.height, layout)
    id_region.validate(image.width, image.height)
    timer_region.validate(image.width, image.height)

    logger.info("Cropping + OCR (left: Premium #, right: timers) ...")
    prepared: Dict[str, ProcessedImage] = {
        ID_REGION: prepare(image, id_region),
        TIMER_REGION: prepare(image, timer_region),
    }
    plan = (
        (ID_REGION, id_region, id_alphabet),
        (TIMER_REGION, timer_region, timer_alphabet),
    )

    result = ExtractionResult()
    for name, region, alphabet in plan:
        rt = RegionText(name=name, region=region)
        try:
            rt.text = adapter.recognize(prepared[name], alphabet, region=name)
        except RecognitionError as e:
            logger.warning("OCR failed for %s region %s: %s", name, region.box, e)
            rt.error = str(e)
            result.errors.append(e)
        result.regions[name] = rt

    if result.errors:
        return result

    result.identifiers = extract_identifiers(result.regions[ID_REGION].text)
    result.times = extract_times(result.regions[TIMER_REGION].text)
    result.rows, result.diagnostics = assemble(result.identifiers, result.times)

    if result.diagnostics.mismatch:
        logger.warning(
            "Count mismatch: %d ids vs %d timer pairs (%d times)",
            result.diagnostics.ids_found,
            result.diagnostics.pair_count,
            result.diagnostics.times_found,
        )
    logger.info("Done. %d rows.", len(result.rows))
    return result


def extract_rows_from_bytes(
    image_bytes: bytes,
    adapter: RecognitionAdapter,
    *,
    filename: str = "",
    **kwargs,
) -> ExtractionResult:
    logger.info("Got image: %s (%d KB)", filename or "(clipboard image)", round(len(image_bytes or b"") / 1024))
    image = load_image(image_bytes)
    return extract_rows(image, adapter, **kwargs)
