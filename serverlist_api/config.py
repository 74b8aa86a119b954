from __future__ import annotations

import os
from dataclasses import dataclass

from .ocr.schema import CropLayout

# Tight whitelists help reduce garbage characters.
DEFAULT_ID_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789#[]:- "
DEFAULT_TIMER_ALPHABET = "0123456789: "


def _get_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_str(name: str, default: str) -> str:
    # Alphabets may legitimately contain a trailing space, so do not strip.
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw


@dataclass(frozen=True)
class Settings:
    # OCR
    ocr_engine: str  # tesseract | ppocr
    ocr_language: str
    ocr_timeout_seconds: float  # 0 = no timeout
    tesseract_path: str

    # Screenshot layout (fractions of width/height)
    crop_layout: CropLayout

    # Per-region whitelists
    id_alphabet: str
    timer_alphabet: str

    # API
    max_upload_bytes: int
    selftest_on_startup: bool

    # General
    environment: str

    @staticmethod
    def from_env() -> "Settings":
        defaults = CropLayout()
        layout = CropLayout(
            id_x=_get_float("CROP_ID_X", defaults.id_x),
            id_w=_get_float("CROP_ID_W", defaults.id_w),
            timer_x=_get_float("CROP_TIMER_X", defaults.timer_x),
            timer_w=_get_float("CROP_TIMER_W", defaults.timer_w),
            y=_get_float("CROP_Y", defaults.y),
            h=_get_float("CROP_H", defaults.h),
        )

        return Settings(
            ocr_engine=(os.getenv("OCR_ENGINE") or "tesseract").strip().lower(),
            ocr_language=(os.getenv("OCR_LANGUAGE") or "eng").strip() or "eng",
            ocr_timeout_seconds=max(0.0, _get_float("OCR_TIMEOUT_SECONDS", 0.0)),
            tesseract_path=(os.getenv("TESSERACT_PATH") or "").strip(),
            crop_layout=layout,
            id_alphabet=_get_str("ID_ALPHABET", DEFAULT_ID_ALPHABET),
            timer_alphabet=_get_str("TIMER_ALPHABET", DEFAULT_TIMER_ALPHABET),
            max_upload_bytes=_get_int("MAX_UPLOAD_BYTES", 20 * 1024 * 1024),
            selftest_on_startup=_get_bool("SELFTEST_ON_STARTUP", True),
            environment=(os.getenv("ENVIRONMENT") or os.getenv("ENV") or "stage").strip() or "stage",
        )
