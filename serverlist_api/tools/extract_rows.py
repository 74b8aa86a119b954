#!/usr/bin/env python3
"""Run the server-list pipeline on a screenshot file and print the paired rows.

Examples:
  python -m serverlist_api.tools.extract_rows shot.png
  python -m serverlist_api.tools.extract_rows shot.png --json --timeout 20
  python -m serverlist_api.tools.extract_rows shot.png --dump-dir /tmp/crops

Engine, language and crop fractions default to the same environment variables the API reads.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from ..config import Settings
from ..ocr.adapter import RecognitionAdapter
from ..ocr.engines import make_engine
from ..ocr.errors import ServerListError
from ..ocr.preprocess import load_image, prepare, to_rgb
from ..ocr.regions import compute_regions
from ..ocr.router import extract_rows


def _dump_crops(image, settings: Settings, out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    id_region, timer_region = compute_regions(image.width, image.height, settings.crop_layout)
    for name, region in (("identifiers", id_region), ("timers", timer_region)):
        to_rgb(prepare(image, region)).save(out_dir / f"{name}.png")


def main(argv=None) -> int:
    p = argparse.ArgumentParser()
    p.add_argument("image", help="Screenshot file (png, jpeg, webp, ...)")
    p.add_argument("--engine", default="", help="tesseract | ppocr (default: OCR_ENGINE)")
    p.add_argument("--lang", default="", help="Recognition language (default: OCR_LANGUAGE)")
    p.add_argument("--timeout", type=float, default=None, help="Seconds per region (0 = none)")
    p.add_argument("--json", action="store_true", help="Print the full result as JSON")
    p.add_argument("--dump-dir", default="", help="Also write the prepared crops here")
    p.add_argument("-v", "--verbose", action="store_true")

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="[%(asctime)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    settings = Settings.from_env()
    if args.engine:
        settings = replace(settings, ocr_engine=args.engine.strip().lower())
    if args.lang:
        settings = replace(settings, ocr_language=args.lang.strip())
    if args.timeout is not None:
        settings = replace(settings, ocr_timeout_seconds=max(0.0, args.timeout))

    path = Path(args.image)
    try:
        image = load_image(path.read_bytes())
    except OSError as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return 2
    except ServerListError as e:
        print(str(e), file=sys.stderr)
        return 2

    adapter = None
    try:
        if args.dump_dir:
            _dump_crops(image, settings, Path(args.dump_dir))
        engine = make_engine(settings.ocr_engine, tesseract_cmd=settings.tesseract_path)
        adapter = RecognitionAdapter(engine, language=settings.ocr_language, timeout=settings.ocr_timeout_seconds)
        res = extract_rows(
            image,
            adapter,
            layout=settings.crop_layout,
            id_alphabet=settings.id_alphabet,
            timer_alphabet=settings.timer_alphabet,
        )
    except ServerListError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1
    finally:
        if adapter is not None:
            adapter.shutdown()

    if args.json:
        print(json.dumps(res.to_dict(), indent=2, ensure_ascii=False))
    elif res.ok:
        print(res.text())
    else:
        for e in res.errors:
            print(f"OCR failed: {e}", file=sys.stderr)
    return 0 if res.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
