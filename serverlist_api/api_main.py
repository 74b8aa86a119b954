# api_main.py
# FastAPI service for the server-list capture
# - Upload / raw-bytes screenshot in, paired rows + diagnostics out
# - Stable endpoint aliases
# - Plain-text variant matching the copy/paste output format

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, Dict

from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from . import __version__
from .config import Settings
from .ocr.adapter import RecognitionAdapter, get_default_adapter, shutdown_default_adapter
from .ocr.errors import EngineUnavailableError, ImageDecodeError, InvalidRegionError
from .ocr.router import extract_rows_from_bytes
from .serverlist.models import ExtractionResult
from .serverlist.selftest import run_pairing_selftest

logger = logging.getLogger("serverlistcapture")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def get_adapter(settings: Settings = Depends(get_settings)) -> RecognitionAdapter:
    try:
        return get_default_adapter(settings)
    except EngineUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.selftest_on_startup:
        run_pairing_selftest()
    yield
    shutdown_default_adapter()


# ---------- app ----------
app = FastAPI(title="Server List Capture API", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- utils ----------
def _too_large(max_bytes: int) -> HTTPException:
    return HTTPException(status_code=413, detail=f"Image larger than {max_bytes} bytes")


async def _read_capped_body(request: Request, max_bytes: int) -> bytes:
    declared = request.headers.get("content-length")
    if max_bytes and declared and declared.isdigit() and int(declared) > max_bytes:
        raise _too_large(max_bytes)
    if not max_bytes:
        return await request.body()
    # content-length may be absent (chunked) or wrong; stop reading once past the cap
    chunks: list[bytes] = []
    total = 0
    async for chunk in request.stream():
        total += len(chunk)
        if total > max_bytes:
            raise _too_large(max_bytes)
        chunks.append(chunk)
    return b"".join(chunks)


async def _read_image_from_request(
    request: Request, file: UploadFile | None, image: UploadFile | None, max_bytes: int
) -> tuple[bytes, str]:
    up = file or image
    if up is not None:
        ct = (up.content_type or "").lower()
        if not ct.startswith("image/"):
            raise HTTPException(status_code=400, detail="Uploaded part must be an image (png, jpeg, webp).")
        # multipart parts are spooled by the form parser; size is known before reading into memory
        if max_bytes and up.size is not None and up.size > max_bytes:
            raise _too_large(max_bytes)
        data = await up.read(max_bytes + 1) if max_bytes else await up.read()
        if max_bytes and len(data) > max_bytes:
            raise _too_large(max_bytes)
        return data, up.filename or ""

    # allow raw image bytes
    ct = (request.headers.get("content-type") or "").lower()
    if not ct.startswith("image/"):
        raise HTTPException(
            status_code=422,
            detail="No file provided. Send multipart field 'file' or 'image', or raw image bytes with Content-Type: image/*.",
        )
    return await _read_capped_body(request, max_bytes), ""


async def _run(
    request: Request,
    file: UploadFile | None,
    image: UploadFile | None,
    settings: Settings,
    adapter: RecognitionAdapter,
) -> ExtractionResult:
    data, name = await _read_image_from_request(request, file, image, settings.max_upload_bytes)
    try:
        return await run_in_threadpool(
            extract_rows_from_bytes,
            data,
            adapter,
            filename=name,
            layout=settings.crop_layout,
            id_alphabet=settings.id_alphabet,
            timer_alphabet=settings.timer_alphabet,
        )
    except ImageDecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidRegionError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except EngineUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))


# ---------- routes ----------
@app.get("/")
async def root(settings: Settings = Depends(get_settings)):
    return {"service": "serverlist-capture-api", "env": settings.environment, "ok": True}


@app.get("/healthz")
async def healthz(settings: Settings = Depends(get_settings)):
    return {"ok": True, "env": settings.environment, "engine": settings.ocr_engine}


@app.post("/extract")
@app.post("/api/extract")
@app.post("/api/serverlist/extract")
async def serverlist_extract(
    request: Request,
    file: UploadFile | None = File(None),
    image: UploadFile | None = File(None),
    settings: Settings = Depends(get_settings),
    adapter: RecognitionAdapter = Depends(get_adapter),
) -> Dict[str, Any]:
    res = await _run(request, file, image, settings, adapter)
    return res.to_dict()


@app.post("/extract.txt", response_class=PlainTextResponse)
@app.post("/api/serverlist/extract.txt", response_class=PlainTextResponse)
async def serverlist_extract_text(
    request: Request,
    file: UploadFile | None = File(None),
    image: UploadFile | None = File(None),
    settings: Settings = Depends(get_settings),
    adapter: RecognitionAdapter = Depends(get_adapter),
):
    res = await _run(request, file, image, settings, adapter)
    if not res.ok:
        detail = "; ".join(str(e) for e in res.errors)
        return PlainTextResponse(f"OCR failed: {detail}", status_code=502)
    return PlainTextResponse(res.text())


# ---------- uvicorn entry ----------
if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    port = int(os.getenv("PORT", "8080"))
    uvicorn.run("serverlist_api.api_main:app", host="0.0.0.0", port=port, reload=False)
