from __future__ import annotations

import json
import logging
import os
import re
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response, StreamingResponse

from css2js.config import ConvertConfig
from css2js.converter import Css2JsError, convert_buffer_with_encoding, convert_stream
from css2js.decoding import resolve_encoding
from css2js.logging_setup import ensure_file_logging
from css2js.models import ConvertOptions, ErrorEnvelope

logger = logging.getLogger(__name__)

LOG_DIR = Path(os.getenv("CSS2JS_LOG_DIR", str(Path.home() / ".css2js" / "logs")))

JS_MEDIA_TYPE = "application/javascript"

MAX_BODY_BYTES = 50 * 1024 * 1024

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")
_charset_re = re.compile(r"charset\s*=\s*\"?([^\";\s]+)\"?", re.IGNORECASE)


def _error_code_for_status(status_code: int) -> str:
    if status_code == 404:
        return "not_found"
    if status_code in {400, 413, 415, 422}:
        return "bad_request"
    return "internal_error"


def _error(status_code: int, message: str, *, request_id: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": ErrorEnvelope(
                code=_error_code_for_status(status_code), message=message, request_id=request_id
            ).model_dump()
        },
    )


def _request_id_from_request(request: Request) -> str:
    existing = getattr(getattr(request, "state", object()), "request_id", None)
    if isinstance(existing, str) and existing:
        return existing

    incoming = str(request.headers.get("x-request-id", "") or "").strip()
    request_id = incoming if incoming and _REQUEST_ID_RE.fullmatch(incoming) else uuid.uuid4().hex

    request.state.request_id = request_id
    return request_id


def _charset_from_content_type(content_type: str | None) -> str | None:
    m = _charset_re.search(content_type or "")
    return m.group(1) if m else None


def _parse_options_json(options: str | None) -> ConvertOptions:
    if options is None or not options.strip():
        return ConvertOptions()
    try:
        data = json.loads(options)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"options must be valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise HTTPException(status_code=400, detail="options must be a JSON object")
    try:
        return ConvertOptions.model_validate(data)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"invalid options: {e}") from e


def _config_from_options(opts: ConvertOptions) -> ConvertConfig:
    return ConvertConfig(
        split_on_newline=bool(opts.split_on_newline),
        trim_spaces_before_newline=bool(opts.trim_spaces_before_newline),
        trim_trailing_newline=bool(opts.trim_trailing_newline),
        prefix=opts.prefix,
        suffix=opts.suffix,
    )


def _js_media_type(encoding: str) -> str:
    return f"{JS_MEDIA_TYPE}; charset={encoding}"


async def _body_chunks_limited(request: Request, *, limit: int) -> AsyncIterator[bytes]:
    total = 0
    async for chunk in request.stream():
        total += len(chunk)
        if total > limit:
            raise HTTPException(status_code=413, detail=f"request body too large (> {limit} bytes)")
        yield chunk


async def _read_body_limited(request: Request, *, limit: int) -> bytes:
    return b"".join([chunk async for chunk in _body_chunks_limited(request, limit=limit)])


@asynccontextmanager
async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
    log_file = ensure_file_logging(log_dir=LOG_DIR)
    logger.info("file logging enabled: %s", log_file)
    yield


app = FastAPI(lifespan=_lifespan)


@app.exception_handler(HTTPException)
async def _http_exception_handler(request: Request, exc: HTTPException):
    return _error(int(exc.status_code), str(exc.detail), request_id=_request_id_from_request(request))


@app.exception_handler(RequestValidationError)
async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    msg = "bad request"
    errors = exc.errors()
    if errors:
        msg = errors[0].get("msg") or msg
    return _error(400, msg, request_id=_request_id_from_request(request))


@app.exception_handler(Css2JsError)
async def _css2js_exception_handler(request: Request, exc: Css2JsError):
    return _error(400, str(exc), request_id=_request_id_from_request(request))


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    request_id = _request_id_from_request(request)
    logger.exception("unhandled error (request_id=%s)", request_id)
    return _error(500, str(exc), request_id=request_id)


@app.get("/healthz")
async def healthz():
    return {"ok": True}


@app.post("/api/v1/convert")
async def convert(request: Request, options: str | None = Query(default=None)):
    config = _config_from_options(_parse_options_json(options))
    encoding = _charset_from_content_type(request.headers.get("content-type"))
    data = await _read_body_limited(request, limit=MAX_BODY_BYTES)

    out, used = convert_buffer_with_encoding(data, config, encoding)
    logger.debug("converted %s bytes -> %s bytes", len(data), len(out))
    return Response(content=out, media_type=_js_media_type(used))


@app.post("/api/v1/convert/stream")
async def convert_streaming(request: Request, options: str | None = Query(default=None)):
    config = _config_from_options(_parse_options_json(options))
    encoding = resolve_encoding(_charset_from_content_type(request.headers.get("content-type")))

    # Escaped chunk by chunk as the body arrives, but fully read before the
    # response starts (StreamingResponse also reads the receive channel).
    source = _body_chunks_limited(request, limit=MAX_BODY_BYTES)
    parts = [part async for part in convert_stream(source, config, encoding)]
    logger.debug("converted stream into %s parts", len(parts))
    return StreamingResponse(iter(parts), media_type=_js_media_type(encoding))
