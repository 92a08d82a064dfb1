"""Image-to-vector endpoints backed by vectorizer.ai."""

from __future__ import annotations

from fastapi import APIRouter, File, Form, Request, Response, UploadFile

from outfitgen.api.dependencies import require_vectorizer_client
from outfitgen.monitoring.metrics import vectorizer_requests_total
from outfitgen.vectorizer.client import (
    VectorizeOptions,
    VectorizerError,
    api_mode,
    content_type_for,
)

router = APIRouter(prefix="/api/vectorize", tags=["vectorize"])


def _as_int(value: str | None) -> int | None:
    return int(value) if value else None


def _as_float(value: str | None) -> float | None:
    return float(value) if value else None


def _resolve_mode(mode: str | None, is_test: str | None) -> str:
    """Apply the optional ``isTest`` toggle; without it ``mode`` is forwarded as sent."""

    if is_test is None:
        return mode or "test"
    return api_mode(mode or "production", is_test.lower() in {"1", "true", "yes", "on"})


@router.post("")
async def vectorize(
    request: Request,
    image: UploadFile | None = File(default=None),
    mode: str | None = Form(default=None),
    is_test: str | None = Form(default=None, alias="isTest"),
    max_colors: str | None = Form(default=None, alias="processing.max_colors"),
    retention_days: str | None = Form(default=None, alias="policy.retention_days"),
    palette: str | None = Form(default=None, alias="processing.palette"),
    min_area_px: str | None = Form(default=None, alias="processing.shapes.min_area_px"),
    file_format: str | None = Form(default=None, alias="output.file_format"),
) -> Response:
    """Vectorize an uploaded raster image and return the SVG."""

    if image is None:
        raise VectorizerError("No image provided", status_code=400)
    try:
        options = VectorizeOptions(
            mode=_resolve_mode(mode, is_test),
            max_colors=_as_int(max_colors),
            retention_days=_as_int(retention_days),
            palette=palette or None,
            min_area_px=_as_float(min_area_px),
            file_format=file_format or None,
        )
    except ValueError as exc:
        raise VectorizerError(f"Invalid processing option: {exc}", status_code=400) from exc

    client = require_vectorizer_client(request)
    vectorizer_requests_total.labels(endpoint="vectorize").inc()
    payload = await image.read()
    result = await client.vectorize(
        (image.filename or "image", payload, image.content_type or "application/octet-stream"),
        options,
    )
    return Response(content=result.content, media_type="image/svg+xml", headers=result.headers)


@router.post("/download")
async def download(
    request: Request,
    image_token: str | None = Form(default=None, alias="image.token"),
    receipt: str | None = Form(default=None),
    file_format: str | None = Form(default=None, alias="output.file_format"),
) -> Response:
    """Fetch a retained result in another format."""

    if not image_token:
        raise VectorizerError("No image token provided", status_code=400)

    client = require_vectorizer_client(request)
    vectorizer_requests_total.labels(endpoint="download").inc()
    file_format = file_format or "svg"
    result = await client.download(image_token, receipt=receipt or None, file_format=file_format)
    return Response(
        content=result.content,
        media_type=content_type_for(file_format),
        headers=result.headers,
    )


@router.post("/delete")
async def delete(
    request: Request,
    image_token: str | None = Form(default=None, alias="image.token"),
) -> dict[str, bool]:
    if not image_token:
        raise VectorizerError("No image token provided", status_code=400)

    client = require_vectorizer_client(request)
    vectorizer_requests_total.labels(endpoint="delete").inc()
    return {"success": await client.delete(image_token)}


@router.get("/account")
async def account(request: Request) -> dict[str, object]:
    client = require_vectorizer_client(request)
    vectorizer_requests_total.labels(endpoint="account").inc()
    status = await client.account()
    return status.to_dict()
