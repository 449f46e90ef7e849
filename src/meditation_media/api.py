"""FastAPI interface for the meditation media pipeline."""

from __future__ import annotations

from uuid import uuid4

from fastapi import FastAPI, Header, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from .domain.errors import MediaPipelineError, StoreUnavailable
from .domain.models import STAGING_PREFIX
from .interfaces.api_handlers import (
    issue_upload,
    promote_uploaded_audio,
    promote_uploaded_image,
    status_for_error,
)

app = FastAPI(title="Meditation Media API", version="0.1.0")


class PromoteAudioRequest(BaseModel):
    upload_key: str = Field(..., min_length=1)

    @field_validator("upload_key")
    @classmethod
    def _require_staging_key(cls, value: str) -> str:
        if not value.startswith(STAGING_PREFIX):
            raise ValueError(f"upload_key must start with '{STAGING_PREFIX}'.")
        return value


class PromoteImageRequest(PromoteAudioRequest):
    destination: str = Field(..., min_length=1, description="Destination key without extension.")

    @field_validator("destination")
    @classmethod
    def _validate_destination(cls, value: str) -> str:
        value = value.strip().lstrip("/")
        if not value or value.startswith(STAGING_PREFIX) or ".." in value.split("/"):
            raise ValueError("destination must be a non-empty key outside the staging prefix.")
        return value


def _raise_for_pipeline_error(error: MediaPipelineError) -> None:
    status = status_for_error(error)
    if isinstance(error, StoreUnavailable) and status == 503:
        detail = {"code": error.code, "message": "failed to process the uploaded object"}
    else:
        detail = error.as_dict()
    raise HTTPException(status_code=status, detail=detail) from error


def _json(payload: dict[str, object], correlation_id: str, status_code: int = 200) -> JSONResponse:
    response = JSONResponse(content=payload, status_code=status_code)
    response.headers["X-Correlation-Id"] = correlation_id
    return response


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""

    return {"status": "ok"}


@app.post("/uploads")
def create_upload(
    x_correlation_id: str | None = Header(default=None, alias="X-Correlation-Id"),
) -> JSONResponse:
    """Issue a presigned URL for uploading a file to a fresh staging key."""

    correlation_id = x_correlation_id or str(uuid4())
    try:
        payload = issue_upload(correlation_id)
    except MediaPipelineError as error:
        _raise_for_pipeline_error(error)
    return _json(payload, correlation_id)


@app.post("/media/audio")
def promote_audio(
    request: PromoteAudioRequest,
    x_correlation_id: str | None = Header(default=None, alias="X-Correlation-Id"),
) -> JSONResponse:
    """Validate a staged MP3 and promote it to a public key."""

    correlation_id = x_correlation_id or str(uuid4())
    try:
        payload = promote_uploaded_audio(request.upload_key, correlation_id)
    except MediaPipelineError as error:
        _raise_for_pipeline_error(error)
    return _json(payload, correlation_id, status_code=201)


@app.post("/media/image")
def promote_image(
    request: PromoteImageRequest,
    x_correlation_id: str | None = Header(default=None, alias="X-Correlation-Id"),
) -> JSONResponse:
    """Validate a staged cover image and promote it under ``destination``."""

    correlation_id = x_correlation_id or str(uuid4())
    try:
        payload = promote_uploaded_image(request.upload_key, request.destination, correlation_id)
    except MediaPipelineError as error:
        _raise_for_pipeline_error(error)
    return _json(payload, correlation_id, status_code=201)
