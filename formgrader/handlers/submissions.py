from __future__ import annotations

import math
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..services.errors import RateLimited, SubmissionError
from ..services.models import Submitter
from ..services.pipeline import SubmissionPipeline

router = APIRouter()

PIPELINE: SubmissionPipeline | None = None


class SubmitRequest(BaseModel):
    """Body of a submission; ``answers`` maps question index to answer."""

    answers: Any = None


def setup_dependencies(pipeline: SubmissionPipeline) -> None:
    global PIPELINE
    PIPELINE = pipeline


def get_pipeline() -> SubmissionPipeline:
    if PIPELINE is None:
        raise RuntimeError("Submission pipeline is not configured")
    return PIPELINE


async def submission_error_handler(request: Request, exc: SubmissionError) -> JSONResponse:
    headers = None
    if isinstance(exc, RateLimited):
        headers = {"Retry-After": str(max(1, math.ceil(exc.retry_after)))}
    return JSONResponse(exc.to_dict(), status_code=exc.status_code, headers=headers)


@router.get("/health")
def health() -> Dict[str, Any]:
    return {"ok": True}


@router.get("/forms/{form_id}/view")
def view_form(form_id: str) -> Dict[str, Any]:
    """Respondent-facing form without answer keys."""
    return get_pipeline().get_public_form(form_id)


@router.post("/responses/{form_id}", status_code=201)
def submit_response(form_id: str, body: SubmitRequest, request: Request) -> Dict[str, Any]:
    submitter = Submitter(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    result = get_pipeline().submit(form_id, body.answers, submitter=submitter)
    return result.to_dict()


@router.post("/responses/{form_id}/view")
def preview_response(form_id: str, body: SubmitRequest) -> Dict[str, Any]:
    """Grade a trial run of the form without storing it."""
    payload = get_pipeline().preview(form_id, body.answers).to_dict()
    payload["message"] = "This was a test view; responses were not stored."
    return payload
