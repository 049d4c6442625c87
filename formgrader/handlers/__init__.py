from __future__ import annotations

from fastapi import FastAPI

from ..services.errors import SubmissionError
from ..services.pipeline import SubmissionPipeline
from . import submissions


def register_handlers(app: FastAPI, pipeline: SubmissionPipeline) -> None:
    submissions.setup_dependencies(pipeline=pipeline)
    app.add_exception_handler(SubmissionError, submissions.submission_error_handler)
    app.include_router(submissions.router)
