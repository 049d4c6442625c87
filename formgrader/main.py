from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from .config import AppConfig, load_config
from .handlers import register_handlers
from .services.form_store import JsonFormStore
from .services.pipeline import SubmissionPipeline
from .services.rate_limit import MemoryRateLimiter
from .services.response_store import build_response_store


def create_app(config: AppConfig) -> FastAPI:
    limiter = None
    if config.rate_limit.enabled:
        limiter = MemoryRateLimiter(
            points=config.rate_limit.points,
            duration=config.rate_limit.window_seconds,
        )
    pipeline = SubmissionPipeline(
        form_store=JsonFormStore(config.forms_dir),
        response_store=build_response_store(config.response_store),
        limiter=limiter,
    )
    app = FastAPI(title="formgrader", version="1.0.0")
    register_handlers(app=app, pipeline=pipeline)
    return app


def main() -> None:
    config = load_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
