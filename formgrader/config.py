from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

PACKAGE_DIR = Path(__file__).parent


@dataclass
class ResponseStoreConfig:
    backend: str = "file"
    file_path: Path = PACKAGE_DIR / "storage" / "responses.jsonl"


@dataclass
class RateLimitConfig:
    points: int = 10
    window_seconds: int = 3600

    @property
    def enabled(self) -> bool:
        return self.points > 0


@dataclass
class AppConfig:
    forms_dir: Path = PACKAGE_DIR / "data" / "forms"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    response_store: ResponseStoreConfig = field(default_factory=ResponseStoreConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)


def load_config() -> AppConfig:
    load_dotenv()
    default_responses = PACKAGE_DIR / "storage" / "responses.jsonl"
    file_path = Path(os.getenv("RESPONSES_PATH", default_responses)).expanduser()
    if not file_path.is_absolute():
        file_path = default_responses.parent / file_path
    response_store = ResponseStoreConfig(
        backend=os.getenv("RESPONSES_BACKEND", "file").lower(),
        file_path=file_path,
    )
    rate_limit = RateLimitConfig(
        points=int(os.getenv("SUBMIT_RATE_POINTS", "10")),
        window_seconds=int(os.getenv("SUBMIT_RATE_WINDOW", "3600")),
    )
    return AppConfig(
        forms_dir=Path(os.getenv("FORMS_DIR", PACKAGE_DIR / "data" / "forms")).expanduser(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        response_store=response_store,
        rate_limit=rate_limit,
    )
