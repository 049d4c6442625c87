from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Protocol

from ..config import ResponseStoreConfig
from .models import Response, Submitter

logger = logging.getLogger(__name__)


def response_to_dict(response: Response) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": response.id,
        "formId": response.form_id,
        "answers": {str(idx): answer for idx, answer in response.answers.items()},
        "createdAt": response.created_at,
        "ipAddress": response.submitter.ip_address,
        "userAgent": response.submitter.user_agent,
    }
    # survey responses carry no score fields at all
    if response.score is not None:
        payload["score"] = response.score
        payload["maxScore"] = response.max_score
    return payload


def response_from_dict(raw: Dict[str, Any]) -> Response:
    return Response(
        id=raw["id"],
        form_id=raw["formId"],
        answers={int(idx): answer for idx, answer in (raw.get("answers") or {}).items()},
        created_at=raw.get("createdAt", ""),
        score=raw.get("score"),
        max_score=raw.get("maxScore"),
        submitter=Submitter(
            ip_address=raw.get("ipAddress"),
            user_agent=raw.get("userAgent"),
        ),
    )


class ResponseStore(Protocol):
    def save_response(self, response: Response) -> str: ...

    def list_responses(self, form_id: str) -> List[Response]: ...


class MemoryResponseStore:
    def __init__(self) -> None:
        self.responses: List[Response] = []

    def save_response(self, response: Response) -> str:
        self.responses.append(response)
        return response.id

    def list_responses(self, form_id: str) -> List[Response]:
        matching = [r for r in self.responses if r.form_id == form_id]
        return sorted(matching, key=lambda r: r.created_at, reverse=True)


class FileResponseStore:
    """Append-only JSON Lines store, one response per line."""

    def __init__(self, path: Path):
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.path.touch()

    def save_response(self, response: Response) -> str:
        payload = response_to_dict(response)
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(payload, ensure_ascii=False) + "\n")
        return response.id

    def list_responses(self, form_id: str) -> List[Response]:
        responses: List[Response] = []
        with self.path.open("r", encoding="utf-8") as fh:
            for line_no, line in enumerate(fh, start=1):
                if not line.strip():
                    continue
                try:
                    raw = json.loads(line)
                except json.JSONDecodeError:
                    logger.warning("Skipping unreadable line %s in %s", line_no, self.path)
                    continue
                if raw.get("formId") == form_id:
                    responses.append(response_from_dict(raw))
        return sorted(responses, key=lambda r: r.created_at, reverse=True)


def build_response_store(config: ResponseStoreConfig) -> ResponseStore:
    if config.backend == "memory":
        return MemoryResponseStore()
    return FileResponseStore(config.file_path)
