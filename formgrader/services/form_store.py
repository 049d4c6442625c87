from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, Optional, Protocol

from .form_loader import parse_form
from .models import Form


class FormStore(Protocol):
    def get_form(self, form_id: str) -> Optional[Form]: ...


class MemoryFormStore:
    def __init__(self, forms: Iterable[Form] = ()):
        self.forms: Dict[str, Form] = {form.id: form for form in forms}

    def add(self, form: Form) -> None:
        self.forms[form.id] = form

    def get_form(self, form_id: str) -> Optional[Form]:
        return self.forms.get(form_id)


class JsonFormStore:
    """Reads ``<form_id>.json`` files from a directory on every lookup."""

    def __init__(self, directory: Path):
        self.directory = directory

    def _path_for(self, form_id: str) -> Optional[Path]:
        path = self.directory / f"{form_id}.json"
        # form ids come from URLs; refuse anything that escapes the directory
        if path.resolve().parent != self.directory.resolve():
            return None
        return path

    def get_form(self, form_id: str) -> Optional[Form]:
        path = self._path_for(form_id)
        if path is None or not path.is_file():
            return None
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        data.setdefault("id", form_id)
        return parse_form(data)
