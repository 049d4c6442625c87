from __future__ import annotations

import re

BLANK_RE = re.compile(r"_{2,}")


def count_blanks(text: str | None) -> int:
    if not text:
        return 0
    return len(BLANK_RE.findall(text))


def normalize_blank(raw: str | None) -> str:
    if not raw:
        return ""
    return raw.strip().lower()
