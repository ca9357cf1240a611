"""Path/body parsing helpers that never coerce malformed input.

A year that is not a plain run of digits is handed to the services as-is,
where `year_is_valid` rejects it with `invalid_year`; nothing is silently
rounded, clamped or defaulted.
"""
from __future__ import annotations

import re
from typing import Any, Optional

from fastapi import Request

from yearboard.dashboard.entities import ContentKind
from yearboard.dashboard.errors import BadRequest, NotFound

_DIGITS = re.compile(r"[0-9]{1,9}")


def parse_year_param(raw: str) -> object:
    if isinstance(raw, str) and _DIGITS.fullmatch(raw):
        return int(raw)
    return raw


def parse_id_param(raw: str) -> int:
    if isinstance(raw, str) and _DIGITS.fullmatch(raw):
        return int(raw)
    raise BadRequest("invalid_id")


def resolve_kind(segment: str) -> ContentKind:
    kind: Optional[ContentKind] = ContentKind.from_segment(segment)
    if kind is None:
        raise NotFound("unknown_content_kind")
    return kind


async def read_json_body(request: Request) -> Any:
    try:
        return await request.json()
    except (ValueError, RecursionError) as exc:
        # ValueError covers JSONDecodeError, UnicodeDecodeError and oversized int literals
        raise BadRequest("invalid_json") from exc
