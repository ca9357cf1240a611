"""Content records shown on the year dashboards."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum


class ContentKind(str, Enum):
    """Content kinds; values double as URL path segments."""

    QUICK_ACCESS = "quick-access"
    ANNOUNCEMENTS = "announcements"
    RESOURCES = "resources"

    @classmethod
    def from_segment(cls, segment: str) -> "ContentKind | None":
        for kind in cls:
            if kind.value == segment:
                return kind
        return None


ANNOUNCEMENT_TYPES = ("info", "warning", "error")


@dataclass
class QuickAccessCard:
    id: int
    title: str
    description: str
    icon: str
    link: str
    year: int
    order: int


@dataclass
class Announcement:
    id: int
    title: str
    content: str
    type: str
    year: int
    created_at: datetime
    created_by: int


@dataclass
class Resource:
    id: int
    title: str
    description: str
    icon: str
    link: str
    year: int
    created_at: datetime
    created_by: int


ContentItem = QuickAccessCard | Announcement | Resource


def serialize_item(item: ContentItem) -> dict:
    data = asdict(item)
    created_at = data.get("created_at")
    if isinstance(created_at, datetime):
        data["created_at"] = created_at.isoformat()
    return data


__all__ = [
    "ContentKind",
    "ANNOUNCEMENT_TYPES",
    "QuickAccessCard",
    "Announcement",
    "Resource",
    "ContentItem",
    "serialize_item",
]
