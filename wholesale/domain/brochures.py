"""
Domain model for the document download center: brochures and price lists
salespeople hand to clients.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime

from wholesale.domain.errors import InvalidInputError, UnknownReferenceError
from wholesale.domain.ids import time_derived_id

MAX_BROCHURE_SIZE = 5 * 1024 * 1024

ALLOWED_BROCHURE_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)


def validate_brochure_file(size: int, content_type: str) -> None:
    """Reject files over 5 MB and anything that is not PDF, Word or Excel."""
    if isinstance(size, bool) or not isinstance(size, int) or size < 0:
        raise InvalidInputError(f"File size must be a non-negative integer, got {size!r}")
    if size > MAX_BROCHURE_SIZE:
        raise InvalidInputError("File is too large. Maximum size is 5MB.")
    if content_type not in ALLOWED_BROCHURE_TYPES:
        raise InvalidInputError("Invalid file type. Please upload PDF, Word, or Excel files.")


def format_file_size(size: int) -> str:
    """Human readable size: "512 B", "953.7 KB", "2.3 MB"."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


@dataclass(frozen=True)
class Brochure:
    id: str
    name: str
    size: int
    content_type: str
    upload_date: datetime
    url: str = "#"
    download_count: int = 0

    @property
    def size_label(self) -> str:
        return format_file_size(self.size)


class BrochureRegistry:
    """Brochure metadata, newest upload first."""

    def __init__(self, brochures: Iterable[Brochure] = ()):
        self._brochures: list[Brochure] = list(brochures)

    @property
    def brochures(self) -> list[Brochure]:
        return list(self._brochures)

    def get(self, brochure_id: str) -> Brochure | None:
        for brochure in self._brochures:
            if brochure.id == brochure_id:
                return brochure
        return None

    def add(self, name: str, size: int, content_type: str, now: datetime, url: str = "#") -> Brochure:
        """Register an uploaded file's metadata at the top of the list."""
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("File name is required")
        validate_brochure_file(size, content_type)
        brochure = Brochure(
            id=time_derived_id("brochure-", now, {b.id for b in self._brochures}),
            name=name,
            size=size,
            content_type=content_type,
            upload_date=now,
            url=url or "#",
        )
        self._brochures.insert(0, brochure)
        return brochure

    def record_download(self, brochure_id: str) -> Brochure:
        current = self._require(brochure_id)
        updated = replace(current, download_count=current.download_count + 1)
        self._brochures = [updated if b.id == brochure_id else b for b in self._brochures]
        return updated

    def delete(self, brochure_id: str) -> Brochure:
        brochure = self._require(brochure_id)
        self._brochures = [b for b in self._brochures if b.id != brochure_id]
        return brochure

    def _require(self, brochure_id: str) -> Brochure:
        brochure = self.get(brochure_id)
        if brochure is None:
            raise UnknownReferenceError(f"Brochure {brochure_id} not found")
        return brochure
