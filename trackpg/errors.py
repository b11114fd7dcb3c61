# -*- coding: utf-8 -*-
"""Error taxonomy shared by the aggregators, the vision client and the API."""

from __future__ import annotations

from typing import Any, Dict, Optional


class TrackError(Exception):
    """Base class; carries a user-facing message and optional details."""

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(TrackError):
    """Missing or invalid input fields. No mutation was attempted."""


class NotFoundError(TrackError):
    """Delete (or lookup) of an id that is not in the active collection."""


class PersistenceError(TrackError):
    """Storage read/write failure."""

    def __init__(self, message: str, key: str | None = None, details: Optional[str] = None) -> None:
        super().__init__(message, details)
        self.key = key


class ExternalAnalysisError(TrackError):
    """Vision model call failed or returned output that does not fit the nutrition schema."""

    def __init__(self, message: str, details: Optional[str] = None, raw_text: Optional[str] = None) -> None:
        super().__init__(message, details)
        self.raw_text = raw_text
