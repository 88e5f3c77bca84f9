from __future__ import annotations

from typing import Any, Optional, Sequence


class CatalogError(RuntimeError):
    """Base for failures the API turns into a structured error response."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def extra(self) -> dict[str, Any]:
        return {}

    def to_body(self) -> dict[str, Any]:
        return {"success": False, "error": self.code, "message": self.message, **self.extra()}


class ValidationFailed(CatalogError):
    status_code = 400
    code = "validation_error"

    def __init__(self, message: str, fields: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.fields = list(fields or [])

    def extra(self) -> dict[str, Any]:
        return {"fields": self.fields} if self.fields else {}


class UpstreamUnavailable(CatalogError):
    """The database or the object store could not serve the request."""

    status_code = 503
    code = "upstream_unavailable"

    def __init__(self, upstream: str, message: str) -> None:
        super().__init__(message)
        self.upstream = upstream

    def extra(self) -> dict[str, Any]:
        return {"upstream": self.upstream}
