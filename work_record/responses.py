"""JSON response bodies for the HTTP API."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class JsonResponse:
    """A JSON payload with its HTTP status."""

    payload: Any
    status: int = 200
    content_type: str = JSON_CONTENT_TYPE

    def body(self) -> str:
        """Serialise the payload compactly with sorted keys."""
        return json.dumps(
            self.payload, ensure_ascii=False, separators=(",", ":"), sort_keys=True
        )


def send_success(data: Any = None, message: str = "") -> JsonResponse:
    """A successful response wrapping data, with an optional message."""
    payload: dict[str, Any] = {"success": True, "data": data}
    if message:
        payload["message"] = message
    return JsonResponse(payload)


def send_error(message: str, status_code: int = 500) -> JsonResponse:
    """An error response with the given status."""
    return JsonResponse({"error": False, "message": message}, status_code)


def send_internal_error() -> JsonResponse:
    """A 500 response with the generic server error message."""
    return send_error("服务器内部错误", 500)


def send_bad_request(message: str) -> JsonResponse:
    """A 400 response."""
    return send_error(message, 400)


def send_not_found(message: str) -> JsonResponse:
    """A 404 response."""
    return send_error(message, 404)


def send_operation_failed(operation: str, entity: str) -> JsonResponse:
    """A 500 response saying that an operation on an entity failed."""
    return send_error(f"{entity}{operation}失败")


def send_data_direct(data: Any) -> JsonResponse:
    """A response whose body is the data itself, not wrapped."""
    return JsonResponse(data)