"""JSON request and response helpers shared by the API views."""

import json
from typing import Any

from django.http import HttpRequest, JsonResponse


def error_response(message: str, status: int) -> JsonResponse:
    """Build the JSON error body used by every endpoint.

    Args:
        message: Human readable reason.
        status: HTTP status code.

    Returns:
        JsonResponse with a ``message`` field.
    """
    return JsonResponse({'message': message}, status=status)


def read_json(request: HttpRequest) -> dict[str, Any]:
    """Parse a JSON object body, falling back to form data.

    Args:
        request: Incoming request.

    Returns:
        Body fields; empty dict for an empty body.

    Raises:
        ValueError: If the body is not a JSON object.
    """
    if request.content_type != 'application/json':
        return request.POST.dict()
    if not request.body:
        return {}

    payload = json.loads(request.body)
    if not isinstance(payload, dict):
        raise ValueError('Request body must be a JSON object')
    return payload
