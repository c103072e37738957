"""
Request body validation shared by the v1 views.
"""

from typing import Any, Dict, Type

from rest_framework import serializers

from core.domain.exceptions import BadRequestError
from core.instrumentation import Status, StatusCode


def _first_error(errors: Dict[str, Any]) -> str:
    field, messages = next(iter(errors.items()))
    message = messages[0] if isinstance(messages, list) and messages else messages
    if isinstance(message, dict):
        return _first_error(message)
    if field == "non_field_errors":
        return str(message)
    return f"{field}: {message}"


def validated_data(serializer_class: Type[serializers.Serializer], data: Any, span=None) -> Dict:
    """
    Validate a request body.

    Raises:
        BadRequestError: With the first field error
    """
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        if span is not None:
            span.set_attribute("error", "validation_failed")
            span.set_attribute("error.details", str(serializer.errors))
            span.set_status(Status(StatusCode.ERROR, "Validation failed"))
        raise BadRequestError(_first_error(serializer.errors))
    return serializer.validated_data
