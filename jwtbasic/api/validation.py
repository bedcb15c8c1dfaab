"""Request validation decorator for Flask views.

@validate_request inspects the view's signature. A parameter annotated with
a pydantic model is built from the request body (JSON, or form data for
HTML forms); every other parameter is a path parameter and passes through
untouched.

Example:
    @auth_bp.post("/Login")
    @validate_request
    def login(data: UserLogin):
        ...
"""

from functools import wraps
from typing import get_type_hints

from flask import request
from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..exceptions import ValidationError

# Body fields whose values are never echoed back in error details
REDACTED_FIELDS = {"password", "secret"}


def _find_model_param(f) -> tuple[str, type[BaseModel]] | None:
    hints = get_type_hints(f)
    hints.pop("return", None)
    for name, annotation in hints.items():
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            return name, annotation
    return None


def _request_body() -> dict:
    body = request.get_json(silent=True)
    if body is None and request.form:
        body = request.form.to_dict()
    return body if isinstance(body, dict) else {}


def _redact(body: dict) -> dict:
    return {
        key: "***" if key.lower() in REDACTED_FIELDS else value
        for key, value in body.items()
    }


def _format_errors(exc: PydanticValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "expected_type": err["type"],
        }
        for err in exc.errors()
    ]


def validate_request(f):
    """
    Decorator that validates the request body against the view's model.

    Raises:
        ValidationError: With details {model, received, errors} when the
            body does not satisfy the model
    """
    model_param = _find_model_param(f)

    @wraps(f)
    def wrapper(*args, **kwargs):
        if model_param is None:
            return f(*args, **kwargs)

        name, model = model_param
        body = _request_body()
        try:
            kwargs[name] = model.model_validate(body)
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid request data",
                {
                    "model": model.__name__,
                    "received": _redact(body),
                    "errors": _format_errors(e),
                }
            )
        return f(*args, **kwargs)

    return wrapper
