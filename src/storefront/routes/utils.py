from typing import Optional, Type, TypeVar

import pydantic
from flask import jsonify, request
from marshmallow import Schema

from storefront.core.dependencies import get_service
from storefront.core.exceptions import UnauthorizedError, ValidationError
from storefront.services.user_service import UserService
from storefront.utils.formatting_utils import FormattingUtils

M = TypeVar("M", bound=pydantic.BaseModel)


def success_response(data, message: Optional[str] = None, status: int = 200):
    """Consistent success response envelope."""
    return jsonify(FormattingUtils.format_api_response(data, message)), status


def no_content():
    return "", 204


def parse_int(
    v,
    default=None,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
    field_name: str = "value",
) -> Optional[int]:
    """Parse an integer query parameter with optional range validation."""
    if v is None or v == "":
        return default
    try:
        result = int(v)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid {field_name}: must be a valid integer",
            field_errors=[{"field": field_name, "message": "must be an integer"}],
        )
    if min_val is not None and result < min_val:
        raise ValidationError(
            f"{field_name} must be at least {min_val}",
            field_errors=[{"field": field_name, "message": f"must be at least {min_val}"}],
        )
    if max_val is not None and result > max_val:
        raise ValidationError(
            f"{field_name} cannot exceed {max_val}",
            field_errors=[{"field": field_name, "message": f"cannot exceed {max_val}"}],
        )
    return result


def parse_id(v: str, field_name: str) -> int:
    """Parse a numeric path segment; malformed ids are a 400, not a 404."""
    return parse_int(v, min_val=1, field_name=field_name)


def load_body(schema: Schema) -> dict:
    """
    Load the JSON body through a marshmallow schema.

    marshmallow.ValidationError propagates to the app's error handler.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return schema.load(data)


def build_request(model: Type[M], data: dict) -> M:
    """Turn loaded body data into a typed service request."""
    try:
        return model(**data)
    except pydantic.ValidationError as e:
        field_errors = [
            {"field": ".".join(str(p) for p in err["loc"]) or "body", "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError("Validation failed", field_errors=field_errors)


def get_current_user_id() -> int:
    """Resolve the Authorization: Bearer token to the calling user's id."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError("Missing bearer token")
    return get_service(UserService).authenticate_token(token.strip())
