from typing import Any

from pydantic import BaseModel


def success(data: Any = None, message: str = "Success") -> dict:
    """Standard ``{"message", "data"}`` envelope."""
    body = {"message": message}
    if data is not None:
        body["data"] = data
    return body


def error_body(message: str, details: Any = None, include_details: bool = True) -> dict:
    body = {"error": message}
    if details is not None and include_details:
        body["details"] = details
    return body


def serialize(schema: type[BaseModel], obj: Any):
    """ORM object (or list of them) to JSON-ready data through ``schema``."""
    if isinstance(obj, (list, tuple)):
        return [serialize(schema, item) for item in obj]
    return schema.model_validate(obj).model_dump(mode="json")
