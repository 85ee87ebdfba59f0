from typing import TypeVar

from fastapi import HTTPException, Request
from pydantic import BaseModel, ValidationError
from starlette import status
from starlette.datastructures import UploadFile

ModelT = TypeVar("ModelT", bound=BaseModel)


def validation_detail(exc: ValidationError) -> dict:
    return {
        "message": "Validation failed",
        "errors": [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ],
    }


def parse_form(schema: type[ModelT], data: dict) -> ModelT:
    """Validate submitted fields with a pydantic schema.

    Empty strings mean "not supplied", which is how browsers submit
    untouched inputs.
    """
    cleaned = {k: v for k, v in data.items() if v is not None and v != ""}
    try:
        return schema.model_validate(cleaned)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=validation_detail(exc),
        )


async def read_form(request: Request) -> tuple[dict, dict[str, list[UploadFile]]]:
    """Split a multipart (or JSON) body into plain fields and uploaded files.

    Repeated fields become lists and a trailing ``[]`` on a field name is
    ignored, so ``images`` and ``images[]`` are the same field.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Request body must be a JSON object",
            )
        return body, {}

    form = await request.form()
    fields: dict = {}
    files: dict[str, list[UploadFile]] = {}
    for raw_key, value in form.multi_items():
        key = raw_key[:-2] if raw_key.endswith("[]") else raw_key
        if isinstance(value, UploadFile):
            files.setdefault(key, []).append(value)
        elif key in fields:
            existing = fields[key]
            fields[key] = (existing if isinstance(existing, list) else [existing]) + [value]
        else:
            fields[key] = value
    return fields, files


def int_list(value, field: str) -> list[int]:
    """``1,2`` / ``["1", "2"]`` / ``[1, 2]`` to a list of ints."""
    if value is None or value == "":
        return []
    items = value if isinstance(value, list) else str(value).split(",")
    try:
        return [int(str(item).strip()) for item in items if str(item).strip()]
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{field} must contain integer IDs",
        )


def optional_int(value, field: str) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{field} must be an integer",
        )
