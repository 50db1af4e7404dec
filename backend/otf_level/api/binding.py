import json
from typing import Any

from fastapi import HTTPException, Request, status

FORM_CONTENT_TYPES = {"application/x-www-form-urlencoded", "multipart/form-data"}


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";", 1)[0].strip().lower()


def _drop_blank(values: dict[str, Any]) -> dict[str, Any]:
    # an empty form/query field counts as not supplied
    return {key: value for key, value in values.items() if not (isinstance(value, str) and not value.strip())}


async def decode_level_fields(request: Request) -> dict[str, Any]:
    """Collect level request fields in one pass.

    Query-string fields are read first; fields from the body (json or form,
    chosen by content type, json when none is given) override them. Other
    body types are ignored.
    """
    fields: dict[str, Any] = _drop_blank(dict(request.query_params))

    media_type = _media_type(request)
    # a body with no content type is read as json
    if not media_type or media_type == "application/json" or media_type.endswith("+json"):
        raw = await request.body()
        if not raw.strip():
            return fields
        try:
            body = json.loads(raw)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Malformed json body: {exc}") from exc
        if not isinstance(body, dict):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Json body must be an object")
        fields.update(body)
    elif media_type in FORM_CONTENT_TYPES:
        form = await request.form()
        form_fields = {key: value for key, value in form.items() if isinstance(value, str)}
        fields.update(_drop_blank(form_fields))

    return fields
