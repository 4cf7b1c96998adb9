# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def _field_name(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) or "body"


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Group pydantic errors by field: ``{"fields": {"email": [{...}]}}``.

    Input values are never echoed back; a rejected password stays out of
    the response.
    """
    fields: dict[str, list[dict[str, str]]] = {}
    for error in exc.errors(include_input=False, include_url=False, include_context=False):
        fields.setdefault(_field_name(error["loc"]), []).append(
            {"type": error["type"], "message": error["msg"]}
        )
    return {"fields": fields}


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError(context=format_pydantic_errors(exc)) from exc


__all__ = ["format_pydantic_errors", "raise_validation_error"]
