# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, ClassVar


@dataclass(slots=True)
class AppError(Exception):
    """Error with a stable wire code.

    Only ``code`` and ``context`` reach the client. Anything that helps an
    operator (causes, reasons) goes to the log via :meth:`log_detail`.
    """

    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload

    def log_detail(self) -> str:
        return self.code


class DomainError(AppError):
    """Subclasses pin ``default_code`` and ``default_status``."""

    default_code: ClassVar[str] = "domain_error"
    default_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_REQUEST

    def __init__(self, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(
            code=type(self).default_code,
            status=type(self).default_status,
            context=context,
        )


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(code=code, status=status)


class StoreUnavailableError(InfrastructureError):
    """The relational store refused a connection or dropped it mid-request."""

    def __init__(self) -> None:
        super().__init__("store_unavailable", status=HTTPStatus.SERVICE_UNAVAILABLE)


class ValidationError(AppError):
    def __init__(self, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(
            code="validation_error",
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            context=context,
        )
