"""OperationResult — the plain record every core operation returns."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from fieldservice.domain.errors import (
    CollaboratorError,
    ConflictError,
    FieldServiceError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    COLLABORATOR = "collaborator"


_CODE_BY_ERROR: list[tuple[type[FieldServiceError], ErrorCode]] = [
    (ValidationError, ErrorCode.VALIDATION),
    (NotFoundError, ErrorCode.NOT_FOUND),
    (ConflictError, ErrorCode.CONFLICT),
    (CollaboratorError, ErrorCode.COLLABORATOR),
]


@dataclass
class OperationResult:
    """Outcome of a lifecycle / assignment operation.

    Expected failures (not found, invalid status, conflicts) come back as
    success=False with a code; they are never raised past the use case.
    """

    success: bool
    message: str | None = None
    data: Any = None
    error: str | None = None
    code: ErrorCode | None = None
    retryable: bool = False

    @classmethod
    def ok(cls, message: str | None = None, data: Any = None) -> OperationResult:
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(
        cls, code: ErrorCode, message: str, error: str | None = None,
        retryable: bool = False,
    ) -> OperationResult:
        return cls(success=False, message=message, code=code, error=error, retryable=retryable)

    @classmethod
    def from_error(cls, exc: FieldServiceError) -> OperationResult:
        code = next(
            (c for err_type, c in _CODE_BY_ERROR if isinstance(exc, err_type)),
            ErrorCode.COLLABORATOR,
        )
        return cls.fail(
            code, str(exc), retryable=bool(getattr(exc, "retryable", False))
        )


async def guarded(action: str, run: Callable[[], Awaitable[OperationResult]]) -> OperationResult:
    """Run a use-case body under the shared error policy.

    Expected failures become their coded result; anything else is logged and
    reported as a COLLABORATOR failure instead of escaping to the caller.
    """
    try:
        return await run()
    except FieldServiceError as e:
        logger.info("Failed %s: %s", action, e)
        return OperationResult.from_error(e)
    except Exception as e:
        logger.exception("Error %s", action)
        return OperationResult.fail(
            ErrorCode.COLLABORATOR, f"An error occurred while {action}", error=str(e)
        )
