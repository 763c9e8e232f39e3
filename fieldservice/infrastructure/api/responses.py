"""OperationResult → HTTP: status mapping and per-request commit/rollback."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from fieldservice.application.results import ErrorCode, OperationResult

logger = logging.getLogger(__name__)

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.COLLABORATOR: 502,
}


def http_status_for(result: OperationResult) -> int:
    return STATUS_BY_CODE.get(result.code, 500)


async def respond(
    session: AsyncSession,
    result: OperationResult,
    serialize: Callable[[Any], Any] | None = None,
) -> dict:
    """Commit and render a successful result, or roll back and raise.

    Every write an operation made lives in the request's session, so a
    failed result discards all of them together.
    """
    if not result.success:
        await session.rollback()
        logger.info("Request failed (%s): %s", result.code, result.message)
        raise HTTPException(
            status_code=http_status_for(result),
            detail={
                "message": result.message,
                "error": result.error,
                "retryable": result.retryable,
            },
        )

    await session.commit()
    data = serialize(result.data) if serialize and result.data is not None else result.data
    return {"success": True, "message": result.message, "data": data}
