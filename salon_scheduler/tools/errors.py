from fastapi import HTTPException

from salon_scheduler.services.exceptions import (
    AmbiguousBlockRuleError,
    InvalidStateError,
    InvalidTimeFormatError,
    NotFoundError,
    ServiceError,
    SlotUnavailableError,
)

_STATUS_CODES = (
    (NotFoundError, 404),
    (SlotUnavailableError, 409),
    (InvalidStateError, 409),
    (AmbiguousBlockRuleError, 422),
    (InvalidTimeFormatError, 422),
)


def to_http_exception(exc: ServiceError) -> HTTPException:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=502, detail=str(exc))
