# fleetadmin/routers/common.py
import logging
from fastapi import HTTPException, status

from fleetadmin.services.table_client import BackendError

logger = logging.getLogger(__name__)

CONFLICT_CODES = {"23503", "23505"} # foreign key / unique violations
NOT_FOUND_CODES = {"PGRST116"} # zero rows where exactly one was expected


def backend_http_error(error: BackendError, message: str) -> HTTPException:
    """Translates a failed backend write into the HTTP error shown to the user."""
    if error.code in CONFLICT_CODES:
        status_code = status.HTTP_409_CONFLICT
    elif error.code in NOT_FOUND_CODES:
        status_code = status.HTTP_404_NOT_FOUND
    else:
        status_code = status.HTTP_502_BAD_GATEWAY

    logger.error(f"{message} Backend error: {error.to_dict()}")
    return HTTPException(
        status_code=status_code,
        detail={"status": False, "message": message, "error": error.to_dict()}
    )
