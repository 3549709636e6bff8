from fastapi import HTTPException

from portal.core.exceptions import PortalError


def http_error(exc: PortalError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)
