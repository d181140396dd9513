# mspdesk/app/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError

from .settings import get_settings

logger = logging.getLogger(__name__)

# SQLSTATE raised by the store when the session lacks privileges
INSUFFICIENT_PRIVILEGE = "42501"


def sqlstate(exc: Exception):
    orig = getattr(exc, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"detail": "conflicts with an existing record"})


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    if isinstance(exc, DBAPIError) and sqlstate(exc) == INSUFFICIENT_PRIVILEGE:
        login_url = get_settings().LOGIN_URL
        logger.info("store rejected session on %s %s, redirecting to login", request.method, request.url.path)
        return JSONResponse(status_code=401,
                            content={"detail": "not authorized", "code": INSUFFICIENT_PRIVILEGE,
                                     "login_url": login_url},
                            headers={"Location": login_url})
    logger.error("database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "database error"})


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
