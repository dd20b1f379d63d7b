"""Helpers shared by the routers: id parameters, delete envelopes and login throttling."""

import logging
from typing import Annotated, Any, Callable, Dict

from fastapi import HTTPException, Path, Query, Request

from ..config import settings
from ..errors import UnauthorizedError
from ..services import MAX_DB_INT
from ..utils.rate_limit import LoginThrottle

logger = logging.getLogger("readingclub.api")

login_throttle = LoginThrottle(settings.LOGIN_MAX_FAILURES, settings.LOGIN_LOCKOUT_SECONDS)

IdPath = Annotated[int, Path(ge=1, le=MAX_DB_INT)]


def id_query(alias: str, default: Any = ...) -> Any:
    """Query parameter holding a row id, kept inside the 64-bit column range."""
    return Query(default, alias=alias, ge=1, le=MAX_DB_INT)


def deleted(what: str) -> Dict:
    return {"success": True, "message": f"{what} deleted successfully"}


def guarded_login(request: Request, account: str, login: Callable[[], Dict]) -> Dict:
    """Run `login` unless this client/account pair is locked out.

    Failed attempts (UnauthorizedError) are counted; a success clears
    the counter for the pair.
    """
    client = request.client.host if request.client else "unknown"
    key = f"{client}:{request.url.path}:{account}"
    allowed, retry_after = login_throttle.check(key)
    if not allowed:
        logger.warning("login_locked_out client=%s account=%s retry_after=%s", client, account, retry_after)
        raise HTTPException(
            status_code=429,
            detail=f"too many failed login attempts; retry after {retry_after}s",
            headers={"Retry-After": str(retry_after)},
        )
    try:
        result = login()
    except UnauthorizedError:
        login_throttle.record_failure(key)
        raise
    login_throttle.reset(key)
    return result
