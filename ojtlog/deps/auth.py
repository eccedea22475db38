from __future__ import annotations

import logging

from fastapi import Header, Request
from fastapi.security.utils import get_authorization_scheme_param

from ..core.security import decode_token
from ..middlewares import principal_ctx_var
from ..services.identity import StaticIdentity

logger = logging.getLogger(__name__)


def _set_principal(request: Request, principal: str) -> None:
    principal_ctx_var.set(principal)
    request.state.principal = principal


async def current_identity(
    request: Request,
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> StaticIdentity:
    """Resolve the caller from a bearer token.

    A missing or invalid token yields an anonymous identity rather than a 401:
    reads then come back empty and writes are refused by the repository.
    """
    if not authorization:
        return StaticIdentity(None)
    scheme, credentials = get_authorization_scheme_param(authorization)
    if scheme.lower() != "bearer" or not credentials:
        return StaticIdentity(None)
    try:
        payload = decode_token(credentials, config=request.app.state.settings)
    except ValueError as exc:
        logger.info("auth.token_rejected", extra={"extra_data": {"reason": str(exc)}})
        return StaticIdentity(None)
    _set_principal(request, payload.sub)
    return StaticIdentity(payload.sub)
