"""Bearer session dependency and logout endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from dish_nutrition.domain.sessions import AuthSession

if TYPE_CHECKING:
    from dish_nutrition.containers import AppContainer

router = APIRouter(prefix="/auth", tags=["auth"])

_BEARER_PREFIX = "bearer "


def _parse_bearer(authorization: str | None) -> str | None:
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        return None
    token = authorization[len(_BEARER_PREFIX) :].strip()
    return token or None


async def require_session(
    request: Request, authorization: str | None = Header(default=None)
) -> AuthSession:
    """Resolve the request's bearer token into an active session."""
    container: AppContainer = request.app.state.container
    session = container.session_service.resolve(_parse_bearer(authorization))
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


@router.post("/logout")
async def logout(
    request: Request, session: AuthSession = Depends(require_session)
) -> dict[str, str]:
    """Revoke the current session."""
    container: AppContainer = request.app.state.container
    container.session_service.revoke(session.token)
    return {"status": "ok"}
