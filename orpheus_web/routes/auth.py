"""Cookie login/logout routes outside the RPC surface."""

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from orpheus_common.config import Settings
from orpheus_common.errors import BadRequestError
from orpheus_common.logging import get_logger
from orpheus_web.dependencies import get_db_session, get_session_service, get_settings_state
from orpheus_web.schemas import LoginInput
from orpheus_web.services.sessions import SessionService, session_cookie_options
from orpheus_web.services.users import login_with_password

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/api/auth/login")
async def login_action(
    request: Request,
    response: Response,
    session=Depends(get_db_session),
    settings: Settings = Depends(get_settings_state),
    sessions: SessionService = Depends(get_session_service),
):
    try:
        credentials = LoginInput.model_validate(await request.json())
    except (ValueError, ValidationError) as exc:
        raise BadRequestError("Email and password are required") from exc

    result = await login_with_password(
        session,
        sessions,
        settings.auth,
        email=credentials.email,
        password=credentials.password,
    )

    response.set_cookie(
        sessions.cookie_name,
        result.token,
        max_age=int(sessions.default_ttl.total_seconds()),
        **session_cookie_options(request, settings.is_production),
    )
    user = result.user
    return {
        "success": True,
        "user": {
            "id": user.id,
            "email": user.email,
            "name": user.name,
            "role": user.role.value,
        },
    }


@router.post("/api/auth/logout")
async def logout_action(
    request: Request,
    response: Response,
    settings: Settings = Depends(get_settings_state),
    sessions: SessionService = Depends(get_session_service),
):
    response.delete_cookie(
        sessions.cookie_name,
        **session_cookie_options(request, settings.is_production),
    )
    return {"success": True}


@router.get("/api/auth/check")
async def auth_check():
    # Kept for older front ends; the session lives behind auth.me
    return {"authenticated": False, "message": "Use /api/rpc/auth.me instead"}


@router.get("/api/oauth/callback")
async def legacy_oauth_callback():
    logger.warning("legacy_oauth_callback_accessed")
    return RedirectResponse(url="/?error=oauth_not_supported", status_code=302)
