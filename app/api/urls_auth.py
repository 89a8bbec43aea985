from typing import Annotated

from fastapi import APIRouter, Depends, Response
from loguru import logger

from app.api.deps import CurrentUser, SessionsDep, get_auth_service, session_token
from app.core.exceptions import UnauthenticatedError
from app.schemas.users import LoginRequest, UserResponse
from app.services.auth_service import AuthService

auth_router = APIRouter(prefix="/auth")


@auth_router.post("/login", response_model=UserResponse)
async def login(
        credentials: LoginRequest,
        response: Response,
        sessions: SessionsDep,
        auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    user = auth_service.authenticate_user(credentials.email, credentials.password)
    if not user:
        raise UnauthenticatedError("Invalid credentials")

    token, record = sessions.create_session(user.id)
    response.set_cookie(
        key=sessions.config.cookie_name,
        value=token,
        max_age=int(sessions.max_age.total_seconds()),
        httponly=True,
        secure=sessions.config.secure_cookie,
        samesite="lax",
    )
    logger.info(f"User {user.id} logged in")
    return {"user": user}


@auth_router.post("/logout")
async def logout(
        response: Response,
        sessions: SessionsDep,
        token: Annotated[str | None, Depends(session_token)],
):
    sessions.destroy(token)
    response.delete_cookie(sessions.config.cookie_name)
    return {"message": "Logged out successfully"}


@auth_router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: CurrentUser):
    return {"user": current_user}
