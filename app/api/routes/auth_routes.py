# app/api/routes/auth_routes.py
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status

from app.core.config import Settings
from app.core.dependencies import get_settings, get_store
from app.core.security import auth_rate_limit, limiter
from app.models.activity_models import ActivityAction
from app.models.auth_models import (
    AuthResponse,
    SigninRequest,
    SignupRequest,
    TokenResponse,
    UserRecord,
    VerificationRequest,
    VerifyCodeRequest,
)
from app.services import auth_services
from app.services.activity_services import schedule_activity
from app.services.auth_services import create_access_token, get_current_user, to_public
from app.services.database.base_store import PromptLibraryStore
from app.services.prompt_services import list_favorites

router = APIRouter(tags=["Authentication"])


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=AuthResponse)
@limiter.limit(auth_rate_limit)
async def signup(
    request: Request,
    body: SignupRequest,
    background_tasks: BackgroundTasks,
    store: PromptLibraryStore = Depends(get_store),
    app_settings: Settings = Depends(get_settings),
):
    """Register a new user with email and password."""
    token, user = await auth_services.signup(store, app_settings, body)
    schedule_activity(background_tasks, store, request, ActivityAction.USER_SIGNUP, user.id, {"provider": "email"})
    return AuthResponse(token=token, user=to_public(user))


@router.post("/signin", response_model=AuthResponse)
@limiter.limit(auth_rate_limit)
async def signin(
    request: Request,
    body: SigninRequest,
    background_tasks: BackgroundTasks,
    store: PromptLibraryStore = Depends(get_store),
    app_settings: Settings = Depends(get_settings),
):
    token, user = await auth_services.signin(store, app_settings, body)
    schedule_activity(background_tasks, store, request, ActivityAction.USER_SIGNIN, user.id, {"provider": "email"})
    return AuthResponse(token=token, user=to_public(user))


@router.post("/send-verification")
@limiter.limit(auth_rate_limit)
async def send_verification(
    request: Request,
    body: VerificationRequest,
    store: PromptLibraryStore = Depends(get_store),
    app_settings: Settings = Depends(get_settings),
):
    """Issue a one-time sign-in code for the address."""
    await auth_services.send_verification_code(store, app_settings, body.email, body.name)
    return {"success": True, "message": "Verification code sent"}


@router.post("/verify-code", response_model=AuthResponse)
@limiter.limit(auth_rate_limit)
async def verify_code(
    request: Request,
    body: VerifyCodeRequest,
    background_tasks: BackgroundTasks,
    store: PromptLibraryStore = Depends(get_store),
    app_settings: Settings = Depends(get_settings),
):
    token, user = await auth_services.verify_code(store, app_settings, body.email, body.code)
    schedule_activity(
        background_tasks, store, request, ActivityAction.USER_SIGNIN, user.id, {"provider": "verification_code"}
    )
    return AuthResponse(token=token, user=to_public(user))


@router.get("/me")
async def me(user: UserRecord = Depends(get_current_user)):
    return {"success": True, "user": to_public(user)}


@router.get("/me/favorites")
async def my_favorites(
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    return {"data": await list_favorites(store, user)}


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    user: UserRecord = Depends(get_current_user),
    app_settings: Settings = Depends(get_settings),
):
    """Re-issue a token for a still-valid one."""
    return TokenResponse(token=create_access_token(user, app_settings))


@router.get("/google")
@router.get("/microsoft")
async def oauth_redirect():
    raise HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail="OAuth not implemented yet - coming soon!")
