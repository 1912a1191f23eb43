from fastapi import APIRouter, Depends, HTTPException, Request, Response
from app.config.settings import settings
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    RefreshRequest, VerifyRequest, EmailRequest, PasswordUpdateRequest, MessageResponse
)
from app.modules.auth.service import AuthService
from app.modules.profiles.service import ProfileService
from app.core.dependencies import (
    get_auth_service, get_access_token, get_optional_access_token, get_current_user,
    get_user_supabase, get_optional_system_supabase
)
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookies(response: Response, tokens: TokenResponse) -> None:
    cookie_args = {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "lax",
        "path": "/",
    }
    response.set_cookie(
        settings.access_cookie_name, tokens.access_token, max_age=tokens.expires_in, **cookie_args
    )
    if tokens.refresh_token:
        response.set_cookie(settings.refresh_cookie_name, tokens.refresh_token, **cookie_args)


def _clear_session_cookies(response: Response) -> None:
    response.delete_cookie(settings.access_cookie_name, path="/")
    response.delete_cookie(settings.refresh_cookie_name, path="/")


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user; Supabase sends the verification email"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service)
):
    """Login, set the session cookies and return the tokens"""
    tokens = service.login(login_data)
    _set_session_cookies(response, tokens)
    return tokens


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    request: Request,
    response: Response,
    body: Optional[RefreshRequest] = None,
    service: AuthService = Depends(get_auth_service)
):
    """Refresh the session from the body or the refresh cookie"""
    refresh_token = (body.refresh_token if body else None) or request.cookies.get(settings.refresh_cookie_name)
    if not refresh_token:
        raise HTTPException(status_code=401, detail="Unauthorized")
    tokens = service.refresh(refresh_token)
    _set_session_cookies(response, tokens)
    return tokens


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    token: Optional[str] = Depends(get_optional_access_token),
    service: AuthService = Depends(get_auth_service),
    admin: Optional[Client] = Depends(get_optional_system_supabase)
):
    """Logout: revoke the session when possible and always clear the cookies"""
    if token:
        service.logout(token, admin)
    _clear_session_cookies(response)
    return MessageResponse(message="Logged out successfully")


@router.get("/me")
async def get_me(
    current_user: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_user_supabase),
):
    """Get current authenticated user and their profile"""
    profile = ProfileService(supabase).find_profile(current_user["id"])
    return {
        **current_user,
        "profile": profile.model_dump(by_alias=True) if profile else None,
    }


@router.post("/verify", response_model=TokenResponse)
async def verify(
    verify_data: VerifyRequest,
    response: Response,
    service: AuthService = Depends(get_auth_service)
):
    """Confirm an email verification or recovery link"""
    tokens = service.verify(verify_data.token_hash, verify_data.type)
    _set_session_cookies(response, tokens)
    return tokens


@router.post("/verify/resend", response_model=MessageResponse)
async def resend_verification(
    email_data: EmailRequest,
    service: AuthService = Depends(get_auth_service)
):
    service.resend_verification(email_data.email)
    return MessageResponse(message="Verification email sent")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    email_data: EmailRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send a password reset link; the response is the same whether or not the email exists"""
    service.request_password_reset(email_data.email)
    return MessageResponse(message="If an account exists for this email, a reset link has been sent")


@router.post("/reset-password/update", response_model=MessageResponse)
async def update_password(
    password_data: PasswordUpdateRequest,
    request: Request,
    token: str = Depends(get_access_token),
    service: AuthService = Depends(get_auth_service)
):
    """Set a new password for the caller (usually holding a recovery session)"""
    refresh_token = password_data.refresh_token or request.cookies.get(settings.refresh_cookie_name)
    if not refresh_token:
        raise HTTPException(status_code=401, detail="Unauthorized")
    service.update_password(token, refresh_token, password_data.password)
    return MessageResponse(message="Password updated successfully")
