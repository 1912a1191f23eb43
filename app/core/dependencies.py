"""
Core dependencies for route protection and Supabase client contexts.

Two write paths exist and must stay separate:
- caller-scoped: anon key + the caller's JWT, subject to RLS
- system context: service role key, bypasses RLS (setup, admin auth calls,
  the profile fallback insert)
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config.settings import settings
from app.database.supabase_client import (
    SupabaseClient, SystemContextUnavailable, get_supabase, get_service_supabase
)
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_optional_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> Optional[str]:
    """Bearer token from the Authorization header, falling back to the session cookie"""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.access_cookie_name) or None


def get_access_token(token: Optional[str] = Depends(get_optional_access_token)) -> str:
    if token:
        return token
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def get_current_user(
    token: str = Depends(get_access_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """Resolve the authenticated caller; 401 when the session is missing or invalid"""
    return auth_service.get_current_user(token)


def get_user_supabase(
    token: str = Depends(get_access_token),
    current_user: Dict[str, Any] = Depends(get_current_user)
) -> Client:
    """Caller-scoped client. Depends on get_current_user so the token is validated first."""
    return SupabaseClient.get_user_client(token)


def get_system_supabase() -> Client:
    """System-context client; never handed to code acting on behalf of a caller"""
    try:
        return get_service_supabase()
    except SystemContextUnavailable as e:
        logger.error("System context requested but unavailable: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error"
        )


def get_optional_system_supabase() -> Optional[Client]:
    try:
        return get_service_supabase()
    except SystemContextUnavailable:
        return None


def require_development() -> None:
    """Block development-only endpoints in production"""
    if settings.is_production:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This endpoint is only available in development"
        )
