import logging
from supabase import Client
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from app.config.settings import settings
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


def _token_response(auth_response, fallback_email: str = "") -> TokenResponse:
    session = auth_response.session
    user = auth_response.user or session.user
    return TokenResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        token_type="bearer",
        expires_in=session.expires_in,
        user_id=user.id,
        email=user.email or fallback_email,
    )


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth; the profile row comes from the signup trigger"""
        try:
            user_metadata = {}
            if register_data.full_name:
                user_metadata["full_name"] = register_data.full_name

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata,
                    "email_redirect_to": f"{settings.site_url}/verify",
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            # No session means the project requires email confirmation first
            verification_required = auth_response.session is None
            message = (
                "Check your email to verify your account"
                if verification_required
                else "User registered successfully"
            )
            return RegisterResponse(
                user_id=auth_response.user.id,
                email=auth_response.user.email or register_data.email,
                message=message,
                verification_required=verification_required,
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            logger.error("Registration failed: %s", error_message)
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            return _token_response(auth_response, login_data.email)
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e).lower()
            if "not confirmed" in error_message:
                raise HTTPException(status_code=403, detail="Email not verified")
            if "invalid" in error_message or "credentials" in error_message:
                raise HTTPException(status_code=401, detail="Invalid email or password")
            logger.error("Login failed: %s", e)
            raise HTTPException(status_code=500, detail=f"Login failed: {e}")

    def refresh(self, refresh_token: str) -> TokenResponse:
        """Exchange a refresh token for a new session"""
        try:
            auth_response = self.supabase.auth.refresh_session(refresh_token)
            if not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid or expired session")
            return _token_response(auth_response)
        except HTTPException:
            raise
        except Exception as e:
            logger.warning("Session refresh failed: %s", e)
            raise HTTPException(status_code=401, detail="Invalid or expired session")

    def verify(self, token_hash: str, otp_type: str) -> TokenResponse:
        """Confirm a signup/recovery link and open a session for it"""
        try:
            auth_response = self.supabase.auth.verify_otp({
                "token_hash": token_hash,
                "type": otp_type,
            })
            if not auth_response.session:
                raise HTTPException(status_code=400, detail="Invalid or expired verification link")
            return _token_response(auth_response)
        except HTTPException:
            raise
        except Exception as e:
            logger.warning("Email verification failed: %s", e)
            raise HTTPException(status_code=400, detail="Invalid or expired verification link")

    def resend_verification(self, email: str) -> None:
        try:
            self.supabase.auth.resend({
                "type": "signup",
                "email": email,
                "options": {"email_redirect_to": f"{settings.site_url}/verify"},
            })
        except Exception as e:
            error_message = str(e)
            if "rate limit" in error_message.lower():
                raise HTTPException(status_code=429, detail="Too many requests, try again later")
            logger.error("Resending verification email failed: %s", error_message)
            raise HTTPException(status_code=500, detail=f"Failed to resend verification email: {error_message}")

    def request_password_reset(self, email: str) -> None:
        """Send the reset email. Failures are logged, never reported, so emails cannot be probed."""
        try:
            self.supabase.auth.reset_password_for_email(
                email,
                {"redirect_to": f"{settings.site_url}/reset-password/update"},
            )
        except Exception as e:
            logger.warning("Password reset request failed: %s", e)

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token"""
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            return {
                "id": user.id,
                "email": user.email,
                "email_confirmed_at": user.email_confirmed_at,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
                "created_at": user.created_at,
                "updated_at": user.updated_at
            }
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "timed out" in error_msg.lower():
                raise HTTPException(
                    status_code=504,
                    detail="Connection to authentication service timed out. Please try again later."
                )
            raise HTTPException(status_code=401, detail="Unauthorized")

    def logout(self, token: str, admin: Optional[Client] = None) -> bool:
        """Revoke the session server-side when a service role client is available"""
        if admin is None:
            # Tokens are stateless JWTs; without the admin API logout is cookie-only
            return False
        try:
            admin.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning("Session revocation failed: %s", e)
            return False

    def update_password(self, access_token: str, refresh_token: str, password: str) -> None:
        """Set a new password inside the caller's own (usually recovery) session"""
        try:
            self.supabase.auth.set_session(access_token, refresh_token)
        except Exception as e:
            logger.warning("Password update rejected, session invalid: %s", e)
            raise HTTPException(status_code=401, detail="Unauthorized")
        try:
            response = self.supabase.auth.update_user({"password": password})
            if not response.user:
                raise HTTPException(status_code=401, detail="Unauthorized")
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "password" in error_message.lower():
                raise HTTPException(status_code=400, detail=error_message)
            logger.error("Password update failed: %s", error_message)
            raise HTTPException(status_code=500, detail=f"Failed to update password: {error_message}")
