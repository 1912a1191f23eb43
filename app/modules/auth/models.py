# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration and email verification (auth.users table)
# - Password reset emails
# - Session issuance and refresh
# - JWT token generation and validation

"""
Supabase Auth provides:
- auth.sign_up() - Register new users (sends the verification email)
- auth.sign_in_with_password() - Authenticate users
- auth.verify_otp() - Confirm a signup or recovery link (token_hash)
- auth.resend() - Resend the signup verification email
- auth.reset_password_for_email() - Send the password reset email
- auth.refresh_session() - Exchange a refresh token for a new session
- auth.get_user() - Get current user from JWT token
- auth.set_session() + auth.update_user() - Change the password inside the caller's session
- auth.admin.sign_out() - Revoke a session (service role only)

Every row inserted into auth.users gets a matching public.profiles row
from the on_auth_user_created trigger (see app/modules/setup/sql.py).
"""
