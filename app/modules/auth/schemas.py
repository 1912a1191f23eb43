from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Literal, Optional


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user_id: str
    email: str


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    password: str = Field(min_length=6)
    full_name: Optional[str] = Field(default=None, alias="fullName")


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str
    verification_required: bool = True


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None


class VerifyRequest(BaseModel):
    token_hash: str
    type: Literal["signup", "email", "recovery", "invite", "email_change"] = "email"


class EmailRequest(BaseModel):
    email: EmailStr


class PasswordUpdateRequest(BaseModel):
    password: str = Field(min_length=6)
    # Clients without the session cookies send the refresh token here
    refresh_token: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
