from pydantic import EmailStr
from typing import Optional
from app.schemas.common import CamelModel, ApiResponse

# Champs optionnels: les champs manquants sont signalés par la route ("Missing Details")

class RegisterRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None

class LoginRequest(CamelModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None

class VerifyAccountRequest(CamelModel):
    otp: Optional[str] = None

class SendResetOtpRequest(CamelModel):
    email: Optional[EmailStr] = None

class ResetPasswordRequest(CamelModel):
    email: Optional[EmailStr] = None
    otp: Optional[str] = None
    new_password: Optional[str] = None

class TokenResponse(ApiResponse):
    token: str

class UserData(CamelModel):
    name: str
    is_account_verified: bool

class UserDataResponse(ApiResponse):
    user_data: UserData
