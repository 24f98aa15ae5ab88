import logging

import bcrypt
from fastapi import APIRouter, Depends, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.auth import get_current_user_id
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import (
    AuthorizationFailure,
    ConflictError,
    DomainRuleViolation,
    NotFoundError,
    NotificationError,
    ValidationFailure,
)
from app.core.security import create_access_token
from app.models.user import User
from app.schemas.common import ApiResponse
from app.schemas.user import (
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    SendResetOtpRequest,
    TokenResponse,
    VerifyAccountRequest,
)
from app.services.mail_service import Mailer, get_mailer
from app.services.otp_service import OtpPurpose, consume_otp, issue_otp

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

INVALID_CREDENTIALS = "Invalid email or password"
USER_NOT_FOUND = "User not found"

# Hash calculé une fois: un email inconnu coûte aussi un bcrypt.checkpw
_DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt())


def set_token_cookie(response: Response, token: str, settings: Settings):
    # cookie cross-site: le front est servi depuis un autre domaine
    response.set_cookie(
        key=settings.TOKEN_COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRE_DAYS * 24 * 60 * 60,
        path="/",
        httponly=True,
        secure=True,
        samesite="none",
    )


def get_user_by_email(db: Session, email: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise NotFoundError(USER_NOT_FOUND)
    return user


def create_user(db: Session, name: str, email: str, password: str) -> User:
    user = User(name=name, email=email)
    user.set_password(password)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # inscription concurrente avec le même email
        db.rollback()
        raise ConflictError("User already exists")
    db.refresh(user)
    return user


@router.post("/register", response_model=TokenResponse, response_model_exclude_unset=True)
def register(
    body: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
):
    """Créer un compte, connecter l'utilisateur et envoyer le mail de bienvenue"""
    if not body.name or not body.email or not body.password:
        raise ValidationFailure("Missing Details")

    # Vérifie si l'email existe déjà
    if db.query(User).filter(User.email == body.email).first():
        raise ConflictError("User already exists")

    user = create_user(db, body.name, body.email, body.password)
    logger.info(f"Registered user {user.id}")

    token = create_access_token(user.id, settings)
    set_token_cookie(response, token, settings)

    # Le mail de bienvenue est best-effort: l'utilisateur reste créé
    try:
        mailer.send_welcome(user)
    except NotificationError:
        logger.warning(f"Welcome email not delivered for user {user.id}")

    return {"success": True, "token": token}


@router.post("/login", response_model=TokenResponse, response_model_exclude_unset=True)
def login(
    body: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Se connecter et recevoir le token"""
    if not body.email or not body.password:
        raise ValidationFailure("Email and password are required")

    # Même message pour email inconnu et mauvais mot de passe
    user = db.query(User).filter(User.email == body.email).first()
    if not user:
        bcrypt.checkpw(body.password.encode(), _DUMMY_HASH)
        logger.info("Failed login attempt")
        raise AuthorizationFailure(INVALID_CREDENTIALS)
    if not user.verify_password(body.password):
        logger.info("Failed login attempt")
        raise AuthorizationFailure(INVALID_CREDENTIALS)

    token = create_access_token(user.id, settings)
    set_token_cookie(response, token, settings)
    return {"success": True, "token": token}


@router.post("/logout", response_model=ApiResponse, response_model_exclude_unset=True)
def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(
        key=settings.TOKEN_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=True,
        samesite="none",
    )
    return {"success": True, "message": "Logged Out"}


@router.post("/send-verify-otp", response_model=ApiResponse, response_model_exclude_unset=True)
def send_verify_otp(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
):
    """Envoie un code de vérification (24h) sur l'email du compte"""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError(USER_NOT_FOUND)

    if user.is_account_verified:
        raise DomainRuleViolation("Account already verified")

    otp = issue_otp(user, OtpPurpose.VERIFY, settings)
    db.commit()

    mailer.send_verify_otp(user, otp)
    return {"success": True, "message": "Verification OTP sent on Email"}


@router.post("/verify-account", response_model=ApiResponse, response_model_exclude_unset=True)
def verify_account(
    body: VerifyAccountRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not body.otp:
        raise ValidationFailure("Missing OTP")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError(USER_NOT_FOUND)

    consume_otp(user, OtpPurpose.VERIFY, body.otp)
    user.is_account_verified = True
    db.commit()
    return {"success": True, "message": "Email verified successfully"}


@router.get("/is-auth", response_model=ApiResponse, response_model_exclude_unset=True)
def is_authenticated(user_id: int = Depends(get_current_user_id)):
    return {"success": True}


@router.post("/send-reset-otp", response_model=ApiResponse, response_model_exclude_unset=True)
def send_reset_otp(
    body: SendResetOtpRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
):
    """Envoie un code de reset du mot de passe (15 min)"""
    if not body.email:
        raise ValidationFailure("Email is required")

    user = get_user_by_email(db, body.email)
    otp = issue_otp(user, OtpPurpose.RESET, settings)
    db.commit()

    mailer.send_reset_otp(user, otp)
    return {"success": True, "message": "OTP sent to your email"}


@router.post("/reset-password", response_model=ApiResponse, response_model_exclude_unset=True)
def reset_password(body: ResetPasswordRequest, db: Session = Depends(get_db)):
    if not body.email or not body.otp or not body.new_password:
        raise ValidationFailure("Email, OTP and new password are required")

    user = get_user_by_email(db, body.email)
    consume_otp(user, OtpPurpose.RESET, body.otp)
    user.set_password(body.new_password)
    db.commit()
    return {"success": True, "message": "Password has been reset successfully"}
