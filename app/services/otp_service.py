"""
Service OTP - codes à 6 chiffres pour la vérification d'email et le reset du mot de passe
"""

import logging
import secrets
import time
from enum import Enum
from typing import Optional

from app.core.config import Settings
from app.core.errors import DomainRuleViolation
from app.models.user import User

logger = logging.getLogger(__name__)

INVALID_OTP = "Invalid OTP"
EXPIRED_OTP = "OTP Expired"


class OtpPurpose(Enum):
    # (champ code, champ expiration, setting de durée en minutes)
    VERIFY = ("verify_otp", "verify_otp_expire_at", "VERIFY_OTP_EXPIRE_MIN")
    RESET = ("reset_otp", "reset_otp_expire_at", "RESET_OTP_EXPIRE_MIN")

    def __init__(self, code_field: str, expire_field: str, lifetime_setting: str):
        self.code_field = code_field
        self.expire_field = expire_field
        self.lifetime_setting = lifetime_setting

    def lifetime_ms(self, settings: Settings) -> int:
        return getattr(settings, self.lifetime_setting) * 60 * 1000


def now_ms() -> int:
    """Timestamp courant en millisecondes depuis epoch"""
    return int(time.time() * 1000)


def generate_otp() -> str:
    # 000000 à 999999, zéros initiaux conservés
    return f"{secrets.randbelow(1_000_000):06d}"


def issue_otp(user: User, purpose: OtpPurpose, settings: Settings, now: Optional[int] = None) -> str:
    """Génère un nouveau code et écrase l'ancien (un seul code actif par usage).

    Le code et son expiration sont toujours écrits ensemble. L'appelant doit
    commit la session.
    """
    if now is None:
        now = now_ms()

    otp = generate_otp()
    setattr(user, purpose.code_field, otp)
    setattr(user, purpose.expire_field, now + purpose.lifetime_ms(settings))

    logger.info(f"Issued {purpose.name.lower()} OTP for user {user.id}")
    return otp


def clear_otp(user: User, purpose: OtpPurpose):
    setattr(user, purpose.code_field, "")
    setattr(user, purpose.expire_field, 0)


def consume_otp(user: User, purpose: OtpPurpose, otp: str, now: Optional[int] = None):
    """Valide puis efface le code.

    Ordre des contrôles: code présent et identique, puis expiration. Un code
    expiré mais correct donne donc "OTP Expired", un code rejoué après usage
    donne "Invalid OTP".
    """
    if now is None:
        now = now_ms()

    stored = getattr(user, purpose.code_field) or ""
    if stored == "" or not otp or not secrets.compare_digest(stored.encode(), otp.encode()):
        raise DomainRuleViolation(INVALID_OTP)

    expire_at = getattr(user, purpose.expire_field) or 0
    if expire_at < now:
        raise DomainRuleViolation(EXPIRED_OTP)

    clear_otp(user, purpose)
