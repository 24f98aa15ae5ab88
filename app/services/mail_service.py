"""
Service mail - envoi des emails transactionnels via l'API HTTP du relais
"""

import logging

import requests
from fastapi import Depends

from app.core.config import Settings, get_settings
from app.core.errors import NotificationError
from app.models.user import User

logger = logging.getLogger(__name__)


class Mailer:
    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def enabled(self) -> bool:
        return bool(self.settings.MAIL_API_KEY)

    def send(self, to: str, subject: str, text: str):
        if not self.enabled:
            logger.info(f"Mail disabled, skipping '{subject}' to {to}")
            return

        payload = {
            "sender": {"email": self.settings.SENDER_EMAIL, "name": self.settings.SENDER_NAME},
            "to": [{"email": to}],
            "subject": subject,
            "textContent": text,
        }
        try:
            response = requests.post(
                self.settings.MAIL_API_URL,
                json=payload,
                headers={"api-key": self.settings.MAIL_API_KEY, "accept": "application/json"},
                timeout=self.settings.MAIL_TIMEOUT,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Error sending '{subject}' to {to}: {e}")
            raise NotificationError("Could not send email") from e

    def send_welcome(self, user: User):
        self.send(
            user.email,
            "Welcome to Task Manager",
            f"Hello {user.name},\n\n"
            f"Thanks for creating an account. Your account was created with the email {user.email}.\n",
        )

    def send_verify_otp(self, user: User, otp: str):
        hours = self.settings.VERIFY_OTP_EXPIRE_MIN // 60
        self.send(
            user.email,
            "Account Verification OTP",
            f"Your OTP for account verification is {otp}. "
            f"Verify your account using this OTP. It is valid for {hours} hours.",
        )

    def send_reset_otp(self, user: User, otp: str):
        self.send(
            user.email,
            "Password Reset OTP",
            f"Your OTP for resetting your password is {otp}. "
            f"It is valid for {self.settings.RESET_OTP_EXPIRE_MIN} minutes.",
        )


def get_mailer(settings: Settings = Depends(get_settings)) -> Mailer:
    return Mailer(settings)
