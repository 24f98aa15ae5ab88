from os import getenv


class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://taskmanager:taskmanager@db:5432/taskmanager")

    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_ALGORITHM = getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_DAYS = int(getenv("JWT_EXPIRE_DAYS", "7"))  # token + cookie valables 7 jours
    TOKEN_COOKIE_NAME = getenv("TOKEN_COOKIE_NAME", "token")

    VERIFY_OTP_EXPIRE_MIN = int(getenv("VERIFY_OTP_EXPIRE_MIN", "1440"))  # 24h
    RESET_OTP_EXPIRE_MIN = int(getenv("RESET_OTP_EXPIRE_MIN", "15"))

    # Relais mail transactionnel (API HTTP type Brevo). Sans clé => mails seulement loggés
    MAIL_API_URL = getenv("MAIL_API_URL", "https://api.brevo.com/v3/smtp/email")
    MAIL_API_KEY = getenv("MAIL_API_KEY", "")
    SENDER_EMAIL = getenv("SENDER_EMAIL", "no-reply@taskmanager.local")
    SENDER_NAME = getenv("SENDER_NAME", "Task Manager")
    MAIL_TIMEOUT = int(getenv("MAIL_TIMEOUT", "10"))

    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")


settings = Settings()


def get_settings() -> Settings:
    """Dépendance config (instance unique créée au démarrage)"""
    return settings
