from sqlalchemy import Column, Integer, BigInteger, String, Boolean, DateTime
from datetime import datetime
from app.core.database import Base
import bcrypt

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Vérification email
    is_account_verified = Column(Boolean, default=False, nullable=False)
    verify_otp = Column(String, default="", nullable=False)
    verify_otp_expire_at = Column(BigInteger, default=0, nullable=False)  # ms depuis epoch, 0 = pas de code

    # Reset du mot de passe
    reset_otp = Column(String, default="", nullable=False)
    reset_otp_expire_at = Column(BigInteger, default=0, nullable=False)

    def set_password(self, password: str):
        self.password_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()

    def verify_password(self, password: str) -> bool:
        return bcrypt.checkpw(password.encode(), self.password_hash.encode())
